"""
Localisation des liens internes.

Chaque lien interne vers un article reçoit la langue cible comme segment de
chemin supplémentaire, pour pointer vers la variante traduite de sa cible :

    /wiki/Apple        ->  /wiki/Apple/es
    /wiki/Apple#Taste  ->  /wiki/Apple/es#Taste
"""

from urllib.parse import unquote, urlsplit, urlunsplit

from bs4 import BeautifulSoup
from bs4.element import Tag

from ..logger import get_logger
from .constants import EXCLUDED_NAMESPACES, MISSING_LINK_CLASS

logger = get_logger(__name__)


def _has_class(tag: Tag, name: str) -> bool:
    return name in (tag.get("class") or [])


def _is_excluded_title(title: str) -> bool:
    """Vrai si le titre appartient à un espace de noms hors contenu."""
    if ":" not in title:
        return False
    namespace = unquote(title.split(":", 1)[0]).replace("_", " ").strip()
    for excluded in EXCLUDED_NAMESPACES:
        if namespace in (excluded, f"{excluded} talk"):
            return True
    return False


def localize_href(href: str, lang: str, article_path: str = "/wiki/") -> str | None:
    """
    Calcule la cible localisée d'un lien, ou None si le lien est ignoré.

    Ignorés : liens externes (schéma ou //), ancres pures, liens hors du
    chemin d'articles, espaces de noms exclus, liens déjà localisés.
    """
    href = href.strip()
    if not href or href.startswith("#") or href.startswith("//"):
        return None

    parts = urlsplit(href)
    if parts.scheme or parts.netloc:
        return None
    if not parts.path.startswith(article_path):
        return None

    title = parts.path[len(article_path):]
    if not title or _is_excluded_title(title):
        return None
    if title.endswith(f"/{lang}"):
        return None

    path = f"{parts.path.rstrip('/')}/{lang}"
    return urlunsplit(("", "", path, parts.query, parts.fragment))


def localize_links(
    soup: BeautifulSoup | Tag, lang: str, article_path: str = "/wiki/"
) -> int:
    """
    Réécrit les liens internes vers leur variante traduite.

    Opère sur les éléments <a> (pas sur le texte) et doit donc passer avant
    ou indépendamment de la segmentation.

    Args:
        soup: Arbre HTML à modifier
        lang: Code de la langue cible (ex: "es")
        article_path: Préfixe des chemins d'articles

    Returns:
        Nombre de liens réécrits
    """
    rewritten = 0
    for link in soup.find_all("a", href=True):
        if _has_class(link, MISSING_LINK_CLASS):
            continue

        new_href = localize_href(str(link["href"]), lang, article_path)
        if new_href is None:
            continue

        link["href"] = new_href
        rewritten += 1

    logger.debug(f"🔗 {rewritten} lien(s) localisé(s) vers '{lang}'")
    return rewritten
