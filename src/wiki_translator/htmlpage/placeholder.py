"""
Création, découverte et remplacement des placeholders (tokens).

Un placeholder est un <span class="wt-token" data-source="..."> qui contient
le texte source. data-source porte le texte normalisé encodé en base64
(UTF-8) pour le transport.
"""

import base64
import binascii
from typing import Iterator, Mapping

from bs4 import BeautifulSoup
from bs4.element import NavigableString, Tag

from .constants import (
    SOURCE_ATTRIBUTE,
    TOKEN_CLASS,
    TOKEN_FAILED_CLASS,
    TOKEN_FAILED_STYLE,
    TOKEN_FAILED_TITLE,
    TOKEN_STYLE,
)


def encode_source(text: str) -> str:
    """Encode un texte en base64 UTF-8."""
    return base64.b64encode(text.encode("utf-8")).decode("ascii")


def decode_source(encoded: str) -> str:
    """
    Décode un data-source. Retourne "" si la valeur est invalide.

    Example:
        >>> decode_source(encode_source("Café"))
        'Café'
        >>> decode_source("%%%")
        ''
    """
    try:
        return base64.b64decode(encoded, validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError, ValueError):
        return ""


def make_placeholder(soup: BeautifulSoup, text: str) -> Tag:
    """Crée un placeholder portant le texte normalisé."""
    span = soup.new_tag("span")
    span["class"] = [TOKEN_CLASS]
    span[SOURCE_ATTRIBUTE] = encode_source(text)
    span["style"] = TOKEN_STYLE
    span.string = text
    return span


def is_placeholder(tag: Tag) -> bool:
    return tag.name == "span" and TOKEN_CLASS in (tag.get("class") or [])


def iter_placeholders(soup: BeautifulSoup | Tag) -> Iterator[Tag]:
    """Parcourt les placeholders encore présents, dans l'ordre du document."""
    yield from soup.find_all("span", class_=TOKEN_CLASS)


def placeholder_text(tag: Tag) -> str:
    """Texte source d'un placeholder ("" si data-source est illisible)."""
    return decode_source(str(tag.get(SOURCE_ATTRIBUTE, "")))


def apply_translation(tag: Tag, translated: str) -> None:
    """Remplace le placeholder par un nœud texte littéral."""
    tag.replace_with(NavigableString(translated))


def mark_failed(tag: Tag) -> None:
    """Passe un placeholder dans l'état visible "échec"."""
    classes = list(tag.get("class") or [])
    if TOKEN_FAILED_CLASS not in classes:
        classes.append(TOKEN_FAILED_CLASS)
    tag["class"] = classes
    tag["style"] = TOKEN_FAILED_STYLE
    tag["title"] = TOKEN_FAILED_TITLE


def is_failed(tag: Tag) -> bool:
    return TOKEN_FAILED_CLASS in (tag.get("class") or [])


def fill_placeholders(
    soup: BeautifulSoup | Tag, translations: Mapping[str, str]
) -> list[str]:
    """
    Remplace chaque placeholder dont le texte a une traduction.

    Les espaces de bordure ont été sortis du placeholder à la segmentation :
    ils restent en place comme nœuds texte voisins.

    Args:
        soup: Arbre contenant les placeholders
        translations: Dictionnaire {texte normalisé: traduction}

    Returns:
        Textes des placeholders restés sans traduction (dans l'ordre, sans doublon)
    """
    unresolved: list[str] = []
    seen: set[str] = set()

    # Liste figée avant mutation de l'arbre
    for tag in list(iter_placeholders(soup)):
        text = placeholder_text(tag)
        translated = translations.get(text)
        if translated is None:
            if text not in seen:
                seen.add(text)
                unresolved.append(text)
            continue
        apply_translation(tag, translated)

    return unresolved
