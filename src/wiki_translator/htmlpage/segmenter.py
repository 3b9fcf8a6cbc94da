"""
Segmentation d'un arbre HTML en unités de traduction.

Chaque nœud texte non vide est remplacé par un placeholder portant son texte
normalisé ; les espaces de bordure restent en place comme nœuds texte
voisins. Les sous-arbres opaques (appels de notes, liens de modification de
section, placeholders existants) sont laissés intacts, et les balises de
métadonnées (style, script, link, meta) sont supprimées.
"""

from typing import NamedTuple

from bs4 import BeautifulSoup
from bs4.element import NavigableString, PageElement, Tag

from ..logger import get_logger
from ..units import TranslationUnit, split_whitespace
from .constants import OPAQUE_ELEMENTS, REMOVED_TAGS
from .placeholder import is_placeholder, make_placeholder

logger = get_logger(__name__)


class SegmentationResult(NamedTuple):
    """
    Résultat de Segmenter.segment().

    Attributes:
        soup: L'arbre modifié, contenant les placeholders
        units: Unités uniques, dans l'ordre du document
        placeholders: Tous les placeholders créés (un par occurrence)
    """

    soup: BeautifulSoup
    units: list[TranslationUnit]
    placeholders: list[Tag]


def is_opaque(tag: Tag) -> bool:
    """Vrai si le sous-arbre ne doit pas être parcouru ni tokenisé."""
    if is_placeholder(tag):
        return True

    class_attr = " ".join(tag.get("class") or [])
    for name, class_fragment in OPAQUE_ELEMENTS:
        if tag.name == name and class_fragment in class_attr:
            return True
    return False


class Segmenter:
    """
    Parcourt un arbre BeautifulSoup en profondeur et le tokenise.

    Example:
        >>> soup = BeautifulSoup("<p>  Hello world  </p>", "html.parser")
        >>> soup, units, _ = Segmenter().segment(soup)
        >>> [u.text for u in units]
        ['Hello world']
    """

    def segment(self, soup: BeautifulSoup) -> SegmentationResult:
        """
        Remplace le texte par des placeholders.

        Args:
            soup: Arbre à segmenter (modifié en place)

        Returns:
            SegmentationResult(soup, units, placeholders)
        """
        units: list[TranslationUnit] = []
        seen: set[TranslationUnit] = set()
        placeholders: list[Tag] = []

        # Retirés partout, y compris dans <head>
        for tag in soup.find_all(list(REMOVED_TAGS)):
            tag.decompose()

        root = soup.body or soup
        self._process(soup, root, units, seen, placeholders)

        logger.debug(
            f"✂️ Segmentation : {len(placeholders)} placeholder(s), "
            f"{len(units)} unité(s) unique(s)"
        )
        return SegmentationResult(soup, units, placeholders)

    def _process(
        self,
        soup: BeautifulSoup,
        node: Tag,
        units: list[TranslationUnit],
        seen: set[TranslationUnit],
        placeholders: list[Tag],
    ) -> None:
        # Copie des enfants : l'arbre est modifié pendant la boucle
        for child in list(node.children):
            if isinstance(child, Tag):
                if not is_opaque(child):
                    self._process(soup, child, units, seen, placeholders)
                continue

            if type(child) is not NavigableString:
                # Commentaires, CDATA, doctype...
                continue

            placeholder = self._wrap_text(soup, child)
            if placeholder is None:
                continue

            placeholders.append(placeholder)
            unit = TranslationUnit(placeholder.get_text())
            if unit not in seen:
                seen.add(unit)
                units.append(unit)

    def _wrap_text(self, soup: BeautifulSoup, text_node: PageElement) -> Tag | None:
        """Remplace un nœud texte par espaces + placeholder + espaces."""
        leading, core, trailing = split_whitespace(str(text_node))
        if not core:
            return None

        placeholder = make_placeholder(soup, core)
        text_node.replace_with(placeholder)
        if leading:
            placeholder.insert_before(NavigableString(leading))
        if trailing:
            placeholder.insert_after(NavigableString(trailing))
        return placeholder


def segment(soup: BeautifulSoup) -> SegmentationResult:
    """Raccourci pour Segmenter().segment(soup)."""
    return Segmenter().segment(soup)
