"""
Classe HtmlPage : frontière entre le HTML sérialisé et l'arbre BeautifulSoup.

Le HTML n'est parsé qu'à l'entrée et sérialisé qu'à la sortie ; entre les
deux, tout le travail se fait sur l'arbre.
"""

from typing import Iterator, Mapping

from bs4 import BeautifulSoup
from bs4.element import Tag

from .links import localize_links
from .placeholder import fill_placeholders, iter_placeholders
from .segmenter import SegmentationResult, Segmenter


class HtmlPage:
    """
    Page (ou fragment) HTML en cours de traduction.

    Attributes:
        soup: L'arbre BeautifulSoup parsé (backend html.parser, les fragments
            restent des fragments)
    """

    def __init__(self, soup: BeautifulSoup) -> None:
        self.soup = soup
        self._segmenter = Segmenter()

    @classmethod
    def from_html(cls, html: str) -> "HtmlPage":
        return cls(BeautifulSoup(html, "html.parser"))

    def localize_links(self, lang: str, article_path: str = "/wiki/") -> int:
        return localize_links(self.soup, lang, article_path)

    def segment(self) -> SegmentationResult:
        return self._segmenter.segment(self.soup)

    def skeleton(self, lang: str, article_path: str = "/wiki/") -> SegmentationResult:
        """
        Prépare la page à être servie immédiatement.

        Localise les liens puis remplace le texte par des placeholders.
        """
        self.localize_links(lang, article_path)
        return self.segment()

    def placeholders(self) -> Iterator[Tag]:
        return iter_placeholders(self.soup)

    def fill(self, translations: Mapping[str, str]) -> list[str]:
        """Remplace les placeholders traduits. Retourne les textes non résolus."""
        return fill_placeholders(self.soup, translations)

    def to_html(self) -> str:
        return str(self.soup)

    def __str__(self) -> str:
        return self.to_html()

    def __repr__(self) -> str:
        count = sum(1 for _ in self.placeholders())
        return f"HtmlPage({count} placeholder(s))"
