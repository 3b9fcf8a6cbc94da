"""
Découpage d'une page rendue en sections.

La section 0 est l'introduction (tout ce qui précède le premier titre de
niveau 2) ; la section n commence au n-ième titre <h2>. Les pages rendues par
MediaWiki enveloppent le contenu dans <div class="mw-parser-output"> et, dans
les versions récentes, chaque titre dans <div class="mw-heading mw-heading2">.
"""

from bs4 import BeautifulSoup
from bs4.element import PageElement, Tag

from .constants import SECTION_HEADING

PARSER_OUTPUT_CLASS = "mw-parser-output"
HEADING_WRAPPER_CLASS = "mw-heading2"


def _content_root(soup: BeautifulSoup) -> Tag:
    root = soup.body or soup
    wrapper = root.find("div", class_=PARSER_OUTPUT_CLASS)
    return wrapper if isinstance(wrapper, Tag) else root


def _starts_section(node: PageElement) -> bool:
    if not isinstance(node, Tag):
        return False
    if node.name == SECTION_HEADING:
        return True
    return HEADING_WRAPPER_CLASS in (node.get("class") or [])


def split_sections(html: str) -> list[str]:
    """
    Découpe le HTML en sections sérialisées.

    Returns:
        Liste des sections. L'introduction est omise si la page commence
        directement par un titre : une section vide marque la fin du document.

    Example:
        >>> split_sections("<p>Lead</p><h2>A</h2><p>a</p>")
        ['<p>Lead</p>', '<h2>A</h2><p>a</p>']
    """
    soup = BeautifulSoup(html, "html.parser")
    sections: list[list[str]] = [[]]

    for node in _content_root(soup).children:
        if _starts_section(node):
            sections.append([])
        sections[-1].append(str(node))

    if not "".join(sections[0]).strip():
        sections.pop(0)
    return ["".join(parts) for parts in sections]
