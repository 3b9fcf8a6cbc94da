"""
Traduction section par section d'une révision.

Le rendu d'une révision en HTML est fourni par une RevisionSource (pipeline
hôte). Une section vide ou absente ("" en sortie) marque la fin du document :
le client arrête alors de demander les sections suivantes.
"""

from pathlib import Path
from typing import TYPE_CHECKING, Optional, Protocol

from ..exceptions import RevisionNotFound
from ..htmlpage import HtmlPage, split_sections
from ..logger import get_logger

if TYPE_CHECKING:
    from .engine import PageTranslator

logger = get_logger(__name__)


class RevisionSource(Protocol):
    def get_section_html(self, rev_id: int, section: int) -> Optional[str]:
        """
        Retourne le HTML rendu d'une section, ou None si elle n'existe pas.

        Raises:
            RevisionNotFound: Si la révision est inconnue
        """
        ...


class HtmlDirectorySource:
    """
    Révisions rendues stockées sous forme de fichiers <root>/<rev_id>.html.

    Chaque fichier est découpé en sections au niveau des titres <h2>.
    """

    def __init__(self, root: str | Path) -> None:
        self.root = Path(root)

    def get_section_html(self, rev_id: int, section: int) -> Optional[str]:
        path = self.root / f"{rev_id}.html"
        if not path.is_file():
            raise RevisionNotFound(rev_id)

        sections = split_sections(path.read_text(encoding="utf-8"))
        if section < 0 or section >= len(sections):
            return None
        return sections[section]


class SectionTranslator:
    """
    Sert les sections d'une révision, traduites ou en squelette.

    Attributes:
        source: Fournisseur du HTML rendu des révisions
        translator: Orchestrateur de traduction
    """

    def __init__(self, source: RevisionSource, translator: "PageTranslator") -> None:
        self.source = source
        self.translator = translator

    def translate_section(self, rev_id: int, lang: str, section: int = 0) -> dict:
        """
        Traduit une section en mode strict.

        Returns:
            {"html": str, "section": int} ; html == "" si la section n'existe pas

        Raises:
            RevisionNotFound: Si la révision est inconnue
            ProviderError: Si le fournisseur échoue
            SegmentationAmbiguity: Si une unité reste sans traduction
        """
        html = self.source.get_section_html(rev_id, section)
        if not html:
            logger.debug(f"Fin du document {rev_id} atteinte (section {section})")
            return {"html": "", "section": section}

        translated = self.translator.translate_html(html, lang)
        logger.info(f"📄 Section {section} de la révision {rev_id} traduite ({lang})")
        return {"html": translated, "section": section}

    def skeleton_section(self, rev_id: int, lang: str, section: int = 0) -> dict:
        """
        Construit le squelette d'une section, servi immédiatement.

        Aucun appel au fournisseur : les liens sont localisés et le texte
        remplacé par des placeholders que le client remplira.

        Returns:
            {"html": str, "section": int, "units": int}
        """
        html = self.source.get_section_html(rev_id, section)
        if not html:
            return {"html": "", "section": section, "units": 0}

        page = HtmlPage.from_html(html)
        _, units, _ = page.skeleton(lang, self.translator.article_path)
        return {"html": page.to_html(), "section": section, "units": len(units)}
