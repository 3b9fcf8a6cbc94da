"""
Module de segmentation et de manipulation des pages HTML.

Ce module fournit des outils pour :
- Remplacer le texte traduisible par des placeholders adressables
- Localiser les liens internes vers la variante traduite de leur cible
- Remplacer les placeholders par leur traduction
- Découper une page rendue en sections

Organisation du module :
- constants.py : Constantes (classes CSS, balises ignorées, espaces de noms)
- placeholder.py : Encodage et manipulation des placeholders
- links.py : Localisation des liens internes
- segmenter.py : Segmenter (texte -> placeholders + unités)
- sections.py : Découpage en sections
- page.py : Classe HtmlPage (parse / sérialisation)
"""

from .constants import (
    TOKEN_CLASS,
    TOKEN_FAILED_CLASS,
    SOURCE_ATTRIBUTE,
    REMOVED_TAGS,
    EXCLUDED_NAMESPACES,
)
from .placeholder import (
    encode_source,
    decode_source,
    make_placeholder,
    iter_placeholders,
    placeholder_text,
    apply_translation,
    mark_failed,
    is_failed,
    fill_placeholders,
)
from .links import localize_links, localize_href
from .segmenter import Segmenter, SegmentationResult, segment
from .sections import split_sections
from .page import HtmlPage

__all__ = [
    # Constantes
    "TOKEN_CLASS",
    "TOKEN_FAILED_CLASS",
    "SOURCE_ATTRIBUTE",
    "REMOVED_TAGS",
    "EXCLUDED_NAMESPACES",
    # Placeholders
    "encode_source",
    "decode_source",
    "make_placeholder",
    "iter_placeholders",
    "placeholder_text",
    "apply_translation",
    "mark_failed",
    "is_failed",
    "fill_placeholders",
    # Liens
    "localize_links",
    "localize_href",
    # Segmentation
    "Segmenter",
    "SegmentationResult",
    "segment",
    "split_sections",
    "HtmlPage",
]
