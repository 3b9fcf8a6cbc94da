"""
Module de traduction : orchestration cache + fournisseur.

Organisation du module :
- parser.py : Parsing strict des sorties du fournisseur
- engine.py : PageTranslator (modes tolérant et strict)
- sections.py : Traduction progressive d'une révision section par section

Usage :
    >>> from wiki_translator.translation import PageTranslator
    >>> translator = PageTranslator(llm, store)
    >>> translator.translate_strings(["Hello"], "es")
    {'Hello': 'Hola'}
"""

from .parser import parse_provider_output, strip_wrapping
from .engine import BatchOutcome, PageTranslator
from .sections import HtmlDirectorySource, RevisionSource, SectionTranslator

__all__ = [
    "parse_provider_output",
    "strip_wrapping",
    "BatchOutcome",
    "PageTranslator",
    "HtmlDirectorySource",
    "RevisionSource",
    "SectionTranslator",
]
