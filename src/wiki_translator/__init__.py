"""
Traduction de pages wiki rendues via LLM.

Wiki Translator traduit le HTML rendu d'une page wiki vers une langue cible
en utilisant un LLM compatible OpenAI (Gemini par défaut).

Le processus de traduction :
1. Segmente le HTML : chaque nœud texte devient un placeholder adressable
2. Localise les liens internes vers la variante traduite de leur cible
3. Résout les unités : cache d'empreintes d'abord, fournisseur ensuite
4. Remplace les placeholders par leur traduction (serveur ou client)

Fonctionnalités principales :
- Cache persistant des traductions par empreinte SHA-256 (SQLAlchemy)
- Mode tolérant (batches) et mode strict (pages, sections)
- Squelette servi immédiatement puis rempli par le DeliveryScheduler
- API HTTP (Flask) et ligne de commande (Typer)
- Logs détaillés de chaque requête LLM

Organisation du package :
- units.py : Unités de traduction et empreintes
- htmlpage/ : Segmentation, placeholders, liens et sections
- store.py : Cache d'empreintes (SQLAlchemy)
- llm.py : Client LLM avec templates Jinja2, logging et circuit breaker
- translation/ : Orchestration (PageTranslator, SectionTranslator)
- api/ : Application Flask
- delivery/ : Livraison progressive côté client

Usage minimal :
    >>> from wiki_translator import LLM, FingerprintStore, PageTranslator
    >>>
    >>> # Requiert API_KEY dans .env
    >>> llm = LLM(model_name="gemini-2.0-flash")
    >>> store = FingerprintStore("sqlite:///translations.db")
    >>> translator = PageTranslator(llm, store)
    >>> translator.translate_html("<p>Hello world</p>", "es")
    '<p>Hola mundo</p>'

Configuration :
    Créez un fichier .env :

        API_KEY=votre-cle-ici
        LLM_MODEL=gemini-2.0-flash
        DATABASE_URL=sqlite:///translations.db

Version: 0.1.0
"""

from .exceptions import (
    TranslatorError,
    ConfigurationError,
    ProviderError,
    ProviderTransportError,
    ProviderResponseError,
    CacheWriteError,
    SegmentationAmbiguity,
    RevisionNotFound,
)
from .units import TranslationUnit, content_hash
from .llm import LLM
from .circuit import CircuitBreaker
from .store import FingerprintStore
from .htmlpage import HtmlPage, Segmenter, split_sections
from .translation import BatchOutcome, PageTranslator, SectionTranslator
from .delivery import DeliveryReport, DeliveryScheduler

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Exceptions
    "TranslatorError",
    "ConfigurationError",
    "ProviderError",
    "ProviderTransportError",
    "ProviderResponseError",
    "CacheWriteError",
    "SegmentationAmbiguity",
    "RevisionNotFound",
    # Unités
    "TranslationUnit",
    "content_hash",
    # Fournisseur et cache
    "LLM",
    "CircuitBreaker",
    "FingerprintStore",
    # HTML
    "HtmlPage",
    "Segmenter",
    "split_sections",
    # Orchestration
    "BatchOutcome",
    "PageTranslator",
    "SectionTranslator",
    "DeliveryReport",
    "DeliveryScheduler",
]
