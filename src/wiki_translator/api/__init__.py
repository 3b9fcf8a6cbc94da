"""
Application HTTP (Flask) exposant la traduction par lots et par sections.
"""

from typing import Optional

from flask import Flask

from ..config import Settings, lock_config
from ..llm import LLM
from ..logger import get_logger
from ..store import FingerprintStore
from ..translation import HtmlDirectorySource, PageTranslator, SectionTranslator
from .routes import api_bp, truncate_batch

logger = get_logger(__name__)

URL_PREFIX = "/wiki-translator"


def build_translator(settings: Settings) -> PageTranslator:
    """Construit l'orchestrateur (client fournisseur + cache) depuis les paramètres."""
    llm = LLM(
        model_name=settings.model_name,
        url=settings.llm_url,
        api_key=settings.api_key,
        timeout=settings.llm_timeout,
    )
    store = FingerprintStore(settings.database_url)
    return PageTranslator(llm, store, article_path=settings.article_path)


def create_app(
    translator: Optional[PageTranslator] = None,
    sections: Optional[SectionTranslator] = None,
    settings: Optional[Settings] = None,
) -> Flask:
    """
    Crée l'application Flask.

    Args:
        translator: Orchestrateur (construit depuis settings si None)
        sections: Traducteur de sections (HtmlDirectorySource si None)
        settings: Paramètres (lus depuis l'environnement si None)
    """
    settings = settings or Settings.from_env()
    lock_config()
    if translator is None:
        translator = build_translator(settings)
    if sections is None:
        sections = SectionTranslator(
            HtmlDirectorySource(settings.revisions_dir), translator
        )

    app = Flask(__name__)
    # Les traductions sont renvoyées dans l'ordre des chaînes reçues
    app.json.sort_keys = False
    app.extensions["wiki_translator"] = {
        "translator": translator,
        "sections": sections,
        "settings": settings,
    }
    app.register_blueprint(api_bp, url_prefix=URL_PREFIX)

    @app.get("/health")
    def health():
        return {"status": "ok"}, 200

    logger.info(f"🚀 API prête (préfixe {URL_PREFIX}, plafond {settings.batch_cap})")
    return app


__all__ = ["create_app", "build_translator", "truncate_batch", "URL_PREFIX"]
