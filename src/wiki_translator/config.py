import logging
import os
from dataclasses import dataclass

from dotenv import load_dotenv


class ConfigBase:
    # Attribut de classe pour le singleton
    _instance = None
    _locked: bool = False

    def __new__(cls, *args, **kwargs):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def lock(self):
        self._locked = True

    def __setattr__(self, name, value):
        if getattr(self, "_locked", False):
            raise AttributeError("Configuration is locked")
        super().__setattr__(name, value)


class TemplateNames(ConfigBase):
    Batch_Template: str = "translate_batch.jinja"


class Logger_Level(ConfigBase):
    level: int = logging.INFO
    console_level: int = logging.ERROR
    file_level: int = logging.DEBUG


class Limits(ConfigBase):
    # Côté serveur : nombre max de chaînes acceptées par requête batch
    batch_cap: int = 50
    # Côté client : taille des lots envoyés (doit rester <= batch_cap)
    chunk_size: int = 10
    max_concurrent: int = 5
    max_attempts: int = 3
    base_delay: float = 1.0


def lock_config():
    """Verrouille la configuration pour empêcher les modifications ultérieures."""
    Logger_Level().lock()
    TemplateNames().lock()
    Limits().lock()


DEFAULT_LLM_URL = "https://generativelanguage.googleapis.com/v1beta/openai/"
DEFAULT_LLM_MODEL = "gemini-2.0-flash"


@dataclass
class Settings:
    """
    Paramètres d'exécution lus depuis l'environnement (et le fichier .env).

    Attributes:
        api_key: Clé de l'API du fournisseur (None = non configurée)
        model_name: Modèle utilisé pour la traduction
        llm_url: URL de base compatible OpenAI
        llm_timeout: Délai maximum d'un appel fournisseur (secondes)
        database_url: URL SQLAlchemy du cache d'empreintes
        batch_cap: Nombre max de chaînes par requête batch
        article_path: Préfixe des liens d'articles internes
        revisions_dir: Répertoire des révisions rendues (HtmlDirectorySource)
    """

    api_key: str | None = None
    model_name: str = DEFAULT_LLM_MODEL
    llm_url: str = DEFAULT_LLM_URL
    llm_timeout: float = 120.0
    database_url: str = "sqlite:///translations.db"
    batch_cap: int = Limits.batch_cap
    article_path: str = "/wiki/"
    revisions_dir: str = "revisions"

    @classmethod
    def from_env(cls) -> "Settings":
        """Construit les paramètres depuis les variables d'environnement."""
        load_dotenv()

        return cls(
            api_key=os.getenv("API_KEY") or None,
            model_name=os.getenv("LLM_MODEL", DEFAULT_LLM_MODEL),
            llm_url=os.getenv("LLM_URL", DEFAULT_LLM_URL),
            llm_timeout=float(os.getenv("LLM_TIMEOUT", "120")),
            database_url=os.getenv("DATABASE_URL", "sqlite:///translations.db"),
            batch_cap=int(os.getenv("BATCH_CAP", str(Limits.batch_cap))),
            article_path=os.getenv("ARTICLE_PATH", "/wiki/"),
            revisions_dir=os.getenv("REVISIONS_DIR", "revisions"),
        )
