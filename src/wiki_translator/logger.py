"""
Configuration du logging pour wiki-translator.

Chaque module obtient son logger via get_logger(__name__). Les messages sont
envoyés :
- sur la console (via tqdm.write pour ne pas casser les barres de progression)
- dans un fichier de session logs/run_YYYYMMDD_HHMMSS/translation.log

Le fichier n'est créé qu'au premier message écrit. Le répertoire de base
peut être changé via la variable WIKI_TRANSLATOR_LOG_DIR ou
LogSession.configure() (utile pour les tests).
"""

import logging
import os
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

from tqdm import tqdm

from .config import Logger_Level


# ============================================================
# 🔹 Session de logs
# ============================================================


class LogSession:
    """
    Regroupe tous les logs d'une exécution dans un répertoire unique.

    Le répertoire (base/run_YYYYMMDD_HHMMSS) est créé paresseusement au
    premier accès.
    """

    _base_dir: Optional[Path] = None
    _session_dir: Optional[Path] = None

    @classmethod
    def configure(cls, base_dir: str | Path) -> None:
        """Change le répertoire de base et démarre une nouvelle session."""
        cls._base_dir = Path(base_dir)
        cls._session_dir = None

    @classmethod
    def get_session_dir(cls) -> Path:
        """Retourne (et crée si besoin) le répertoire de la session en cours."""
        if cls._session_dir is None:
            base = cls._base_dir or Path(os.getenv("WIKI_TRANSLATOR_LOG_DIR", "logs"))
            timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
            cls._session_dir = base / f"run_{timestamp}"
            cls._session_dir.mkdir(parents=True, exist_ok=True)
        return cls._session_dir

    @classmethod
    def reset(cls) -> None:
        """Oublie la session courante (utile pour les tests)."""
        cls._base_dir = None
        cls._session_dir = None


# ============================================================
# 🔹 Handlers
# ============================================================


class TqdmLoggingHandler(logging.Handler):
    """Handler console qui passe par tqdm.write()."""

    def emit(self, record):
        try:
            tqdm.write(self.format(record), file=sys.stderr)
        except Exception:
            self.handleError(record)


class LazyFileHandler(logging.Handler):
    """
    Handler fichier qui résout son chemin au premier message.

    Le chemin est recalculé depuis la session courante, ce qui permet à
    LogSession.configure() de rediriger les logs après la création des
    loggers de module.
    """

    def __init__(self, filename: str, level: int = logging.NOTSET):
        super().__init__(level)
        self.filename = filename
        self._handler: Optional[logging.FileHandler] = None
        self._path: Optional[Path] = None

    def _ensure_handler(self) -> logging.FileHandler:
        path = LogSession.get_session_dir() / self.filename
        if self._handler is None or path != self._path:
            if self._handler is not None:
                self._handler.close()
            self._path = path
            self._handler = logging.FileHandler(path, mode="a", encoding="utf-8")
            if self.formatter:
                self._handler.setFormatter(self.formatter)
        return self._handler

    def emit(self, record):
        try:
            self._ensure_handler().emit(record)
        except Exception:
            self.handleError(record)

    def close(self):
        if self._handler:
            self._handler.close()
        super().close()


# ============================================================
# 🔹 Configuration des loggers
# ============================================================


def setup_logger(
    name: str,
    level: int = Logger_Level.level,
    console_level: int = Logger_Level.console_level,
    file_level: int = Logger_Level.file_level,
    log_filename: str = "translation.log",
) -> logging.Logger:
    """
    Configure un logger avec sortie console et fichier de session.

    Args:
        name: Nom du logger (généralement __name__ du module)
        level: Niveau global du logger
        console_level: Niveau pour la console
        file_level: Niveau pour le fichier
        log_filename: Nom du fichier dans le répertoire de session

    Returns:
        Logger configuré
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)

    if logger.handlers:
        return logger

    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    console_handler = TqdmLoggingHandler()
    console_handler.setLevel(console_level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    file_handler = LazyFileHandler(log_filename)
    file_handler.setLevel(file_level)
    file_handler.setFormatter(formatter)
    logger.addHandler(file_handler)

    return logger


def get_logger(name: str, log_filename: Optional[str] = None) -> logging.Logger:
    """
    Récupère un logger existant ou le configure.

    Example:
        >>> logger = get_logger(__name__)
        >>> logger.info("Batch reçu")
    """
    logger = logging.getLogger(name)
    if not logger.handlers:
        return setup_logger(name, log_filename=log_filename or "translation.log")
    return logger


def get_session_log_path(filename: str) -> Path:
    """
    Retourne le chemin d'un fichier dans le répertoire de session.

    Example:
        >>> get_session_log_path("llm_0001.log")
        PosixPath('logs/run_20251023_143022/llm_0001.log')
    """
    return LogSession.get_session_dir() / filename
