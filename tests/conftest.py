"""
Configuration pytest pour les tests wiki-translator.

Ce fichier contient les fixtures communes à tous les tests.
"""

import threading

import pytest

from wiki_translator.exceptions import ProviderError
from wiki_translator.logger import LogSession
from wiki_translator.store import FingerprintStore
from wiki_translator.translation import PageTranslator


@pytest.fixture(autouse=True)
def log_session(tmp_path):
    """Redirige les logs de session vers un répertoire temporaire."""
    LogSession.configure(tmp_path / "logs")
    yield tmp_path / "logs"
    LogSession.reset()


class FakeLLM:
    """
    Faux fournisseur : traduit "Hello" en "[es] Hello".

    Attributes:
        calls: Liste des (unités, langue) reçues
        error: Exception levée à chaque appel si définie
    """

    def __init__(self, error: Exception | None = None):
        self.calls: list[tuple[list[str], str]] = []
        self.error = error
        self._lock = threading.Lock()

    def translate(self, units: list[str], target_lang: str) -> list[str]:
        with self._lock:
            self.calls.append((list(units), target_lang))
        if self.error is not None:
            raise self.error
        return [f"[{target_lang}] {unit}" for unit in units]

    @property
    def sent_units(self) -> list[str]:
        return [unit for units, _ in self.calls for unit in units]


@pytest.fixture
def fake_llm():
    return FakeLLM()


@pytest.fixture
def store(tmp_path):
    """
    Cache SQLite sur fichier temporaire.

    Returns:
        FingerprintStore vide
    """
    return FingerprintStore(f"sqlite:///{tmp_path / 'cache.db'}")


@pytest.fixture
def translator(fake_llm, store):
    return PageTranslator(fake_llm, store)


@pytest.fixture
def failing_translator(store):
    """Orchestrateur dont le fournisseur échoue systématiquement."""
    return PageTranslator(FakeLLM(error=ProviderError("provider down")), store)
