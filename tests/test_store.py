"""
Tests unitaires pour le cache d'empreintes.

Ces tests vérifient la lecture par lots, l'écriture en insert-or-ignore et
le caractère best-effort des erreurs de base de données.
"""

import threading

from wiki_translator.store import LOOKUP_SLICE, Base, FingerprintStore
from wiki_translator.units import content_hash

HELLO = content_hash("Hello")
WORLD = content_hash("World")


class TestFingerprintStore:
    """Tests pour la classe FingerprintStore."""

    def test_store_and_lookup(self, store):
        store.store({HELLO: "Hola"}, "es")
        assert store.lookup([HELLO], "es") == {HELLO: "Hola"}

    def test_lookup_returns_only_hits(self, store):
        store.store({HELLO: "Hola"}, "es")
        assert store.lookup([HELLO, WORLD], "es") == {HELLO: "Hola"}

    def test_lookup_empty(self, store):
        assert store.lookup([], "es") == {}

    def test_languages_are_independent(self, store):
        store.store({HELLO: "Hola"}, "es")
        store.store({HELLO: "Bonjour"}, "fr")

        assert store.get(HELLO, "es") == "Hola"
        assert store.get(HELLO, "fr") == "Bonjour"
        assert store.get(HELLO, "de") is None

    def test_first_write_wins(self, store):
        store.store({HELLO: "Hola"}, "es")
        store.store({HELLO: "Buenas"}, "es")

        assert store.get(HELLO, "es") == "Hola"
        assert store.count("es") == 1

    def test_lookup_larger_than_slice(self, store):
        entries = {content_hash(f"text {i}"): f"texto {i}" for i in range(LOOKUP_SLICE + 25)}
        store.store(entries, "es")

        assert store.lookup(entries.keys(), "es") == entries

    def test_count_and_clear(self, store):
        store.store({HELLO: "Hola", WORLD: "Mundo"}, "es")
        store.store({HELLO: "Bonjour"}, "fr")

        assert store.count() == 3
        assert store.count("es") == 2

        store.clear()
        assert store.count() == 0

    def test_persistence_across_instances(self, tmp_path):
        url = f"sqlite:///{tmp_path / 'shared.db'}"
        FingerprintStore(url).store({HELLO: "Hola"}, "es")

        assert FingerprintStore(url).get(HELLO, "es") == "Hola"

    def test_in_memory_database(self):
        store = FingerprintStore("sqlite://")
        store.store({HELLO: "Hola"}, "es")
        assert store.get(HELLO, "es") == "Hola"


class TestStoreFailures:
    def test_write_failure_is_swallowed(self, store):
        Base.metadata.drop_all(store.engine)

        # Ne lève pas d'exception
        store.store({HELLO: "Hola"}, "es")

    def test_read_failure_is_a_miss(self, store):
        store.store({HELLO: "Hola"}, "es")
        Base.metadata.drop_all(store.engine)

        assert store.lookup([HELLO], "es") == {}


class TestStoreConcurrency:
    def test_concurrent_writers_same_key(self, store):
        """Plusieurs écrivains de la même paire : ni erreur ni doublon."""
        barrier = threading.Barrier(8)
        errors: list[Exception] = []

        def writer(index: int):
            try:
                barrier.wait()
                store.store({HELLO: f"Hola {index}", WORLD: "Mundo"}, "es")
            except Exception as e:
                errors.append(e)

        threads = [threading.Thread(target=writer, args=(i,)) for i in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert errors == []
        assert store.count("es") == 2
        assert store.get(HELLO, "es").startswith("Hola ")
