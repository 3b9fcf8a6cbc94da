"""
Tests des unités de traduction et des empreintes.
"""

from wiki_translator.units import (
    TranslationUnit,
    content_hash,
    restore_whitespace,
    split_whitespace,
)


class TestContentHash:
    def test_deterministic(self):
        assert content_hash("Hello world") == content_hash("Hello world")

    def test_ignores_surrounding_whitespace(self):
        assert content_hash("  Hello\n") == content_hash("Hello")

    def test_is_sha256_hex(self):
        value = content_hash("Hello")
        assert len(value) == 64
        assert all(c in "0123456789abcdef" for c in value)

    def test_known_value(self):
        """SHA-256 de la chaîne vide (après normalisation)."""
        assert content_hash("   ") == (
            "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"
        )

    def test_case_sensitive(self):
        assert content_hash("hello") != content_hash("Hello")


class TestWhitespace:
    def test_split(self):
        assert split_whitespace("  Hello world \n") == ("  ", "Hello world", " \n")

    def test_split_without_whitespace(self):
        assert split_whitespace("Hello") == ("", "Hello", "")

    def test_split_only_whitespace(self):
        assert split_whitespace(" \n ") == (" \n ", "", "")

    def test_restore(self):
        assert restore_whitespace("  Hello ", "Hola") == "  Hola "

    def test_restore_normalizes_translation(self):
        """Les espaces renvoyés par le fournisseur ne sont pas dupliqués."""
        assert restore_whitespace(" Hello ", "  Hola\n") == " Hola "

    def test_restore_blank_original(self):
        assert restore_whitespace("   ", "anything") == "   "


class TestTranslationUnit:
    def test_from_raw_normalizes(self):
        assert TranslationUnit.from_raw("  Read more ") == TranslationUnit("Read more")

    def test_hash_matches_content_hash(self):
        assert TranslationUnit("Read more").content_hash == content_hash("Read more")

    def test_usable_in_set(self):
        units = {TranslationUnit("a"), TranslationUnit("a"), TranslationUnit("b")}
        assert len(units) == 2
