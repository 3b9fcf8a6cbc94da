"""
Unités de traduction et empreintes de contenu.

Une unité est un texte normalisé (espaces de bordure retirés). Les espaces
retirés sont conservés à part pour être réinsérés tels quels autour de la
traduction. L'empreinte SHA-256 du texte normalisé sert de clé de cache :
même texte normalisé ⇒ même empreinte, quelle que soit la page ou la langue.
"""

import hashlib
import re
from dataclasses import dataclass

_LEADING_WS = re.compile(r"^\s+")
_TRAILING_WS = re.compile(r"\s+$")


def normalize(text: str) -> str:
    """Retire les espaces de bordure."""
    return text.strip()


def content_hash(text: str) -> str:
    """
    Calcule l'empreinte (SHA-256 hex, 64 caractères) du texte normalisé.

    Example:
        >>> content_hash("  Hello ") == content_hash("Hello")
        True
    """
    return hashlib.sha256(normalize(text).encode("utf-8")).hexdigest()


def split_whitespace(raw: str) -> tuple[str, str, str]:
    """
    Découpe un texte en (espaces de début, cœur, espaces de fin).

    Un texte composé uniquement d'espaces donne ("", "", "") avec les
    espaces dans le premier élément.

    Example:
        >>> split_whitespace("  Hello world \\n")
        ('  ', 'Hello world', ' \\n')
    """
    core = raw.strip()
    if not core:
        return raw, "", ""

    leading_match = _LEADING_WS.match(raw)
    trailing_match = _TRAILING_WS.search(raw)
    leading = leading_match.group(0) if leading_match else ""
    trailing = trailing_match.group(0) if trailing_match else ""
    return leading, core, trailing


def restore_whitespace(original: str, translated: str) -> str:
    """
    Réapplique les espaces de bordure de l'original autour de la traduction.

    La traduction est d'abord normalisée pour ne pas dupliquer d'espaces.
    """
    leading, core, trailing = split_whitespace(original)
    if not core:
        return original
    return f"{leading}{translated.strip()}{trailing}"


@dataclass(frozen=True)
class TranslationUnit:
    """
    Texte traduisible normalisé, identifié par son contenu.

    Deux occurrences de "Read more" n'importe où donnent la même unité.
    """

    text: str

    @classmethod
    def from_raw(cls, raw: str) -> "TranslationUnit":
        return cls(normalize(raw))

    @property
    def content_hash(self) -> str:
        return content_hash(self.text)

    def __str__(self) -> str:
        return self.text
