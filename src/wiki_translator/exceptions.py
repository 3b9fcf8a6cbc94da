"""
Exceptions de wiki-translator.

Hiérarchie :

    TranslatorError
    ├── ConfigurationError       (clé API absente, fatal, jamais réessayé)
    ├── ProviderError
    │   ├── ProviderTransportError  (réseau, timeout, statut HTTP, circuit ouvert)
    │   └── ProviderResponseError   (JSON invalide ou nombre d'éléments faux)
    ├── CacheWriteError          (écriture du cache, loggée puis ignorée)
    ├── SegmentationAmbiguity    (traduction sans unité correspondante)
    └── RevisionNotFound         (révision inconnue)
"""

from typing import Iterable, Optional


class TranslatorError(Exception):
    """Classe de base de toutes les erreurs du package."""


class ConfigurationError(TranslatorError):
    """Configuration manquante ou invalide (ex: clé API absente)."""


class ProviderError(TranslatorError):
    """Échec d'un appel au fournisseur de traduction."""

    retryable: bool = True


class ProviderTransportError(ProviderError):
    """
    Échec de transport : timeout, erreur réseau, statut non-succès.

    La cause d'origine est chaînée via ``raise ... from``.
    """


class ProviderResponseError(ProviderError):
    """
    Réponse du fournisseur inutilisable.

    Levée quand la sortie n'est pas un tableau JSON de chaînes, ou quand sa
    longueur diffère de celle de l'entrée. Aucun résultat partiel n'est
    accepté : la correspondance par position est le seul lien entre une
    traduction et son unité source.

    Attributes:
        expected_count: Nombre d'éléments envoyés
        actual_count: Nombre d'éléments reçus (None si non parsable)
        raw: Sortie brute du fournisseur
    """

    def __init__(
        self,
        message: str,
        expected_count: int,
        actual_count: Optional[int] = None,
        raw: str = "",
    ):
        self.expected_count = expected_count
        self.actual_count = actual_count
        self.raw = raw
        super().__init__(message)

    def __repr__(self) -> str:
        return (
            f"ProviderResponseError(expected={self.expected_count}, "
            f"actual={self.actual_count})"
        )


class CacheWriteError(TranslatorError):
    """Écriture dans le cache impossible. Jamais propagée à l'appelant."""


class SegmentationAmbiguity(TranslatorError):
    """
    Des unités n'ont reçu aucune traduction correspondante.

    Attributes:
        unresolved: Textes des unités restées sans traduction
    """

    def __init__(self, unresolved: Iterable[str]):
        self.unresolved = list(unresolved)
        preview = ", ".join(repr(u[:40]) for u in self.unresolved[:3])
        super().__init__(
            f"{len(self.unresolved)} unité(s) sans traduction : {preview}"
        )


class RevisionNotFound(TranslatorError):
    """La révision demandée n'existe pas."""

    def __init__(self, rev_id: int):
        self.rev_id = rev_id
        super().__init__(f"Revision not found: {rev_id}")
