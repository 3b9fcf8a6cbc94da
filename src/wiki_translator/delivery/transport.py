"""
Transports utilisés par le DeliveryScheduler pour traduire un batch.

- HttpBatchTransport : appelle l'API /translate_batch via requests
- LocalBatchTransport : appelle directement un PageTranslator (même processus)

Un transport retourne {texte: traduction} ou lève une TranslatorError :
ConfigurationError (terminale) ou ProviderError (réessayable).
"""

from typing import TYPE_CHECKING, Iterator, Optional, Protocol

import requests

from ..exceptions import (
    ConfigurationError,
    ProviderResponseError,
    ProviderTransportError,
    RevisionNotFound,
)
from ..logger import get_logger

if TYPE_CHECKING:
    from ..translation import PageTranslator

logger = get_logger(__name__)


class BatchTransport(Protocol):
    def translate(self, strings: list[str], lang: str) -> dict[str, str]: ...


def _json_payload(response: requests.Response) -> dict:
    try:
        data = response.json()
    except ValueError:
        return {}
    return data if isinstance(data, dict) else {}


class HttpBatchTransport:
    """
    Transport HTTP vers l'endpoint batch de l'API.

    Attributes:
        endpoint: URL complète de /translate_batch
        timeout: Délai maximum d'une requête (secondes)
        page_title: Titre transmis pour les logs serveur
    """

    def __init__(
        self,
        base_url: str,
        session: Optional[requests.Session] = None,
        timeout: float = 180.0,
        page_title: Optional[str] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.endpoint = f"{self.base_url}/translate_batch"
        self.session = session or requests.Session()
        self.timeout = timeout
        self.page_title = page_title

    def translate(self, strings: list[str], lang: str) -> dict[str, str]:
        payload: dict = {"strings": strings, "targetLang": lang}
        if self.page_title:
            payload["pageTitle"] = self.page_title

        try:
            response = self.session.post(self.endpoint, json=payload, timeout=self.timeout)
        except requests.Timeout as e:
            raise ProviderTransportError(
                f"Timeout de l'API après {self.timeout:.0f}s"
            ) from e
        except requests.RequestException as e:
            raise ProviderTransportError(f"Erreur réseau : {e}") from e

        if not response.ok:
            data = _json_payload(response)
            message = data.get("error") or response.reason
            if data.get("kind") == "configuration":
                raise ConfigurationError(str(message))
            raise ProviderTransportError(f"HTTP {response.status_code} : {message}")

        data = _json_payload(response)
        translations = data.get("translations")
        if not isinstance(translations, dict):
            raise ProviderResponseError(
                "Réponse de l'API sans dictionnaire 'translations'",
                expected_count=len(strings),
                raw=response.text[:500],
            )
        return {str(k): str(v) for k, v in translations.items()}


class LocalBatchTransport:
    """
    Transport en mémoire : appelle PageTranslator.translate_batch().

    L'erreur du fournisseur est relevée quand des chaînes sont restées
    non traduites, pour que le scheduler puisse réessayer le batch.
    """

    def __init__(self, translator: "PageTranslator") -> None:
        self.translator = translator

    def translate(self, strings: list[str], lang: str) -> dict[str, str]:
        outcome = self.translator.translate_batch(strings, lang)
        if outcome.error is not None and outcome.unresolved:
            raise outcome.error
        return outcome.translations


def iter_sections(
    base_url: str,
    rev_id: int,
    lang: str,
    session: Optional[requests.Session] = None,
    timeout: float = 180.0,
    max_sections: int = 500,
) -> Iterator[tuple[int, str]]:
    """
    Récupère progressivement les sections traduites d'une révision.

    S'arrête à la première section vide (fin du document).

    Yields:
        (index de section, HTML traduit)

    Raises:
        RevisionNotFound: Si l'API répond 404
        ProviderTransportError: Pour toute autre erreur HTTP ou réseau
    """
    session = session or requests.Session()
    endpoint = f"{base_url.rstrip('/')}/translate/{rev_id}"

    for section in range(max_sections):
        try:
            response = session.post(
                endpoint, json={"targetLang": lang, "section": section}, timeout=timeout
            )
        except requests.RequestException as e:
            raise ProviderTransportError(f"Erreur réseau : {e}") from e

        if response.status_code == 404:
            raise RevisionNotFound(rev_id)
        if not response.ok:
            message = _json_payload(response).get("error") or response.reason
            raise ProviderTransportError(f"HTTP {response.status_code} : {message}")

        html = _json_payload(response).get("html") or ""
        if not html:
            logger.debug(f"Fin du document {rev_id} après {section} section(s)")
            return
        yield section, html
