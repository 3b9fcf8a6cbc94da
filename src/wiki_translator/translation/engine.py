"""
Moteur de traduction : fusion du cache d'empreintes et des appels fournisseur.

Deux modes partagent le même cœur :
- tolérant (translate_strings / translate_batch) : en cas d'échec du
  fournisseur, chaque chaîne non résolue retombe sur son texte original ;
- strict (translate_html) : l'échec est propagé, aucun document partiel
  n'est reconstruit.

Cœur commun :
1. Normaliser chaque chaîne et calculer son empreinte (dédoublonnage)
2. Chercher toutes les empreintes dans le cache
3. Envoyer les misses en un seul batch au fournisseur
4. Recoller les traductions par position, n'écrire que les nouvelles
"""

import threading
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Iterable, Optional

from ..exceptions import ConfigurationError, ProviderError, SegmentationAmbiguity
from ..htmlpage import HtmlPage
from ..logger import get_logger
from ..units import content_hash, normalize, restore_whitespace

if TYPE_CHECKING:
    from ..llm import LLM
    from ..store import FingerprintStore

logger = get_logger(__name__)

TranslationFailure = ProviderError | ConfigurationError


@dataclass
class BatchOutcome:
    """
    Résultat d'une traduction en mode tolérant.

    Attributes:
        translations: {chaîne originale: traduction ou elle-même}
        unresolved: Chaînes retombées sur leur original, sans doublon
        error: Erreur du fournisseur si l'appel a échoué
    """

    translations: dict[str, str]
    unresolved: list[str] = field(default_factory=list)
    error: Optional[TranslationFailure] = None

    @property
    def ok(self) -> bool:
        return self.error is None and not self.unresolved


class PageTranslator:
    """
    Orchestrateur de traduction par lots.

    Attributes:
        llm: Client du fournisseur
        store: Cache d'empreintes
        article_path: Préfixe des liens d'articles (localisation des liens)

    Example:
        >>> translator = PageTranslator(llm, FingerprintStore("sqlite://"))
        >>> translator.translate_strings(["Hello", " Read more "], "es")
        {'Hello': 'Hola', ' Read more ': ' Leer más '}
    """

    def __init__(
        self,
        llm: "LLM",
        store: "FingerprintStore",
        article_path: str = "/wiki/",
    ):
        self.llm = llm
        self.store = store
        self.article_path = article_path

        self._lock = threading.Lock()
        self.cache_hits = 0
        self.cache_misses = 0
        self.provider_calls = 0

    # -----------------------------------
    # 🔹 Cœur commun
    # -----------------------------------
    @staticmethod
    def _index(strings: Iterable[str]) -> dict[str, str]:
        """Construit {empreinte: texte normalisé}, dans l'ordre d'apparition."""
        hash_to_text: dict[str, str] = {}
        for text in strings:
            core = normalize(text)
            if core:
                hash_to_text.setdefault(content_hash(core), core)
        return hash_to_text

    def _resolve(
        self, hash_to_text: dict[str, str], lang: str
    ) -> tuple[dict[str, str], Optional[TranslationFailure]]:
        """
        Résout les empreintes via le cache puis le fournisseur.

        Returns:
            ({empreinte: traduction}, erreur du fournisseur ou None)
        """
        if not hash_to_text:
            return {}, None

        resolved = self.store.lookup(hash_to_text.keys(), lang)
        misses = [h for h in hash_to_text if h not in resolved]

        with self._lock:
            self.cache_hits += len(hash_to_text) - len(misses)
            self.cache_misses += len(misses)

        if not misses:
            return resolved, None

        batch = [hash_to_text[h] for h in misses]
        with self._lock:
            self.provider_calls += 1

        try:
            translations = self.llm.translate(batch, lang)
        except (ProviderError, ConfigurationError) as e:
            logger.warning(
                f"⚠️ Échec du fournisseur pour {len(batch)} unité(s) ({lang}) : {e}"
            )
            return resolved, e

        new_entries = dict(zip(misses, translations))
        resolved.update(new_entries)
        self.store.store(new_entries, lang)
        return resolved, None

    # -----------------------------------
    # 🔹 Mode tolérant
    # -----------------------------------
    def translate_batch(self, strings: list[str], lang: str) -> BatchOutcome:
        """
        Traduit des chaînes sans jamais échouer.

        Les espaces de bordure de chaque chaîne sont réappliqués autour de sa
        traduction. Une chaîne vide ou blanche est sa propre traduction.

        Args:
            strings: Chaînes à traduire (déjà plafonnées par l'appelant)
            lang: Code de la langue cible

        Returns:
            BatchOutcome avec la traduction (ou l'original) de chaque chaîne
        """
        hash_to_text = self._index(strings)
        resolved, error = self._resolve(hash_to_text, lang)

        translations: dict[str, str] = {}
        unresolved: list[str] = []
        for text in strings:
            if text in translations:
                continue
            core = normalize(text)
            translated = resolved.get(content_hash(core)) if core else None
            if translated is None:
                translations[text] = text
                if core:
                    unresolved.append(text)
            else:
                translations[text] = restore_whitespace(text, translated)

        if unresolved:
            logger.info(
                f"↩️ {len(unresolved)} chaîne(s) renvoyée(s) non traduite(s) ({lang})"
            )
        return BatchOutcome(translations, unresolved, error)

    def translate_strings(self, strings: list[str], lang: str) -> dict[str, str]:
        """Mode tolérant : {chaîne originale: traduction ou elle-même}."""
        return self.translate_batch(strings, lang).translations

    def get_cached_translations(self, strings: list[str], lang: str) -> dict[str, str]:
        """
        Consulte uniquement le cache (aucun appel fournisseur).

        Returns:
            {chaîne originale: traduction}, limité aux hits
        """
        hash_to_text = self._index(strings)
        cached = self.store.lookup(hash_to_text.keys(), lang)

        results: dict[str, str] = {}
        for text in strings:
            core = normalize(text)
            if not core:
                continue
            translated = cached.get(content_hash(core))
            if translated is not None:
                results[text] = restore_whitespace(text, translated)
        return results

    # -----------------------------------
    # 🔹 Mode strict
    # -----------------------------------
    def translate_html(self, html: str, lang: str, localize: bool = True) -> str:
        """
        Traduit un document HTML complet.

        Localise les liens, segmente, résout toutes les unités puis remplace
        chaque placeholder par sa traduction (les espaces de bordure d'origine
        sont restés en place).

        Args:
            html: Document ou fragment HTML source
            lang: Code de la langue cible
            localize: Réécrire les liens internes vers la variante traduite

        Returns:
            Le HTML traduit ("" si l'entrée est vide)

        Raises:
            ProviderError: Si le fournisseur échoue
            ConfigurationError: Si le fournisseur n'est pas configuré
            SegmentationAmbiguity: Si une unité reste sans traduction
        """
        if not html.strip():
            return ""

        page = HtmlPage.from_html(html)
        if localize:
            page.localize_links(lang, self.article_path)
        _, units, placeholders = page.segment()

        if not units:
            return page.to_html()

        hash_to_text = self._index(unit.text for unit in units)
        resolved, error = self._resolve(hash_to_text, lang)
        if error is not None:
            raise error

        by_text = {
            text: resolved[source_hash]
            for source_hash, text in hash_to_text.items()
            if source_hash in resolved
        }
        unresolved = page.fill(by_text)
        if unresolved:
            raise SegmentationAmbiguity(unresolved)

        logger.info(
            f"✅ Document traduit ({lang}) : {len(placeholders)} placeholder(s), "
            f"{len(units)} unité(s)"
        )
        return page.to_html()

    def get_statistics(self) -> dict[str, int]:
        with self._lock:
            return {
                "cache_hits": self.cache_hits,
                "cache_misses": self.cache_misses,
                "provider_calls": self.provider_calls,
            }
