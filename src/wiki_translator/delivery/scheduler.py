"""
Livraison progressive des traductions dans une page déjà servie.

Le DeliveryScheduler découvre les placeholders d'un squelette, les regroupe
par texte source, découpe les textes uniques en batches puis les fait traduire
par un pool borné de threads. Chaque batch est isolé : son échec (après
retries) ne marque que ses propres placeholders, les autres continuent.

Cycle de vie d'un batch :

    QUEUED -> IN_FLIGHT -> APPLIED
                 |  ^
                 v  |
              RETRYING -> FAILED
"""

import queue
import threading
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from bs4 import BeautifulSoup
from bs4.element import Tag
from tqdm import tqdm

from ..config import Limits
from ..exceptions import ConfigurationError, SegmentationAmbiguity, TranslatorError
from ..htmlpage import (
    HtmlPage,
    apply_translation,
    is_failed,
    iter_placeholders,
    mark_failed,
    placeholder_text,
)
from ..logger import get_logger
from .transport import BatchTransport

logger = get_logger(__name__)


class BatchState(Enum):
    QUEUED = "queued"
    IN_FLIGHT = "in_flight"
    RETRYING = "retrying"
    APPLIED = "applied"
    FAILED = "failed"


@dataclass
class DeliveryBatch:
    """
    Un lot de textes uniques envoyé en une requête.

    Attributes:
        index: Position du batch dans l'ordre de découverte
        strings: Textes sources (uniques, normalisés)
        state: État courant
        attempts: Nombre de tentatives effectuées
        error: Dernière erreur rencontrée
        history: États successifs (QUEUED inclus)
    """

    index: int
    strings: list[str]
    state: BatchState = BatchState.QUEUED
    attempts: int = 0
    error: Optional[Exception] = None
    history: list[BatchState] = field(default_factory=lambda: [BatchState.QUEUED])

    def __repr__(self) -> str:
        return (
            f"DeliveryBatch(#{self.index}, {len(self.strings)} texte(s), "
            f"{self.state.value}, tentatives={self.attempts})"
        )


@dataclass
class DeliveryReport:
    """
    Bilan d'une livraison.

    Les compteurs portent sur les placeholders (nœuds), pas sur les textes.
    """

    applied: int = 0
    failed: int = 0
    mismatched: int = 0
    undecodable: int = 0
    cancelled: bool = False
    batches: list[DeliveryBatch] = field(default_factory=list)

    @property
    def complete(self) -> bool:
        """True si tous les placeholders ont été remplacés."""
        return not self.cancelled and self.failed == self.mismatched == self.undecodable == 0

    def failed_batches(self) -> list[DeliveryBatch]:
        return [b for b in self.batches if b.state == BatchState.FAILED]


class DeliveryScheduler:
    """
    Remplit les placeholders d'une page avec un nombre borné de requêtes en vol.

    Attributes:
        soup: Arbre contenant les placeholders
        transport: Transport de batch (HTTP ou local)
        target_lang: Langue cible
        chunk_size: Nombre de textes uniques par batch
        max_concurrent: Nombre maximum de requêtes simultanées
        max_attempts: Tentatives par batch (première incluse)
        base_delay: Délai de base du backoff exponentiel (secondes)
        element_map: {texte source: [placeholders]} construit à la découverte
        peak_in_flight: Maximum de requêtes simultanées observé

    Example:
        >>> scheduler = DeliveryScheduler(page, HttpBatchTransport(url), "es")
        >>> report = scheduler.run()
        >>> print(f"Appliqués: {report.applied}, échecs: {report.failed}")
    """

    def __init__(
        self,
        page: HtmlPage | BeautifulSoup,
        transport: BatchTransport,
        target_lang: str,
        chunk_size: int = Limits.chunk_size,
        max_concurrent: int = Limits.max_concurrent,
        max_attempts: int = Limits.max_attempts,
        base_delay: float = Limits.base_delay,
        show_progress: bool = False,
    ):
        if chunk_size < 1:
            raise ValueError(f"chunk_size doit être >= 1, reçu: {chunk_size}")
        if max_concurrent < 1:
            raise ValueError(f"max_concurrent doit être >= 1, reçu: {max_concurrent}")
        if max_attempts < 1:
            raise ValueError(f"max_attempts doit être >= 1, reçu: {max_attempts}")

        self.soup = page.soup if isinstance(page, HtmlPage) else page
        self.transport = transport
        self.target_lang = target_lang
        self.chunk_size = chunk_size
        self.max_concurrent = max_concurrent
        self.max_attempts = max_attempts
        self.base_delay = base_delay
        self.show_progress = show_progress

        self.element_map: dict[str, list[Tag]] = {}
        self.batches: list[DeliveryBatch] = []
        self.report = DeliveryReport()
        self.peak_in_flight = 0

        self._queue: "queue.Queue[DeliveryBatch]" = queue.Queue()
        self._cancelled = threading.Event()
        # Toute mutation de l'arbre passe par ce verrou
        self._tree_lock = threading.Lock()
        self._count_lock = threading.Lock()
        self._in_flight = 0
        self._settled: set[str] = set()
        self._discovered = False
        self._progress: Optional[tqdm] = None

    # ============================================================
    # 🔹 Découverte
    # ============================================================

    def discover(self) -> list[DeliveryBatch]:
        """
        Recense les placeholders et construit les batches.

        Les placeholders dont le data-source est illisible passent
        immédiatement en échec.
        """
        unique: list[str] = []
        for tag in iter_placeholders(self.soup):
            if is_failed(tag):
                continue
            text = placeholder_text(tag)
            if not text:
                mark_failed(tag)
                self.report.undecodable += 1
                continue
            if text not in self.element_map:
                self.element_map[text] = []
                unique.append(text)
            self.element_map[text].append(tag)

        self.batches = [
            DeliveryBatch(index=i, strings=unique[start : start + self.chunk_size])
            for i, start in enumerate(range(0, len(unique), self.chunk_size))
        ]
        self.report.batches = self.batches
        self._discovered = True

        if self.report.undecodable:
            logger.warning(f"⚠️ {self.report.undecodable} placeholder(s) illisible(s)")
        logger.info(
            f"🔍 {len(unique)} texte(s) unique(s) découvert(s), "
            f"{len(self.batches)} batch(es) de {self.chunk_size} max"
        )
        return self.batches

    # ============================================================
    # 🔹 Exécution
    # ============================================================

    def run(self) -> DeliveryReport:
        """
        Exécute la livraison jusqu'au bout (ou jusqu'à cancel()).

        Returns:
            DeliveryReport avec les compteurs finaux
        """
        if not self._discovered:
            self.discover()

        for batch in self.batches:
            self._queue.put(batch)

        num_workers = min(self.max_concurrent, len(self.batches))
        total = sum(len(b.strings) for b in self.batches)
        self._progress = tqdm(
            total=total, desc="Livraison", unit="texte", disable=not self.show_progress
        )

        threads = [
            threading.Thread(
                target=self._worker, name=f"DeliveryWorker-{i}", daemon=True
            )
            for i in range(num_workers)
        ]
        try:
            for thread in threads:
                thread.start()
            for thread in threads:
                thread.join()
        finally:
            self._progress.close()

        if self._cancelled.is_set():
            self.report.cancelled = True
            logger.info("🛑 Livraison annulée")
            return self.report

        self._sweep()
        logger.info(
            f"✅ Livraison terminée : {self.report.applied} appliqué(s), "
            f"{self.report.failed} échec(s), {self.report.mismatched} non résolu(s)"
        )
        return self.report

    def cancel(self) -> None:
        """
        Annule la livraison (page quittée).

        Les batches en file ne partent pas ; les réponses des requêtes en vol
        sont ignorées.
        """
        self._cancelled.set()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def _worker(self) -> None:
        while not self._cancelled.is_set():
            try:
                batch = self._queue.get_nowait()
            except queue.Empty:
                return
            try:
                self._process(batch)
            finally:
                self._queue.task_done()

    def _set_state(self, batch: DeliveryBatch, state: BatchState) -> None:
        batch.state = state
        batch.history.append(state)

    def _send(self, batch: DeliveryBatch) -> dict[str, str]:
        with self._count_lock:
            self._in_flight += 1
            self.peak_in_flight = max(self.peak_in_flight, self._in_flight)
        try:
            return self.transport.translate(batch.strings, self.target_lang)
        finally:
            with self._count_lock:
                self._in_flight -= 1

    def _process(self, batch: DeliveryBatch) -> None:
        while True:
            batch.attempts += 1
            self._set_state(batch, BatchState.IN_FLIGHT)

            retryable = True
            try:
                translations = self._send(batch)
            except ConfigurationError as e:
                batch.error = e
                retryable = False
            except TranslatorError as e:
                batch.error = e
            except Exception as e:
                logger.exception(f"Erreur inattendue pour {batch}: {e}")
                batch.error = e
            else:
                if self._cancelled.is_set():
                    return
                self._apply(translations)
                self._set_state(batch, BatchState.APPLIED)
                logger.debug(f"✅ {batch} appliqué")
                return

            if self._cancelled.is_set():
                return

            if not retryable or batch.attempts >= self.max_attempts:
                self._set_state(batch, BatchState.FAILED)
                logger.error(
                    f"❌ {batch} abandonné après {batch.attempts} tentative(s): {batch.error}"
                )
                self._fail(batch)
                return

            self._set_state(batch, BatchState.RETRYING)
            delay = self.base_delay * (2 ** (batch.attempts - 1))
            logger.warning(
                f"⚠️ {batch} échoué, retry {batch.attempts}/{self.max_attempts - 1} "
                f"dans {delay:.1f}s: {batch.error}"
            )
            # Interrompu immédiatement par cancel()
            if self._cancelled.wait(delay):
                return

    # ============================================================
    # 🔹 Mutation de l'arbre
    # ============================================================

    def _apply(self, translations: dict[str, str]) -> None:
        with self._tree_lock:
            if self._cancelled.is_set():
                return
            settled = 0
            for original, translated in translations.items():
                tags = self.element_map.get(original)
                if not tags or original in self._settled:
                    continue
                for tag in tags:
                    apply_translation(tag, translated)
                self._settled.add(original)
                self.report.applied += len(tags)
                settled += 1
            self._progress.update(settled)

    def _fail(self, batch: DeliveryBatch) -> None:
        with self._tree_lock:
            settled = 0
            for text in batch.strings:
                if text in self._settled:
                    continue
                tags = self.element_map.get(text, [])
                for tag in tags:
                    mark_failed(tag)
                self._settled.add(text)
                self.report.failed += len(tags)
                settled += 1
            self._progress.update(settled)

    def _sweep(self) -> None:
        """Marque en échec les textes qu'aucune réponse n'a couverts."""
        with self._tree_lock:
            pending = [t for t in self.element_map if t not in self._settled]
            for text in pending:
                for tag in self.element_map[text]:
                    mark_failed(tag)
                self._settled.add(text)
                self.report.mismatched += len(self.element_map[text])

        if pending:
            logger.warning(f"⚠️ {SegmentationAmbiguity(pending)}")
