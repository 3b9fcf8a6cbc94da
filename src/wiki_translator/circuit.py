"""
Disjoncteur pour les appels au fournisseur.

Après N échecs de transport consécutifs, le circuit s'ouvre : les appels
sont refusés immédiatement (sans trafic réseau) jusqu'à la fin du délai de
refroidissement. Un seul appel d'essai est laissé passer après ce délai ;
les autres restent refusés jusqu'à son résultat. Un succès referme le circuit.
"""

import threading
import time
from typing import Callable

from .logger import get_logger

logger = get_logger(__name__)


class CircuitBreaker:
    """
    Disjoncteur thread-safe, sans état global.

    Attributes:
        max_failures: Nombre d'échecs consécutifs avant ouverture
        cooldown: Durée d'ouverture en secondes
    """

    def __init__(
        self,
        max_failures: int = 3,
        cooldown: float = 300.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        if max_failures < 1:
            raise ValueError(f"max_failures doit être >= 1, reçu: {max_failures}")
        self.max_failures = max_failures
        self.cooldown = cooldown
        self._clock = clock
        self._failures = 0
        self._open_until = 0.0
        self._trial_in_flight = False
        self._lock = threading.Lock()

    @property
    def consecutive_failures(self) -> int:
        with self._lock:
            return self._failures

    def is_open(self) -> bool:
        """Vrai si les appels doivent être refusés."""
        with self._lock:
            if self._failures < self.max_failures:
                return False
            if self._trial_in_flight or self._clock() < self._open_until:
                return True
            # Délai expiré : un seul essai à la fois
            self._trial_in_flight = True
            logger.info("🔄 Disjoncteur fournisseur : nouvel essai autorisé")
            return False

    def record_success(self) -> None:
        with self._lock:
            self._trial_in_flight = False
            self._failures = 0
            self._open_until = 0.0

    def record_failure(self) -> None:
        with self._lock:
            self._trial_in_flight = False
            self._failures += 1
            if self._failures >= self.max_failures:
                self._open_until = self._clock() + self.cooldown
                logger.warning(
                    f"⚠️ {self._failures} échecs consécutifs du fournisseur, "
                    f"pause de {self.cooldown:.0f}s"
                )
