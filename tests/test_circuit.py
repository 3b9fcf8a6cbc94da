"""
Tests du disjoncteur du fournisseur.
"""

import pytest

from wiki_translator.circuit import CircuitBreaker


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


class TestCircuitBreaker:
    def test_closed_initially(self, clock):
        assert not CircuitBreaker(clock=clock).is_open()

    def test_opens_after_max_failures(self, clock):
        breaker = CircuitBreaker(max_failures=3, cooldown=300, clock=clock)

        breaker.record_failure()
        breaker.record_failure()
        assert not breaker.is_open()

        breaker.record_failure()
        assert breaker.is_open()

    def test_success_resets_failures(self, clock):
        breaker = CircuitBreaker(max_failures=3, clock=clock)
        breaker.record_failure()
        breaker.record_failure()
        breaker.record_success()
        breaker.record_failure()

        assert breaker.consecutive_failures == 1
        assert not breaker.is_open()

    def test_half_open_after_cooldown(self, clock):
        breaker = CircuitBreaker(max_failures=2, cooldown=60, clock=clock)
        breaker.record_failure()
        breaker.record_failure()
        assert breaker.is_open()

        clock.now += 61
        assert not breaker.is_open()

        # Un nouvel échec rouvre immédiatement
        breaker.record_failure()
        assert breaker.is_open()

    def test_trial_success_closes(self, clock):
        breaker = CircuitBreaker(max_failures=1, cooldown=10, clock=clock)
        breaker.record_failure()
        clock.now += 11

        assert not breaker.is_open()
        breaker.record_success()
        assert breaker.consecutive_failures == 0

    def test_single_trial_while_half_open(self, clock):
        breaker = CircuitBreaker(max_failures=1, cooldown=10, clock=clock)
        breaker.record_failure()
        clock.now += 11

        assert not breaker.is_open()
        # Les autres appels attendent le résultat de l'essai
        assert breaker.is_open()
        assert breaker.is_open()

        breaker.record_success()
        assert not breaker.is_open()
        assert not breaker.is_open()

    def test_failed_trial_restarts_cooldown(self, clock):
        breaker = CircuitBreaker(max_failures=1, cooldown=10, clock=clock)
        breaker.record_failure()
        clock.now += 11

        assert not breaker.is_open()
        breaker.record_failure()
        assert breaker.is_open()

        clock.now += 11
        assert not breaker.is_open()
        assert breaker.is_open()

    def test_invalid_max_failures(self):
        with pytest.raises(ValueError):
            CircuitBreaker(max_failures=0)
