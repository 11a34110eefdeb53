"""
Tests for provider health tracking.

Verifies that:
- Eligibility excludes exactly the providers inside their suspension window
- Registry order is preserved among eligible providers
- The block triggers on the FAIL_LIMIT-th consecutive failure and lasts BLOCK_DURATION
- A re-admitted provider re-blocks on its next failure
- Success resets the counter but never shortens an active block
"""
from __future__ import annotations

from decimal import Decimal

import pytest

from balance_scanner.providers.base import Provider
from balance_scanner.providers.health import BLOCK_DURATION_S, FAIL_LIMIT, HealthTracker


def _providers(*names: str) -> tuple:
    return tuple(Provider(n, f"https://{n}/api/address", lambda d: Decimal(0)) for n in names)


T0 = 1_000_000.0


class TestEligibility:
    def test_all_eligible_initially_in_registry_order(self):
        a, b, c = _providers("a", "b", "c")
        tracker = HealthTracker([a, b, c])
        assert tracker.eligible_providers(T0) == (a, b, c)

    def test_excludes_exactly_blocked_and_preserves_order(self):
        a, b, c, d = _providers("a", "b", "c", "d")
        tracker = HealthTracker([a, b, c, d])
        tracker.health("b").blocked_until = T0 + 1
        tracker.health("d").blocked_until = T0  # boundary: blocked_until == now is eligible

        assert tracker.eligible_providers(T0) == (a, c, d)

    def test_uses_clock_when_now_omitted(self):
        (a,) = _providers("a")
        now = [T0]
        tracker = HealthTracker([a], clock=lambda: now[0])
        tracker.health("a").blocked_until = T0 + 10
        assert tracker.eligible_providers() == ()
        now[0] = T0 + 10
        assert tracker.eligible_providers() == (a,)


class TestBlocking:
    def test_blocks_after_fail_limit_for_block_duration(self):
        a, b, c = _providers("a", "b", "c")
        tracker = HealthTracker([a, b, c])

        for i in range(FAIL_LIMIT - 1):
            tracker.record_failure(a, T0 + i, "boom")
            assert a in tracker.eligible_providers(T0 + i)

        t_fail = T0 + 100
        tracker.record_failure(a, t_fail, "boom")
        assert tracker.health("a").blocked_until == t_fail + BLOCK_DURATION_S
        assert tracker.eligible_providers(t_fail) == (b, c)
        assert tracker.eligible_providers(t_fail + BLOCK_DURATION_S - 0.001) == (b, c)
        assert tracker.eligible_providers(t_fail + BLOCK_DURATION_S) == (a, b, c)

    def test_default_policy_constants(self):
        assert FAIL_LIMIT == 8
        assert BLOCK_DURATION_S == 600.0

    def test_one_strike_after_parole(self):
        (a,) = _providers("a")
        tracker = HealthTracker([a], fail_limit=3, block_duration_s=60.0)
        for _ in range(3):
            tracker.record_failure(a, T0)
        assert tracker.eligible_providers(T0) == ()

        parole = T0 + 60.0
        assert tracker.eligible_providers(parole) == (a,)
        assert tracker.health("a").consecutive_failures == 3

        tracker.record_failure(a, parole)
        assert tracker.health("a").consecutive_failures == 4
        assert tracker.health("a").blocked_until == parole + 60.0
        assert tracker.eligible_providers(parole) == ()

    def test_other_providers_unaffected(self):
        a, b = _providers("a", "b")
        tracker = HealthTracker([a, b], fail_limit=2)
        tracker.record_failure(a, T0)
        tracker.record_failure(a, T0)
        assert tracker.health("b").consecutive_failures == 0
        assert tracker.health("b").blocked_until == 0.0


class TestSuccess:
    def test_success_resets_counter(self):
        (a,) = _providers("a")
        tracker = HealthTracker([a])
        for _ in range(5):
            tracker.record_failure(a, T0, "err")
        tracker.record_success(a, T0)
        health = tracker.health("a")
        assert health.consecutive_failures == 0
        assert health.last_error is None
        assert health.total_failures == 5
        assert health.total_successes == 1

    def test_success_does_not_clear_active_block(self):
        (a,) = _providers("a")
        tracker = HealthTracker([a], fail_limit=1, block_duration_s=600.0)
        tracker.record_failure(a, T0)
        tracker.record_success(a, T0 + 1)

        assert tracker.health("a").consecutive_failures == 0
        assert tracker.health("a").blocked_until == T0 + 600.0
        assert tracker.eligible_providers(T0 + 1) == ()

    def test_counter_after_reset_needs_full_limit_again(self):
        (a,) = _providers("a")
        tracker = HealthTracker([a], fail_limit=3)
        tracker.record_failure(a, T0)
        tracker.record_failure(a, T0)
        tracker.record_success(a, T0)
        tracker.record_failure(a, T0)
        tracker.record_failure(a, T0)
        assert tracker.eligible_providers(T0) == (a,)


def test_snapshot_lists_every_provider():
    a, b = _providers("a", "b")
    tracker = HealthTracker([a, b])
    snap = tracker.snapshot()
    assert set(snap) == {"a", "b"}


def test_unknown_provider_raises_key_error():
    (a,) = _providers("a")
    tracker = HealthTracker([a])
    with pytest.raises(KeyError):
        tracker.health("missing")
