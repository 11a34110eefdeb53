"""Tests for the adaptive pacer: asymmetric steps, bounds, jitter and injected sleep."""
from __future__ import annotations

import random

import pytest

from balance_scanner.pacing import AdaptivePacer, PacingConfig
from tests.fakes import RecordingSleep


def _pacer(**kwargs):
    sleep = RecordingSleep()
    return AdaptivePacer(PacingConfig(**kwargs), sleep=sleep, rng=random.Random(7)), sleep


def test_starts_at_base_delay():
    pacer, _ = _pacer()
    assert pacer.current_delay == 1.5


def test_failures_grow_by_step_up_until_max():
    pacer, _ = _pacer()
    delays = [pacer.adjust(False) for _ in range(6)]
    assert delays == pytest.approx([2.3, 3.1, 3.9, 4.0, 4.0, 4.0])
    assert all(b >= a for a, b in zip(delays, delays[1:]))


def test_successes_shrink_by_step_down_until_base():
    pacer, _ = _pacer()
    pacer.current_delay = 4.0
    delays = [pacer.adjust(True) for _ in range(8)]
    assert delays == pytest.approx([3.6, 3.2, 2.8, 2.4, 2.0, 1.6, 1.5, 1.5])
    assert all(b <= a for a, b in zip(delays, delays[1:]))


def test_success_at_base_stays_at_base():
    pacer, _ = _pacer()
    assert pacer.adjust(True) == 1.5


def test_mixed_sequence_stays_in_bounds():
    pacer, _ = _pacer()
    rng = random.Random(42)
    for _ in range(500):
        pacer.adjust(rng.random() < 0.5)
        assert 1.5 <= pacer.current_delay <= 4.0


def test_wait_sleeps_delay_plus_jitter():
    pacer, sleep = _pacer()
    slept = [pacer.wait(False) for _ in range(20)]
    assert sleep.calls == slept
    for s in slept:
        assert pacer.config.base_delay_s <= s <= pacer.config.max_delay_s + pacer.config.jitter_s


def test_wait_adjusts_before_sleeping():
    pacer, sleep = _pacer(jitter_s=0.0)
    pacer.wait(False)
    assert sleep.calls == [pytest.approx(2.3)]
    pacer.wait(True)
    assert sleep.calls[-1] == pytest.approx(1.9)
