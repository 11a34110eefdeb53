"""
Provider health tracking: consecutive-failure counters and suspension windows.

Eligibility is computed, never stored: a provider is eligible when
blocked_until <= now. There is no timer and no explicit unblock event; the
window simply lapses.

Blocking policy:
- Each failure increments consecutive_failures.
- When the counter reaches fail_limit, blocked_until = now + block_duration.
- The counter is NOT reset by blocking, so a provider re-admitted after its
  window re-blocks on its very next failure. Only a success resets it.
- A success never shortens an active block.
"""
from __future__ import annotations

import logging
import time
from typing import Callable, Dict, Iterable, Optional, Tuple

from .base import Provider, ProviderHealth

logger = logging.getLogger(__name__)

FAIL_LIMIT = 8
BLOCK_DURATION_S = 10 * 60.0


class HealthTracker:
    """Owns one ProviderHealth per provider for the life of the process."""

    def __init__(
        self,
        providers: Iterable[Provider],
        *,
        fail_limit: int = FAIL_LIMIT,
        block_duration_s: float = BLOCK_DURATION_S,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._providers: Tuple[Provider, ...] = tuple(providers)
        self._fail_limit = fail_limit
        self._block_duration_s = block_duration_s
        self._clock = clock
        self._health: Dict[str, ProviderHealth] = {
            p.name: ProviderHealth(provider_name=p.name) for p in self._providers
        }

    @property
    def providers(self) -> Tuple[Provider, ...]:
        return self._providers

    @property
    def fail_limit(self) -> int:
        return self._fail_limit

    @property
    def block_duration_s(self) -> float:
        return self._block_duration_s

    def now(self) -> float:
        return self._clock()

    def eligible_providers(self, now: Optional[float] = None) -> Tuple[Provider, ...]:
        """Providers whose suspension window has lapsed, in registry order."""
        ts = self._clock() if now is None else now
        return tuple(p for p in self._providers if self._health[p.name].is_eligible(ts))

    def record_success(self, provider: Provider, now: Optional[float] = None) -> None:
        health = self._health[provider.name]
        health.consecutive_failures = 0
        health.total_successes += 1
        health.last_ok_at = self._clock() if now is None else now
        health.last_error = None

    def record_failure(
        self, provider: Provider, now: Optional[float] = None, error: str = ""
    ) -> None:
        ts = self._clock() if now is None else now
        health = self._health[provider.name]
        health.consecutive_failures += 1
        health.total_failures += 1
        health.last_error = error[:500] or None
        if health.consecutive_failures >= self._fail_limit:
            health.blocked_until = ts + self._block_duration_s
            logger.warning(
                "Provider %s blocked for %.0f min after %d consecutive failures: %s",
                provider.name,
                self._block_duration_s / 60.0,
                health.consecutive_failures,
                error[:200],
            )

    def health(self, provider_name: str) -> ProviderHealth:
        return self._health[provider_name]

    def snapshot(self) -> Dict[str, ProviderHealth]:
        """Return health records for all providers (live objects; do not mutate)."""
        return dict(self._health)
