"""
Balance dispatcher: round-robin over currently eligible providers.

Each lookup picks eligible[cursor % len(eligible)] and advances a cursor that
lives as long as the dispatcher. Blocked providers drop out of the eligible
set and are skipped transparently. Exactly one network request per lookup;
retrying is left to the next scan iteration.
"""
from __future__ import annotations

import logging

from ..core.errors import ProviderError
from .base import LookupResult, Transport
from .health import HealthTracker

logger = logging.getLogger(__name__)

HTTP_TIMEOUT_S = 10.0


class BalanceDispatcher:
    """Single-worker dispatcher. Not thread-safe: the cursor and health updates are unguarded."""

    def __init__(
        self,
        tracker: HealthTracker,
        transport: Transport,
        *,
        timeout_s: float = HTTP_TIMEOUT_S,
    ) -> None:
        self._tracker = tracker
        self._transport = transport
        self._timeout_s = timeout_s
        self._cursor = 0

    @property
    def tracker(self) -> HealthTracker:
        return self._tracker

    @property
    def cursor(self) -> int:
        return self._cursor

    def lookup(self, address: str) -> LookupResult:
        """
        Look up the balance of address on one eligible provider.

        Returns OK with a Decimal balance, EXHAUSTED when no provider is
        eligible, or FAILED when the chosen provider's call failed.
        """
        now = self._tracker.now()
        eligible = self._tracker.eligible_providers(now)
        if not eligible:
            logger.error("All providers are blocked; no eligible provider for %s", address)
            return LookupResult.exhausted()

        provider = eligible[self._cursor % len(eligible)]
        self._cursor += 1

        try:
            payload = self._transport.get_json(
                provider.name, provider.url_for(address), self._timeout_s
            )
            balance = provider.parse(payload)
        except ProviderError as exc:
            self._tracker.record_failure(provider, self._tracker.now(), str(exc))
            health = self._tracker.health(provider.name)
            logger.warning(
                "Provider %s failed (%d): %s",
                provider.name, health.consecutive_failures, exc,
            )
            return LookupResult.failed(provider.name, str(exc))

        self._tracker.record_success(provider)
        return LookupResult.found(balance, provider.name)
