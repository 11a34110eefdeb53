"""
Scan loop: identity -> lookup -> {hit, miss, unavailable} -> pace -> repeat.

Runs until the stop event is set, max_iterations is reached or the identity
source runs dry. All provider and sink failures are handled here or below;
nothing short of a bug ends the loop.
"""
from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Callable, Iterator, Optional, Sequence

from .identities import Identity
from .pacing import AdaptivePacer
from .providers.base import LookupResult
from .providers.dispatcher import BalanceDispatcher
from .sinks.base import HitRecord, HitSink, utc_now_iso

logger = logging.getLogger(__name__)

EXHAUSTION_COOLDOWN_S = 60.0
# Log a streak warning every N consecutive unavailable lookups.
FAILURE_STREAK_LOG_EVERY = 10


@dataclass
class ScanStats:
    """Running counters. Observational only; never drive control flow."""

    total: int = 0
    found: int = 0
    consecutive_failures: int = 0
    exhaustions: int = 0


class ScanLoop:
    """Sequential single-worker scanner. Construct once and call run()."""

    def __init__(
        self,
        identities: Iterator[Identity],
        dispatcher: BalanceDispatcher,
        pacer: AdaptivePacer,
        sinks: Sequence[HitSink] = (),
        *,
        stop_event: Optional[threading.Event] = None,
        exhaustion_cooldown_s: float = EXHAUSTION_COOLDOWN_S,
        sleep: Optional[Callable[[float], object]] = None,
    ) -> None:
        self._identities = identities
        self._dispatcher = dispatcher
        self._pacer = pacer
        self._sinks = tuple(sinks)
        self._stop = stop_event or threading.Event()
        self._exhaustion_cooldown_s = exhaustion_cooldown_s
        self._sleep = sleep or self._stop.wait
        self.stats = ScanStats()

    @property
    def stop_event(self) -> threading.Event:
        return self._stop

    def stop(self) -> None:
        self._stop.set()

    def run(self, max_iterations: Optional[int] = None) -> ScanStats:
        while not self._stop.is_set():
            if max_iterations is not None and self.stats.total >= max_iterations:
                break
            identity = next(self._identities, None)
            if identity is None:
                logger.info("Identity source exhausted; stopping")
                break
            self.step(identity)
        logger.info(
            "Scan finished: total=%d found=%d exhaustions=%d",
            self.stats.total, self.stats.found, self.stats.exhaustions,
        )
        return self.stats

    def step(self, identity: Identity) -> LookupResult:
        """One full iteration for a single identity, including the pacing sleep."""
        self.stats.total += 1
        result = self._dispatcher.lookup(identity.address)

        if not result.ok:
            self.stats.consecutive_failures += 1
            if self.stats.consecutive_failures % FAILURE_STREAK_LOG_EVERY == 0:
                logger.warning("%d consecutive failed lookups", self.stats.consecutive_failures)
            if result.is_exhausted:
                self.stats.exhaustions += 1
                logger.error(
                    "No eligible provider; cooling down %.0fs", self._exhaustion_cooldown_s
                )
                self._sleep(self._exhaustion_cooldown_s)
                return result
            self._pacer.wait(False)
            return result

        self.stats.consecutive_failures = 0
        logger.info(
            "[#%d] %s | balance: %s BTC (%s)",
            self.stats.total, identity.address, result.balance, result.provider_name,
        )
        if result.is_hit:
            self.stats.found += 1
            self._dispatch_hit(identity, result)
        self._pacer.wait(True)
        return result

    def _dispatch_hit(self, identity: Identity, result: LookupResult) -> None:
        hit = HitRecord(
            address=identity.address,
            label=identity.label,
            balance=result.balance,
            provider_name=result.provider_name or "",
            timestamp=utc_now_iso(),
        )
        logger.warning("HIT: %s holds %s BTC", identity.address, result.balance)
        for sink in self._sinks:
            try:
                sink.record(hit)
            except Exception:
                logger.exception("Hit sink %s failed", type(sink).__name__)
