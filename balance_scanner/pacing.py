"""
Adaptive pacing between scan iterations.

A single delay grows by step_up on failure and shrinks by step_down on
success, clamped to [base_delay, max_delay]. Growth is faster than decay so
sustained failures push the scanner toward caution. Each wait adds uniform
jitter on top of the current delay.
"""
from __future__ import annotations

import logging
import random
import time
from dataclasses import dataclass
from typing import Callable, Optional

logger = logging.getLogger(__name__)


@dataclass
class PacingConfig:
    """Configuration for adaptive inter-request delay (seconds)."""
    base_delay_s: float = 1.5
    max_delay_s: float = 4.0
    step_up_s: float = 0.8
    step_down_s: float = 0.4
    jitter_s: float = 1.5


class AdaptivePacer:
    """Holds the process-wide current delay. Created once at startup, never persisted."""

    def __init__(
        self,
        cfg: Optional[PacingConfig] = None,
        *,
        sleep: Callable[[float], object] = time.sleep,
        rng: Optional[random.Random] = None,
    ) -> None:
        self._cfg = cfg or PacingConfig()
        self._sleep = sleep
        self._rng = rng or random.Random()
        self.current_delay = self._cfg.base_delay_s

    @property
    def config(self) -> PacingConfig:
        return self._cfg

    def adjust(self, success: bool) -> float:
        """Update and return current_delay without sleeping."""
        if success:
            self.current_delay = max(self.current_delay - self._cfg.step_down_s, self._cfg.base_delay_s)
        else:
            self.current_delay = min(self.current_delay + self._cfg.step_up_s, self._cfg.max_delay_s)
        return self.current_delay

    def wait(self, success: bool) -> float:
        """Adjust the delay for this outcome, then sleep delay + jitter. Returns seconds slept."""
        delay = self.adjust(success) + self._rng.uniform(0.0, self._cfg.jitter_s)
        logger.debug("pacing: success=%s current_delay=%.2fs sleep=%.2fs", success, self.current_delay, delay)
        self._sleep(delay)
        return delay
