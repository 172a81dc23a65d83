"""Time sources for the engine. Timestamps are int seconds."""
from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable

Clock = Callable[[], int]


class SystemClock:
    """Wall-clock seconds since the epoch."""

    def __call__(self) -> int:
        return int(time.time())


@dataclass
class ManualClock:
    """Clock that only moves when told to (tests, simulations, scenario replay)."""

    now: int = 1_700_000_000

    def __call__(self) -> int:
        return self.now

    def advance(self, seconds: int) -> int:
        if seconds < 0:
            raise ValueError("ManualClock cannot move backwards")
        self.now += seconds
        return self.now

    def set(self, timestamp: int) -> None:
        if timestamp < self.now:
            raise ValueError("ManualClock cannot move backwards")
        self.now = timestamp


__all__ = ["Clock", "SystemClock", "ManualClock"]
