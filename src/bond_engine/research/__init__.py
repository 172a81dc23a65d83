"""
Research utilities (non-stable API).

Tabulation of engine state as pandas DataFrames and a multi-period lifecycle
simulation used to study floor-rounding drift. This is NOT part of the
stable API surface and may change without notice.
"""
from __future__ import annotations

from .frames import (
    snapshots_frame,
    events_frame,
    positions_frame,
)
from .simulate import (
    PeriodRow,
    SimulationResult,
    simulate_lifecycle,
    periods_frame,
    summarize_dust,
)

__all__ = [
    "snapshots_frame",
    "events_frame",
    "positions_frame",
    "PeriodRow",
    "SimulationResult",
    "simulate_lifecycle",
    "periods_frame",
    "summarize_dust",
]
