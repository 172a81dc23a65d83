# Top-level API for bond_engine (integer-domain).
"""
Top-level API for bond_engine (integer-domain).

This module exposes the stable interface of the bond settlement engine:
  - SettlementEngine: the single-writer orchestrator of one bond series
  - SeriesConfig: immutable issuance parameters
  - StableAsset / ClaimToken: the backing asset and claim token ledgers
  - ManualClock / SystemClock: time sources

All amounts are non-negative ints scaled by 10^6 with floor rounding.

Analysis helpers (pandas tables, multi-period simulation) live under the
`bond_engine.research` subpackage and are **not** part of the stable API.
"""

# NOTE:
#   `bond_engine.research` pulls in pandas. Import it explicitly when tabulating
#   or simulating; the engine itself does not need it.

from __future__ import annotations

from .engine import SettlementEngine
from .config import SeriesConfig
from .ledger import StableAsset, TokenLedger
from .claim_token import ClaimToken
from .clock import Clock, ManualClock, SystemClock

from .core import (
    SCALE,
    Snapshot,
    SeriesInfo,
    TreasuryStatus,
    SeriesFlag,
    HealthStatus,
    EventLog,
    BondEngineError,
    decimal_from_units,
    units_from_decimal_down,
    fmt_units,
)

__all__ = [
    # engine
    "SettlementEngine",
    "SeriesConfig",
    # ledgers
    "StableAsset",
    "TokenLedger",
    "ClaimToken",
    # time
    "Clock",
    "ManualClock",
    "SystemClock",
    # core data types
    "SCALE",
    "Snapshot",
    "SeriesInfo",
    "TreasuryStatus",
    "SeriesFlag",
    "HealthStatus",
    "EventLog",
    "BondEngineError",
    # I/O bridges
    "decimal_from_units",
    "units_from_decimal_down",
    "fmt_units",
]
