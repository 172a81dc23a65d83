"""
Tabulate engine state as pandas DataFrames (analysis and CLI output only).

Amount columns stay in integer units; pass `decimals=True` to add `<col>_dec`
columns rendered through the Decimal bridge.
"""
from __future__ import annotations

from typing import Iterable, List, Optional, Sequence

import pandas as pd

from ..core.datatypes import Event
from ..core.fmt import decimal_from_units
from ..engine import SettlementEngine

SNAPSHOT_COLUMNS = ["index", "timestamp", "total_supply", "treasury_balance"]
POSITION_COLUMNS = ["holder", "balance", "claimable", "claimed_index", "redeemable_principal"]


def _with_decimals(df: pd.DataFrame, cols: Sequence[str]) -> pd.DataFrame:
    for c in cols:
        df[f"{c}_dec"] = df[c].map(lambda v: decimal_from_units(int(v)))
    return df


def snapshots_frame(engine: SettlementEngine, decimals: bool = False) -> pd.DataFrame:
    """One row per recorded snapshot, oldest first."""
    rows = [
        {
            "index": s.index,
            "timestamp": s.timestamp,
            "total_supply": s.total_supply,
            "treasury_balance": s.treasury_balance,
        }
        for s in engine.snapshot_list()
    ]
    df = pd.DataFrame(rows, columns=SNAPSHOT_COLUMNS)
    if decimals:
        df = _with_decimals(df, ["total_supply", "treasury_balance"])
    return df


def events_frame(events: Iterable[Event]) -> pd.DataFrame:
    """Flatten events into rows; columns absent on an event type are left as NaN."""
    rows = [e.as_row() for e in events]
    if not rows:
        return pd.DataFrame(columns=["event", "timestamp"])
    df = pd.DataFrame(rows)
    lead = ["event", "timestamp"]
    return df[lead + [c for c in df.columns if c not in lead]]


def positions_frame(engine: SettlementEngine,
                    holders: Optional[List[str]] = None,
                    decimals: bool = False) -> pd.DataFrame:
    """Per-holder claim position. Defaults to every holder with a non-zero balance."""
    if holders is None:
        holders = sorted(engine.token.holders())
    rows = [
        {
            "holder": h,
            "balance": engine.balance_of(h),
            "claimable": engine.claimable_amount(h),
            "claimed_index": engine.claimed_index(h),
            "redeemable_principal": engine.redeemable_principal(h),
        }
        for h in holders
    ]
    df = pd.DataFrame(rows, columns=POSITION_COLUMNS)
    if decimals:
        df = _with_decimals(df, ["balance", "claimable", "redeemable_principal"])
    return df


__all__ = ["snapshots_frame", "events_frame", "positions_frame"]
