"""
Multi-period lifecycle simulation on a manual clock.

One run issues a series and funds the holders through the asset faucet. Each
interval it records a snapshot and the owner funds exactly the coupon due. At
maturity every holder redeems their full balance. Floor rounding in
`index_delta` and in each holder's claim leaves a small residue in custody
("dust"). `summarize_dust` reports how large it grows over many periods.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional

import pandas as pd

from ..clock import ManualClock
from ..config import SeriesConfig
from ..core.datatypes import CouponClaimed, CouponDistributed, Redeemed
from ..engine import SettlementEngine
from ..ledger import StableAsset

OWNER = "owner"


@dataclass(frozen=True)
class PeriodRow:
    period: int
    timestamp: int
    total_supply: int
    coupon: int
    index_delta: int
    cumulative_index: int
    claimed: int
    treasury_balance: int


@dataclass
class SimulationResult:
    engine: SettlementEngine
    rows: List[PeriodRow] = field(default_factory=list)

    @property
    def total_distributed(self) -> int:
        return sum(e.amount for e in self.engine.events.of_type(CouponDistributed))

    @property
    def total_claimed(self) -> int:
        return sum(e.amount for e in self.engine.events.of_type(CouponClaimed))

    @property
    def total_principal_paid(self) -> int:
        return sum(e.principal for e in self.engine.events.of_type(Redeemed))

    @property
    def dust(self) -> int:
        """Coupon funded but never paid out to any holder."""
        return self.total_distributed - self.total_claimed


def _deposit_all(engine: SettlementEngine, asset: StableAsset, deposits: Mapping[str, int]) -> None:
    for holder, amount in deposits.items():
        asset.mint(holder, amount)
        engine.deposit(holder, amount)


def simulate_lifecycle(deposits: Mapping[str, int],
                       periods: Optional[int] = None,
                       config: Optional[SeriesConfig] = None,
                       *,
                       claim_every: int = 1,
                       late_deposits: Optional[Mapping[int, Mapping[str, int]]] = None,
                       start: int = 1_700_000_000,
                       redeem_at_end: bool = True) -> SimulationResult:
    """Run `periods` snapshot/distribute rounds and optionally redeem everyone at maturity.

    `periods` defaults to as many intervals as fit in the maturity term.
    `late_deposits` maps a period number (1-based) to deposits made just
    before that period's snapshot. Holders claim every `claim_every`
    periods (0 disables interim claims; redemption still auto-claims).
    """
    cfg = config if config is not None else SeriesConfig()
    if periods is None:
        periods = cfg.maturity_seconds // cfg.snapshot_interval
    if periods < 0 or claim_every < 0:
        raise ValueError("periods and claim_every must be >= 0")

    clock = ManualClock(start)
    asset = StableAsset()
    engine = SettlementEngine.issue(cfg, owner=OWNER, asset=asset, clock=clock)
    _deposit_all(engine, asset, deposits)
    late = late_deposits or {}
    holders = set(deposits)
    result = SimulationResult(engine)

    for period in range(1, periods + 1):
        clock.set(engine.next_record_time())
        if period in late:
            _deposit_all(engine, asset, late[period])
            holders.update(late[period])
        engine.record_snapshot()
        due = engine.coupon_due()
        if due:
            asset.mint(OWNER, due)
        delta = engine.distribute_coupon(OWNER, due)

        claimed = 0
        if claim_every and period % claim_every == 0:
            for h in sorted(holders):
                if engine.claimable_amount(h):
                    claimed += engine.claim_coupon(h)

        info = engine.series_info()
        result.rows.append(PeriodRow(
            period=period,
            timestamp=clock(),
            total_supply=info.total_supply,
            coupon=due,
            index_delta=delta,
            cumulative_index=info.cumulative_index,
            claimed=claimed,
            treasury_balance=engine.treasury_status().balance,
        ))

    if redeem_at_end:
        if clock() < engine.maturity:
            clock.set(engine.maturity)
        for h in sorted(holders):
            balance = engine.balance_of(h)
            if balance:
                engine.redeem(h, balance)

    engine.check_invariants()
    return result


def periods_frame(result: SimulationResult) -> pd.DataFrame:
    return pd.DataFrame([r.__dict__ for r in result.rows])


def summarize_dust(result: SimulationResult) -> Dict[str, int]:
    """Totals of one run; `dust` is what floor rounding left in custody."""
    return {
        "periods": len(result.rows),
        "total_deposited": result.engine.series_info().total_deposited,
        "total_distributed": result.total_distributed,
        "total_claimed": result.total_claimed,
        "total_principal_paid": result.total_principal_paid,
        "dust": result.dust,
        "treasury_balance": result.engine.treasury_status().balance,
    }


__all__ = [
    "PeriodRow",
    "SimulationResult",
    "simulate_lifecycle",
    "periods_frame",
    "summarize_dust",
]
