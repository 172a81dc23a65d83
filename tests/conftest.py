from __future__ import annotations

from typing import Callable

import pytest

from bond_engine import ManualClock, SeriesConfig, SettlementEngine, StableAsset
from bond_engine.core import SCALE


# -----------------------------
# Test helpers (pure functions)
# -----------------------------

OWNER = "owner"
START = 1_700_000_000


def units(whole: int, micro: int = 0) -> int:
    """Integer units for `whole` backing units plus `micro` millionths."""
    return whole * SCALE + micro


def fund_and_deposit(engine: SettlementEngine, holder: str, amount: int) -> int:
    engine.asset.mint(holder, amount)
    return engine.deposit(holder, amount)


def snapshot_and_distribute(engine: SettlementEngine, clock: ManualClock) -> int:
    """Advance to the next record time, snapshot, fund and distribute the coupon due."""
    clock.set(max(clock(), engine.next_record_time()))
    engine.record_snapshot()
    due = engine.coupon_due()
    if due:
        engine.asset.mint(engine.owner, due)
    engine.distribute_coupon(engine.owner, due)
    return due


# -----------------------------
# Pytest fixtures
# -----------------------------

@pytest.fixture()
def clock() -> ManualClock:
    return ManualClock(START)


@pytest.fixture()
def asset() -> StableAsset:
    return StableAsset()


@pytest.fixture()
def config() -> SeriesConfig:
    return SeriesConfig()


@pytest.fixture()
def engine(config, asset, clock) -> SettlementEngine:
    return SettlementEngine.issue(config, owner=OWNER, asset=asset, clock=clock)


@pytest.fixture()
def make_engine(asset, clock) -> Callable[..., SettlementEngine]:
    def _make(**overrides) -> SettlementEngine:
        return SettlementEngine.issue(SeriesConfig(**overrides), owner=OWNER, asset=asset, clock=clock)
    return _make


@pytest.fixture()
def funded_engine(engine) -> SettlementEngine:
    """Engine with alice holding 20 claim units from a 2-unit deposit."""
    fund_and_deposit(engine, "alice", units(2))
    return engine


@pytest.fixture()
def deposit_for() -> Callable[[SettlementEngine, str, int], int]:
    return fund_and_deposit


@pytest.fixture()
def cycle(clock) -> Callable[[SettlementEngine], int]:
    return lambda engine: snapshot_and_distribute(engine, clock)
