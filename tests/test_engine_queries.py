import pytest

from bond_engine.core import SCALE
from bond_engine.core.exc import SnapshotNotFound


def test_series_info_snapshot(funded_engine, clock, cycle):
    engine = funded_engine
    info = engine.series_info()
    print(f"[queries] {info}")
    assert info.maturity == engine.issued_at + 336 * 3600
    assert info.total_deposited == 2 * SCALE
    assert info.total_supply == 20 * SCALE
    assert info.record_count == 0
    assert info.cumulative_index == 0
    assert info.emergency_mode is False
    cycle(engine)
    info2 = engine.series_info()
    assert (info2.record_count, info2.cumulative_index) == (1, 1_000)
    # earlier result is an immutable copy
    assert info.record_count == 0


def test_snapshot_lookup(funded_engine, cycle):
    engine = funded_engine
    cycle(engine)
    snap = engine.snapshot(1)
    assert snap.total_supply == 20 * SCALE
    assert engine.snapshot_list() == [snap]
    with pytest.raises(SnapshotNotFound):
        engine.snapshot(2)
    with pytest.raises(SnapshotNotFound):
        engine.snapshot(0)


def test_next_record_time_and_pending(engine, clock):
    start = clock()
    assert engine.next_record_time() == start + 86_400
    assert engine.pending_distributions() == 0
    assert engine.coupon_due() == 0
    clock.advance(86_400 + 10)
    engine.record_snapshot()
    assert engine.next_record_time() == start + 2 * 86_400 + 10
    assert engine.pending_distributions() == 1


def test_redeemable_principal_and_balance(funded_engine):
    engine = funded_engine
    assert engine.balance_of("alice") == 20 * SCALE
    assert engine.redeemable_principal("alice") == 2 * SCALE
    assert engine.redeemable_principal("nobody") == 0


def test_claimed_index_defaults_to_zero(engine):
    assert engine.claimed_index("nobody") == 0
    assert engine.claimable_amount("nobody") == 0


def test_events_frame_like_rows(funded_engine):
    row = funded_engine.events.events[0].as_row()
    assert row == {"event": "Deposited", "timestamp": funded_engine.issued_at,
                   "holder": "alice", "amount": 2 * SCALE, "minted": 20 * SCALE}
