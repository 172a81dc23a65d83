import pytest

from bond_engine.core import SCALE, SeriesFlag, HealthStatus
from bond_engine.core.datatypes import EmergencyModeChanged, OwnershipTransferred, PauseChanged, Redeemed
from bond_engine.core.exc import ExceedsWithdrawable, NotMatured, Paused, Unauthorized


# ---------------------------
# Pause semantics
# ---------------------------

def test_pause_blocks_deposit_only(funded_engine, clock, cycle):
    engine = funded_engine
    cycle(engine)
    engine.pause("owner")
    assert engine.paused
    engine.asset.mint("bob", SCALE)
    with pytest.raises(Paused):
        engine.deposit("bob", SCALE)
    print("[pause] deposit blocked; claim/withdraw/snapshot/redeem still run")
    assert engine.claim_coupon("alice") == 20_000
    engine.owner_withdraw("owner", 100_000)
    engine.owner_deposit("owner", 100_000)
    cycle(engine)
    clock.set(engine.maturity)
    assert engine.redeem("alice", 20 * SCALE) == 2 * SCALE
    engine.unpause("owner")
    assert engine.deposit("bob", SCALE) == 10 * SCALE


def test_pause_check_precedes_amount_validation(engine):
    engine.pause("owner")
    with pytest.raises(Paused):
        engine.deposit("alice", 0)


def test_pause_is_owner_only(engine):
    with pytest.raises(Unauthorized):
        engine.pause("alice")
    engine.pause("owner")
    with pytest.raises(Unauthorized):
        engine.unpause("alice")
    assert engine.paused


def test_pause_events_only_on_change(engine):
    engine.pause("owner")
    engine.pause("owner")
    engine.unpause("owner")
    assert [e.paused for e in engine.events.of_type(PauseChanged)] == [True, False]


# ---------------------------
# Emergency mode
# ---------------------------

def test_emergency_allows_early_redeem(funded_engine, clock):
    engine = funded_engine
    with pytest.raises(NotMatured):
        engine.redeem("alice", 10 * SCALE)
    engine.set_emergency_mode("owner", True)
    assert engine.emergency_mode
    assert engine.series_info().emergency_mode
    assert engine.redeem("alice", 10 * SCALE) == SCALE
    assert engine.events.of_type(Redeemed)[0].emergency is True
    engine.set_emergency_mode("owner", False)
    with pytest.raises(NotMatured):
        engine.redeem("alice", 10 * SCALE)
    changes = [e.enabled for e in engine.events.of_type(EmergencyModeChanged)]
    assert changes == [True, False]


def test_emergency_is_owner_only(engine):
    with pytest.raises(Unauthorized):
        engine.set_emergency_mode("alice", True)
    assert not engine.emergency_mode


def test_emergency_does_not_gate_deposit(engine, deposit_for):
    engine.set_emergency_mode("owner", True)
    assert deposit_for(engine, "alice", SCALE) == 10 * SCALE


# ---------------------------
# Owner treasury operations
# ---------------------------

def test_owner_withdraw_reserve_floor(funded_engine):
    engine = funded_engine
    st = engine.treasury_status()
    assert st.required_reserve == 600_000
    assert st.withdrawable == 1_400_000
    with pytest.raises(ExceedsWithdrawable):
        engine.owner_withdraw("owner", 1_400_001)
    with pytest.raises(Unauthorized):
        engine.owner_withdraw("alice", 1)
    engine.owner_withdraw("owner", 1_400_000)
    assert engine.treasury_status().balance == 600_000
    assert engine.asset.balance_of("owner") == 1_400_000


def test_owner_deposit_tops_up_without_counting_toward_cap(funded_engine):
    engine = funded_engine
    engine.asset.mint("sponsor", SCALE)
    engine.owner_deposit("sponsor", SCALE)
    assert engine.treasury_status().balance == 3 * SCALE
    assert engine.series_info().total_deposited == 2 * SCALE


# ---------------------------
# Ownership
# ---------------------------

def test_transfer_ownership(engine):
    with pytest.raises(Unauthorized):
        engine.transfer_ownership("alice", "alice")
    engine.transfer_ownership("owner", "treasurer")
    assert engine.owner == "treasurer"
    with pytest.raises(Unauthorized):
        engine.pause("owner")
    engine.pause("treasurer")
    ev = engine.events.of_type(OwnershipTransferred)[0]
    assert (ev.previous_owner, ev.new_owner) == ("owner", "treasurer")


# ---------------------------
# State flags and health
# ---------------------------

def test_state_flags(engine, clock):
    assert engine.state() == SeriesFlag.ACTIVE
    engine.pause("owner")
    engine.set_emergency_mode("owner", True)
    clock.set(engine.maturity)
    st = engine.state()
    print(f"[state] {st}")
    assert SeriesFlag.PAUSED in st
    assert SeriesFlag.EMERGENCY in st
    assert SeriesFlag.MATURED in st
    assert engine.is_matured()


def test_health_status_tracks_pending(funded_engine, clock):
    engine = funded_engine
    assert engine.health_status() is HealthStatus.HEALTHY
    for expected in (HealthStatus.WARNING, HealthStatus.WARNING, HealthStatus.CRITICAL):
        clock.set(engine.next_record_time())
        engine.record_snapshot()
        assert engine.health_status() is expected
    engine.asset.mint("owner", engine.coupon_due())
    engine.distribute_coupon("owner", engine.coupon_due())
    assert engine.health_status() is HealthStatus.HEALTHY
    engine.set_emergency_mode("owner", True)
    assert engine.health_status() is HealthStatus.EMERGENCY
