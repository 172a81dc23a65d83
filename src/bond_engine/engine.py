"""
Settlement engine: the single entry point that orchestrates a bond series.

Transitions (all serialised through one re-entrant lock):
  - deposit           holder pays principal, receives mint_ratio× claim units (pause-gated)
  - record_snapshot   permissionless, time-gated record of supply and treasury balance
  - distribute_coupon owner funds the coupon due on the latest snapshot; index rises
  - claim_coupon      holder collects accrued coupon
  - redeem            after maturity (or in emergency mode): auto-claim, burn, pay principal
  - owner_withdraw    owner takes treasury funds above the reserve floor
  - owner_deposit     anyone tops up custody
  - pause/unpause, set_emergency_mode, transfer_ownership (owner only)

Atomicity: each transition runs every check (role, flags, amounts, balances,
cap, treasury cover) before its first mutation, and the mutations that follow
cannot fail. A raised error therefore means no state changed.

Queries take the same lock only to copy state into frozen value objects.
"""
from __future__ import annotations

import threading
from typing import List, Optional

from .accrual import AccrualIndex
from .claim_token import ClaimToken
from .clock import Clock, SystemClock
from .config import SeriesConfig
from .core import (
    add,
    check_amount,
    check_positive,
    mul,
    mul_div,
)
from .core.constants import PENDING_CRITICAL_THRESHOLD, PENDING_WARNING_THRESHOLD
from .core.datatypes import (
    CouponClaimed,
    CouponDistributed,
    Deposited,
    EmergencyModeChanged,
    EventLog,
    HealthStatus,
    OwnerDeposited,
    OwnershipTransferred,
    OwnerWithdrawn,
    PauseChanged,
    Redeemed,
    SeriesFlag,
    SeriesInfo,
    Snapshot,
    SnapshotRecorded,
    Transferred,
    TreasuryStatus,
)
from .core.exc import (
    AmountMismatch,
    InvariantViolation,
    NothingPending,
    NothingToClaim,
    NotMatured,
    Paused,
    Unauthorized,
)
from .ledger import StableAsset
from .snapshots import SnapshotLog
from .treasury import Treasury

# Debug printing control
DEBUG_ENGINE = False

def _dbg(msg: str) -> None:
    if DEBUG_ENGINE:
        print(f"[ENGINE] {msg}")


DEFAULT_ADDRESS = "bond-series"


class SettlementEngine:
    """One bond series: claim token, accrual index, snapshot log and treasury.

    The engine must own the claim token (only it mints and burns). Use
    `SettlementEngine.issue` to create the token and hand ownership over in
    one step, the way a series is deployed.

    `token`, `asset`, `treasury`, `snapshots` and `accrual` are exposed for
    inspection. Mutate series state only through the engine methods; the
    claim token shares the engine lock, so even a direct `token.transfer`
    is serialised with every engine transition.
    """

    def __init__(self,
                 config: Optional[SeriesConfig] = None,
                 *,
                 owner: str,
                 asset: StableAsset,
                 token: Optional[ClaimToken] = None,
                 clock: Optional[Clock] = None,
                 address: str = DEFAULT_ADDRESS) -> None:
        self.config = config if config is not None else SeriesConfig()
        self.address = address
        self._owner = owner
        self._clock: Clock = clock if clock is not None else SystemClock()
        self._lock = threading.RLock()

        if token is None:
            token = ClaimToken(owner=address)
        elif token.owner != address:
            raise Unauthorized(address, "claim token owner")
        if owner == address:
            raise Unauthorized(owner, "owner (custody address)")
        self.asset = asset
        self.token = token

        now = self._now()
        self.issued_at = now
        self.maturity = add(now, self.config.maturity_seconds)
        self._paused = False
        self._emergency = False

        self.treasury = Treasury(
            asset,
            address,
            cap=self.config.issuance_cap,
            reserve_ratio_bps=self.config.reserve_ratio_bps,
        )
        self.snapshots = SnapshotLog(self.config.snapshot_interval, now)
        self.accrual = AccrualIndex()
        self.events = EventLog()
        self._index_high_water = 0

        # Every claim-token balance change checkpoints the holder first.
        self.token.add_balance_hook(self.accrual.checkpoint)
        self.token.share_lock(self._lock)

    @classmethod
    def issue(cls,
              config: Optional[SeriesConfig] = None,
              *,
              owner: str,
              asset: StableAsset,
              clock: Optional[Clock] = None,
              address: str = DEFAULT_ADDRESS,
              token_name: str = "Bond Claim",
              token_symbol: str = "BOND") -> "SettlementEngine":
        """Create the claim token under `owner`, transfer it to the engine, build the engine."""
        token = ClaimToken(owner=owner, name=token_name, symbol=token_symbol)
        token.transfer_ownership(owner, address)
        return cls(config, owner=owner, asset=asset, token=token, clock=clock, address=address)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _now(self) -> int:
        now = self._clock()
        if isinstance(now, bool) or not isinstance(now, int):
            raise TypeError(f"clock must return int seconds, got {now!r}")
        return now

    def _only_owner(self, caller: str) -> None:
        if caller != self._owner:
            raise Unauthorized(caller, "owner")

    def _not_custody(self, *accounts: str) -> None:
        """The custody address never acts as a holder or payer."""
        for account in accounts:
            if account == self.address:
                raise Unauthorized(account, "participant (custody address)")

    def _is_matured(self, now: int) -> bool:
        return now >= self.maturity

    def _claimable(self, holder: str) -> int:
        return self.accrual.claimable(holder, self.token.balance_of(holder))

    def _pending(self) -> int:
        return self.snapshots.record_count - self.accrual.last_distributed_record

    def _coupon_due_for(self, snap: Snapshot) -> int:
        return mul_div(snap.total_supply, self.config.coupon_rate_num, self.config.coupon_rate_den)

    def _claim(self, holder: str, now: int) -> int:
        amount = self._claimable(holder)
        if amount == 0:
            raise NothingToClaim(f"nothing to claim for {holder}")
        self.treasury.pay(holder, amount)
        self.accrual.settle(holder)
        self.events.add(CouponClaimed(now, holder, amount, self.accrual.cumulative_index))
        _dbg(f"claim {holder} {amount}")
        return amount

    # ------------------------------------------------------------------
    # Holder operations
    # ------------------------------------------------------------------

    def deposit(self, holder: str, amount: int) -> int:
        """Lock `amount` backing units; return the claim units minted."""
        with self._lock:
            if self._paused:
                raise Paused("deposits are paused")
            self._not_custody(holder)
            check_positive(amount)
            now = self._now()
            minted = mul(amount, self.config.mint_ratio)
            add(self.token.total_supply, minted)
            self.treasury.check_deposit(amount)
            self.asset.require_balance(holder, amount)

            self.treasury.take_deposit(holder, amount)
            self.token.mint(self.address, holder, minted)
            self.events.add(Deposited(now, holder, amount, minted))
            _dbg(f"deposit {holder} {amount} minted={minted}")
            return minted

    def claim_coupon(self, holder: str) -> int:
        """Pay out the holder's accrued coupon. Not gated by pause."""
        with self._lock:
            self._not_custody(holder)
            return self._claim(holder, self._now())

    def redeem(self, holder: str, amount: int) -> int:
        """Burn `amount` claim units for principal; pending coupon is claimed first.

        Returns the principal paid. Allowed from maturity on, or at any time
        while emergency mode is on. Not gated by pause.
        """
        with self._lock:
            now = self._now()
            matured = self._is_matured(now)
            if not matured and not self._emergency:
                raise NotMatured(now, self.maturity)
            self._not_custody(holder)
            check_positive(amount)
            self.token.require_balance(holder, amount)
            coupon = self._claimable(holder)
            principal = mul_div(amount, 1, self.config.mint_ratio)
            self.treasury.require_cover(add(coupon, principal))

            if coupon:
                self._claim(holder, now)
            self.token.burn(self.address, holder, amount)
            if principal:
                self.treasury.pay(holder, principal)
            self.events.add(Redeemed(now, holder, amount, principal, not matured))
            _dbg(f"redeem {holder} burned={amount} principal={principal} coupon={coupon}")
            return principal

    def transfer(self, sender: str, recipient: str, amount: int) -> None:
        """Move claim units between holders; both sides are checkpointed first."""
        with self._lock:
            self._not_custody(sender, recipient)
            now = self._now()
            self.token.transfer(sender, recipient, amount)
            self.events.add(Transferred(now, sender, recipient, amount))

    # ------------------------------------------------------------------
    # Keeper / owner operations
    # ------------------------------------------------------------------

    def record_snapshot(self, caller: Optional[str] = None) -> Snapshot:
        """Append a snapshot. Permissionless; `caller` is accepted for symmetry only."""
        with self._lock:
            now = self._now()
            snap = self.snapshots.append(now, self.token.total_supply, self.treasury.balance)
            self.events.add(SnapshotRecorded(now, snap.index, snap.total_supply, snap.treasury_balance))
            _dbg(f"snapshot #{snap.index} supply={snap.total_supply} treasury={snap.treasury_balance}")
            return snap

    def distribute_coupon(self, caller: str, amount: int) -> int:
        """Fund the coupon due on the latest snapshot; return the index delta."""
        with self._lock:
            self._only_owner(caller)
            check_amount(amount)
            now = self._now()
            if self._pending() == 0:
                raise NothingPending("no undistributed snapshot")
            record = self.snapshots.record_count
            snap = self.snapshots.get(record)
            expected = self._coupon_due_for(snap)
            if amount != expected:
                raise AmountMismatch(expected, amount)
            # Supply can grow between the snapshot and its funding; spreading the
            # delta over the larger supply keeps total claims within `amount`.
            index_supply = max(snap.total_supply, self.token.total_supply)
            delta = self.accrual.index_delta(amount, index_supply)
            add(self.accrual.cumulative_index, delta)
            if amount:
                self.asset.require_balance(caller, amount)

            if amount:
                self.treasury.receive(caller, amount)
            new_index = self.accrual.apply_distribution(record, delta)
            self._index_high_water = new_index
            self.events.add(CouponDistributed(now, record, amount, delta, new_index))
            _dbg(f"distribute record={record} amount={amount} delta={delta}")
            return delta

    def owner_withdraw(self, caller: str, amount: int) -> None:
        """Owner takes treasury funds above the reserve floor. Not gated by pause."""
        with self._lock:
            self._only_owner(caller)
            now = self._now()
            self.treasury.withdraw(caller, amount)
            self.events.add(OwnerWithdrawn(now, caller, amount))

    def owner_deposit(self, caller: str, amount: int) -> None:
        """Top up custody ahead of coupon claims or redemptions (any caller)."""
        with self._lock:
            self._not_custody(caller)
            check_positive(amount)
            now = self._now()
            self.asset.require_balance(caller, amount)
            self.treasury.receive(caller, amount)
            self.events.add(OwnerDeposited(now, caller, amount))

    def pause(self, caller: str) -> None:
        with self._lock:
            self._only_owner(caller)
            if not self._paused:
                self._paused = True
                self.events.add(PauseChanged(self._now(), True))

    def unpause(self, caller: str) -> None:
        with self._lock:
            self._only_owner(caller)
            if self._paused:
                self._paused = False
                self.events.add(PauseChanged(self._now(), False))

    def set_emergency_mode(self, caller: str, enabled: bool) -> None:
        """Explicit owner transition; while on, redeem ignores maturity."""
        if not isinstance(enabled, bool):
            raise TypeError("enabled must be bool")
        with self._lock:
            self._only_owner(caller)
            if self._emergency != enabled:
                self._emergency = enabled
                self.events.add(EmergencyModeChanged(self._now(), enabled))

    def transfer_ownership(self, caller: str, new_owner: str) -> None:
        with self._lock:
            self._only_owner(caller)
            if not new_owner:
                raise ValueError("new_owner must be a non-empty address")
            self._not_custody(new_owner)
            previous = self._owner
            self._owner = new_owner
            self.events.add(OwnershipTransferred(self._now(), previous, new_owner))

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def owner(self) -> str:
        return self._owner

    @property
    def paused(self) -> bool:
        return self._paused

    @property
    def emergency_mode(self) -> bool:
        return self._emergency

    @property
    def last_distributed_record(self) -> int:
        return self.accrual.last_distributed_record

    def series_info(self) -> SeriesInfo:
        with self._lock:
            return SeriesInfo(
                maturity=self.maturity,
                total_deposited=self.treasury.total_deposited,
                total_supply=self.token.total_supply,
                record_count=self.snapshots.record_count,
                cumulative_index=self.accrual.cumulative_index,
                emergency_mode=self._emergency,
            )

    def treasury_status(self) -> TreasuryStatus:
        with self._lock:
            return self.treasury.status()

    def balance_of(self, holder: str) -> int:
        with self._lock:
            return self.token.balance_of(holder)

    def claimable_amount(self, holder: str) -> int:
        with self._lock:
            return self._claimable(holder)

    def claimed_index(self, holder: str) -> int:
        with self._lock:
            return self.accrual.claimed_index(holder)

    def redeemable_principal(self, holder: str) -> int:
        """Principal a full redemption of holder's balance would pay (excluding coupon)."""
        with self._lock:
            return mul_div(self.token.balance_of(holder), 1, self.config.mint_ratio)

    def snapshot(self, index: int) -> Snapshot:
        with self._lock:
            return self.snapshots.get(index)

    def snapshot_list(self) -> List[Snapshot]:
        with self._lock:
            return list(self.snapshots)

    def next_record_time(self) -> int:
        with self._lock:
            return self.snapshots.next_record_time()

    def pending_distributions(self) -> int:
        with self._lock:
            return self._pending()

    def coupon_due(self) -> int:
        """Coupon the owner must fund for the latest snapshot (0 if nothing pending)."""
        with self._lock:
            if self._pending() == 0:
                return 0
            return self._coupon_due_for(self.snapshots.get(self.snapshots.record_count))

    def is_matured(self) -> bool:
        return self._is_matured(self._now())

    def state(self) -> SeriesFlag:
        with self._lock:
            flags = SeriesFlag.ACTIVE
            if self._paused:
                flags |= SeriesFlag.PAUSED
            if self._is_matured(self._now()):
                flags |= SeriesFlag.MATURED
            if self._emergency:
                flags |= SeriesFlag.EMERGENCY
            return flags

    def health_status(self) -> HealthStatus:
        with self._lock:
            if self._emergency:
                return HealthStatus.EMERGENCY
            pending = self._pending()
            if pending >= PENDING_CRITICAL_THRESHOLD:
                return HealthStatus.CRITICAL
            if pending >= PENDING_WARNING_THRESHOLD:
                return HealthStatus.WARNING
            return HealthStatus.HEALTHY

    def check_invariants(self) -> None:
        """Raise InvariantViolation if any accounting invariant is broken."""
        with self._lock:
            self.token.check_conservation()
            self.accrual.check_invariants()
            if self.accrual.cumulative_index < self._index_high_water:
                raise InvariantViolation("cumulative index decreased")
            if self.accrual.last_distributed_record > self.snapshots.record_count:
                raise InvariantViolation("distributed past the last snapshot")
            if self.treasury.total_deposited > self.treasury.cap:
                raise InvariantViolation("total deposited above issuance cap")
            if self.token.owner != self.address:
                raise InvariantViolation("claim token no longer owned by the engine")


__all__ = ["SettlementEngine", "DEFAULT_ADDRESS"]
