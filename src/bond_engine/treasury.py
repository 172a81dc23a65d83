"""
Treasury: custody of the backing asset and reserve-ratio enforcement.

The balance is not stored here. It is observed as the custody account's
balance on the backing asset ledger, so every payment in or out is a real
ledger transfer that either happens in full or raises before any change.

    required_reserve = floor(total_deposited * reserve_ratio_bps / 10_000)
    withdrawable     = max(0, balance - required_reserve)

`total_deposited` only ever grows (redemptions do not lower the reserve).
"""
from __future__ import annotations

from .core import (
    BPS_DENOMINATOR,
    add,
    check_amount,
    check_positive,
    mul_div,
    saturating_sub,
)
from .core.datatypes import TreasuryStatus
from .core.exc import CapExceeded, ExceedsWithdrawable, InsufficientBalance
from .ledger import StableAsset

# Debug printing control
DEBUG_TREASURY = False

def _dbg(msg: str) -> None:
    if DEBUG_TREASURY:
        print(f"[TREASURY] {msg}")


class Treasury:
    """Custody account of one series on the backing asset ledger."""

    def __init__(self, asset: StableAsset, custody: str, *, cap: int, reserve_ratio_bps: int) -> None:
        check_amount(cap, "cap")
        if not 0 <= reserve_ratio_bps <= BPS_DENOMINATOR:
            raise ValueError("reserve_ratio_bps must satisfy 0 ≤ bps ≤ 10000")
        self.asset = asset
        self.custody = custody
        self.cap = cap
        self.reserve_ratio_bps = reserve_ratio_bps
        self.total_deposited: int = 0

    # --- views ---
    @property
    def balance(self) -> int:
        return self.asset.balance_of(self.custody)

    def required_reserve(self) -> int:
        return mul_div(self.total_deposited, self.reserve_ratio_bps, BPS_DENOMINATOR)

    def withdrawable(self) -> int:
        return saturating_sub(self.balance, self.required_reserve())

    def status(self) -> TreasuryStatus:
        return TreasuryStatus(
            balance=self.balance,
            required_reserve=self.required_reserve(),
            withdrawable=self.withdrawable(),
        )

    # --- checks (no mutation) ---
    def check_deposit(self, amount: int) -> int:
        """Validate a principal deposit against the cap; return the new lifetime total."""
        check_positive(amount)
        new_total = add(self.total_deposited, amount)
        if new_total > self.cap:
            raise CapExceeded(self.total_deposited, amount, self.cap)
        return new_total

    def require_cover(self, amount: int) -> None:
        balance = self.balance
        if balance < amount:
            raise InsufficientBalance(self.custody, balance, amount)

    def check_withdraw(self, amount: int) -> None:
        check_positive(amount)
        withdrawable = self.withdrawable()
        if amount > withdrawable:
            raise ExceedsWithdrawable(amount, withdrawable)

    # --- mutations ---
    def take_deposit(self, payer: str, amount: int) -> None:
        """Pull principal from payer into custody and count it toward the cap."""
        new_total = self.check_deposit(amount)
        self.asset.transfer(payer, self.custody, amount)
        self.total_deposited = new_total
        _dbg(f"deposit {payer} {amount} total_deposited={new_total}")

    def receive(self, payer: str, amount: int) -> None:
        """Top up custody without touching total_deposited (coupon funding, replenishment)."""
        check_positive(amount)
        self.asset.transfer(payer, self.custody, amount)
        _dbg(f"receive {payer} {amount} balance={self.balance}")

    def pay(self, recipient: str, amount: int) -> None:
        check_positive(amount)
        self.require_cover(amount)
        self.asset.transfer(self.custody, recipient, amount)
        _dbg(f"pay {recipient} {amount} balance={self.balance}")

    def withdraw(self, owner: str, amount: int) -> None:
        """Owner withdrawal bounded by the reserve ratio."""
        self.check_withdraw(amount)
        self.pay(owner, amount)


__all__ = ["Treasury"]
