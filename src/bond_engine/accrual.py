"""
Coupon accrual index: cumulative coupon-per-unit plus per-holder high-water marks.

A distribution never iterates holders. It only raises the global index by

    delta = floor(amount * SCALE / due_supply)

and each holder's entitlement is computed lazily as

    accrued[h] + floor(balance[h] * (cumulative_index - claimed_index[h]) / SCALE)

`accrued` is the carry written by `checkpoint`, which the claim token calls
right before a holder's balance changes: the index term owed on the old
balance is folded into the carry and the holder's mark is moved up to the
current index. Without it a fresh deposit would earn every coupon paid
before it, and a transfer would hand already-earned index to the recipient.

All divisions floor, so the sum of every holder's claims can never exceed
what was distributed against the same supply.
"""
from __future__ import annotations

from typing import Dict

from .core import SCALE, add, check_amount, mul_div
from .core.exc import InvariantViolation

# Debug printing control
DEBUG_ACCRUAL = False

def _dbg(msg: str) -> None:
    if DEBUG_ACCRUAL:
        print(f"[ACCRUAL] {msg}")


class AccrualIndex:
    """Global index and per-holder bookkeeping (no iteration over holders)."""

    def __init__(self) -> None:
        self.cumulative_index: int = 0
        self.last_distributed_record: int = 0
        self._claimed: Dict[str, int] = {}
        self._accrued: Dict[str, int] = {}

    # --- queries ---
    def claimed_index(self, holder: str) -> int:
        return self._claimed.get(holder, 0)

    def accrued(self, holder: str) -> int:
        return self._accrued.get(holder, 0)

    def _index_term(self, holder: str, balance: int) -> int:
        claimed = self._claimed.get(holder, 0)
        if claimed >= self.cumulative_index or balance == 0:
            return 0
        return mul_div(balance, self.cumulative_index - claimed, SCALE)

    def claimable(self, holder: str, balance: int) -> int:
        """Coupon owed to holder given their current claim-token balance."""
        check_amount(balance, "balance")
        return add(self.accrued(holder), self._index_term(holder, balance))

    @staticmethod
    def index_delta(amount: int, due_supply: int) -> int:
        """Index increase for a coupon of `amount` over `due_supply` units (0 if no supply)."""
        check_amount(amount)
        check_amount(due_supply, "due_supply")
        if due_supply == 0:
            return 0
        return mul_div(amount, SCALE, due_supply)

    # --- mutations ---
    def apply_distribution(self, record: int, delta: int) -> int:
        """Raise the index by delta and mark `record` as distributed. Returns the new index."""
        if record < self.last_distributed_record:
            raise InvariantViolation(
                f"distribution for record {record} behind last distributed {self.last_distributed_record}"
            )
        new_index = add(self.cumulative_index, delta)
        self.cumulative_index = new_index
        self.last_distributed_record = record
        _dbg(f"distribute record={record} delta={delta} index={new_index}")
        return new_index

    def settle(self, holder: str) -> None:
        """Mark everything owed to holder as paid (call after paying `claimable`)."""
        self._claimed[holder] = self.cumulative_index
        self._accrued.pop(holder, None)

    def checkpoint(self, holder: str, balance_before: int) -> None:
        """Fold the index term on `balance_before` into the carry and advance the mark."""
        owed = self._index_term(holder, balance_before)
        if owed:
            self._accrued[holder] = add(self.accrued(holder), owed)
        self._claimed[holder] = self.cumulative_index
        _dbg(f"checkpoint {holder} balance={balance_before} carried={owed}")

    def check_invariants(self) -> None:
        for holder, mark in self._claimed.items():
            if mark > self.cumulative_index:
                raise InvariantViolation(
                    f"claimed_index[{holder}]={mark} > cumulative_index={self.cumulative_index}"
                )


__all__ = ["AccrualIndex"]
