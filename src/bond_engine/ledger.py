"""
Fungible balance ledgers (integer domain).

`TokenLedger` is the shared balance book: holder -> units, with
`total_supply == sum(balances)` kept on every mint, burn and transfer.
`StableAsset` is the backing asset the series takes custody of; it exposes a
public faucet `mint` so tests and simulations can fund participants.

Balance hooks are invoked with (holder, balance_before) right before a
holder's balance changes, after the operation has been fully validated.
"""
from __future__ import annotations

import threading
from typing import Callable, Dict, List

from .core import DECIMALS, add, check_amount, check_positive, sub
from .core.exc import InsufficientBalance, InvariantViolation

BalanceHook = Callable[[str, int], None]

# Debug printing control
DEBUG_LEDGER = False

def _dbg(msg: str) -> None:
    if DEBUG_LEDGER:
        print(f"[LEDGER] {msg}")


class TokenLedger:
    """Balance book for one fungible token (non-negative integer units)."""

    def __init__(self, name: str, symbol: str, decimals: int = DECIMALS) -> None:
        self.name = name
        self.symbol = symbol
        self.decimals = decimals
        self._balances: Dict[str, int] = {}
        self._total_supply: int = 0
        self._hooks: List[BalanceHook] = []
        self._lock = threading.RLock()

    # --- hooks and locking ---
    def share_lock(self, lock) -> None:
        """Serialise every balance mutation on `lock` (the owning engine's writer lock)."""
        self._lock = lock

    def add_balance_hook(self, hook: BalanceHook) -> None:
        self._hooks.append(hook)

    def _notify(self, holder: str) -> None:
        before = self._balances.get(holder, 0)
        for hook in self._hooks:
            hook(holder, before)

    # --- queries ---
    def balance_of(self, holder: str) -> int:
        return self._balances.get(holder, 0)

    @property
    def total_supply(self) -> int:
        return self._total_supply

    def holders(self) -> List[str]:
        """Holders with a non-zero balance (diagnostics/tabulation only)."""
        return [h for h, b in self._balances.items() if b > 0]

    def can_cover(self, holder: str, amount: int) -> bool:
        return self.balance_of(holder) >= amount

    def require_balance(self, holder: str, amount: int) -> None:
        balance = self.balance_of(holder)
        if balance < amount:
            raise InsufficientBalance(holder, balance, amount)

    # --- internal mutations (callers validate first) ---
    def _mint(self, holder: str, amount: int) -> None:
        check_positive(amount)
        with self._lock:
            new_supply = add(self._total_supply, amount)
            self._notify(holder)
            self._balances[holder] = self._balances.get(holder, 0) + amount
            self._total_supply = new_supply
        _dbg(f"{self.symbol} mint {holder} +{amount} supply={new_supply}")

    def _burn(self, holder: str, amount: int) -> None:
        check_positive(amount)
        with self._lock:
            self.require_balance(holder, amount)
            self._notify(holder)
            self._balances[holder] -= amount
            self._total_supply = sub(self._total_supply, amount)
        _dbg(f"{self.symbol} burn {holder} -{amount} supply={self._total_supply}")

    # --- public mutations ---
    def transfer(self, sender: str, recipient: str, amount: int) -> None:
        """Move units between holders; total supply is unchanged."""
        check_positive(amount)
        with self._lock:
            self.require_balance(sender, amount)
            if sender == recipient:
                return
            self._notify(sender)
            self._notify(recipient)
            self._balances[sender] -= amount
            self._balances[recipient] = self._balances.get(recipient, 0) + amount
        _dbg(f"{self.symbol} transfer {sender} -> {recipient} {amount}")

    def check_conservation(self) -> None:
        """Raise InvariantViolation unless sum(balances) == total_supply."""
        total = sum(self._balances.values())
        if total != self._total_supply:
            raise InvariantViolation(
                f"{self.symbol}: sum(balances)={total} != total_supply={self._total_supply}"
            )
        if any(b < 0 for b in self._balances.values()):
            raise InvariantViolation(f"{self.symbol}: negative balance")


class StableAsset(TokenLedger):
    """Backing asset ledger (6 decimals) with an open faucet mint."""

    def __init__(self, name: str = "USD Coin", symbol: str = "USDC") -> None:
        super().__init__(name, symbol, DECIMALS)

    def mint(self, holder: str, amount: int) -> None:
        check_amount(amount)
        self._mint(holder, amount)


__all__ = ["TokenLedger", "StableAsset", "BalanceHook"]
