"""
Claim token: proportional ownership of the series' principal and coupon stream.

Only the token owner may mint or burn. At issuance the owner role is handed
to the settlement engine, so in a live series every mint/burn goes through
the engine's deposit and redeem transitions.
"""
from __future__ import annotations

from .core import DECIMALS, check_positive
from .core.exc import Unauthorized
from .ledger import TokenLedger


class ClaimToken(TokenLedger):
    """Owner-gated fungible ledger (6 decimals)."""

    def __init__(self, owner: str, name: str = "Bond Claim", symbol: str = "BOND") -> None:
        super().__init__(name, symbol, DECIMALS)
        self.owner = owner

    def _only_owner(self, caller: str) -> None:
        if caller != self.owner:
            raise Unauthorized(caller, "token owner")

    def mint(self, caller: str, holder: str, amount: int) -> None:
        self._only_owner(caller)
        check_positive(amount)
        self._mint(holder, amount)

    def burn(self, caller: str, holder: str, amount: int) -> None:
        self._only_owner(caller)
        check_positive(amount)
        self._burn(holder, amount)

    def transfer_ownership(self, caller: str, new_owner: str) -> None:
        self._only_owner(caller)
        self.owner = new_owner


__all__ = ["ClaimToken"]
