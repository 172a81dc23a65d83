"""
Core exception types for bond_engine.

These are dependency-free and may be imported by all modules. Every failure
aborts the triggering operation before any state is mutated; none of them is
retried by the engine.
"""

__all__ = [
    "BondEngineError",
    "ArithmeticOverflow",
    "ArithmeticUnderflow",
    "InvalidAmount",
    "InsufficientBalance",
    "CapExceeded",
    "TooSoon",
    "NothingPending",
    "AmountMismatch",
    "NothingToClaim",
    "NotMatured",
    "ExceedsWithdrawable",
    "Paused",
    "Unauthorized",
    "SnapshotNotFound",
    "InvariantViolation",
]


class BondEngineError(Exception):
    """Base class for all engine failures."""
    pass


class ArithmeticOverflow(BondEngineError):
    """Raised when a fixed-point result would exceed MAX_UINT."""
    pass


class ArithmeticUnderflow(BondEngineError):
    """Raised when a fixed-point subtraction would go negative."""
    pass


class InvalidAmount(BondEngineError, ValueError):
    """Raised when an amount is zero where a positive value is required, negative, or not an int."""
    pass


class InsufficientBalance(BondEngineError):
    """Raised when an account cannot cover a debit.

    Attributes
    ----------
    holder : str
        Account being debited (a holder, the owner, or the engine custody address).
    balance : int
        Balance at the time of the check.
    requested : int
        Amount that was requested.
    """

    def __init__(self, holder, balance, requested):
        super().__init__(
            f"Insufficient balance for {holder}: balance={balance}, requested={requested}"
        )
        self.holder = holder
        self.balance = balance
        self.requested = requested


class CapExceeded(BondEngineError):
    """Raised when a deposit would push lifetime deposits above the issuance cap."""

    def __init__(self, total_deposited, amount, cap):
        super().__init__(
            f"Deposit of {amount} exceeds cap: total_deposited={total_deposited}, cap={cap}"
        )
        self.total_deposited = total_deposited
        self.amount = amount
        self.cap = cap


class TooSoon(BondEngineError):
    """Raised when a snapshot is requested before the interval has elapsed."""

    def __init__(self, now, next_record_time):
        super().__init__(f"Snapshot too soon: now={now}, next_record_time={next_record_time}")
        self.now = now
        self.next_record_time = next_record_time


class NothingPending(BondEngineError):
    """Raised when every recorded snapshot has already been distributed."""
    pass


class AmountMismatch(BondEngineError):
    """Raised when a coupon payment differs from the amount due for the latest snapshot."""

    def __init__(self, expected, got):
        super().__init__(f"Coupon amount mismatch: expected={expected}, got={got}")
        self.expected = expected
        self.got = got


class NothingToClaim(BondEngineError):
    """Raised when a holder has no coupon entitlement to claim."""
    pass


class NotMatured(BondEngineError):
    """Raised when principal is redeemed before maturity outside emergency mode."""

    def __init__(self, now, maturity):
        super().__init__(f"Series not matured: now={now}, maturity={maturity}")
        self.now = now
        self.maturity = maturity


class ExceedsWithdrawable(BondEngineError):
    """Raised when the owner asks for more than the reserve ratio allows."""

    def __init__(self, requested, withdrawable):
        super().__init__(f"Withdrawal of {requested} exceeds withdrawable={withdrawable}")
        self.requested = requested
        self.withdrawable = withdrawable


class Paused(BondEngineError):
    """Raised when a pause-gated operation is attempted while the series is paused."""
    pass


class Unauthorized(BondEngineError):
    """Raised when a caller lacks the role an operation requires."""

    def __init__(self, caller, role):
        super().__init__(f"{caller!r} is not authorised as {role}")
        self.caller = caller
        self.role = role


class SnapshotNotFound(BondEngineError, LookupError):
    """Raised when a snapshot index is outside 1..record_count."""
    pass


class InvariantViolation(BondEngineError):
    """Raised when a state check finds a broken solvency or accounting invariant."""
    pass
