"""
Bond Engine Core
================

Unified exports for the integer-domain primitives shared by every component.
All monetary arithmetic is performed on non-negative ints scaled by 10^6 with
floor rounding. Decimal helpers are provided *only* for I/O bridging.
"""

# NOTE:
#   The `core` package is dependency-free. Components (ledger, accrual,
#   treasury, snapshots, engine) import from here; nothing here imports them.

# Integer-domain constants
from .constants import (
    DECIMALS,
    SCALE,
    MAX_UINT,
    MINT_RATIO,
    COUPON_RATE_NUM,
    COUPON_RATE_DEN,
    RESERVE_RATIO_BPS,
    BPS_DENOMINATOR,
    ISSUANCE_CAP,
    SNAPSHOT_INTERVAL_SECONDS,
    MATURITY_HOURS,
    UNIT_QUANTUM,
)

# Checked fixed-point arithmetic
from .fixed_point import (
    check_amount,
    check_positive,
    add,
    sub,
    mul,
    mul_div,
    saturating_sub,
)

# Decimal bridges (I/O only)
from .fmt import (
    decimal_from_units,
    units_from_decimal_down,
    fmt_units,
)

# Shared datatypes
from .datatypes import (
    Snapshot,
    SeriesInfo,
    TreasuryStatus,
    SeriesFlag,
    HealthStatus,
    Event,
    EventLog,
)

# Core exceptions
from .exc import (
    BondEngineError,
    ArithmeticOverflow,
    ArithmeticUnderflow,
    InvalidAmount,
    InsufficientBalance,
    CapExceeded,
    TooSoon,
    NothingPending,
    AmountMismatch,
    NothingToClaim,
    NotMatured,
    ExceedsWithdrawable,
    Paused,
    Unauthorized,
    SnapshotNotFound,
    InvariantViolation,
)

__all__ = [
    # constants
    "DECIMALS",
    "SCALE",
    "MAX_UINT",
    "MINT_RATIO",
    "COUPON_RATE_NUM",
    "COUPON_RATE_DEN",
    "RESERVE_RATIO_BPS",
    "BPS_DENOMINATOR",
    "ISSUANCE_CAP",
    "SNAPSHOT_INTERVAL_SECONDS",
    "MATURITY_HOURS",
    "UNIT_QUANTUM",
    # fixed point
    "check_amount",
    "check_positive",
    "add",
    "sub",
    "mul",
    "mul_div",
    "saturating_sub",
    # fmt
    "decimal_from_units",
    "units_from_decimal_down",
    "fmt_units",
    # datatypes
    "Snapshot",
    "SeriesInfo",
    "TreasuryStatus",
    "SeriesFlag",
    "HealthStatus",
    "Event",
    "EventLog",
    # exceptions
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
