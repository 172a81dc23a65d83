"""
Bond Engine Core Constants (integer domain)
===========================================

Only integer instrument constants live here. Decimal quanta used at the I/O
boundary are kept alongside them for the formatting helpers in `fmt.py`.
"""

# NOTE: Every monetary quantity in the engine is an unsigned int scaled by SCALE.

from decimal import Decimal

# ---------------------------------------------------------------------------
# Fixed-point domain
# ---------------------------------------------------------------------------

#: Number of fractional digits shared by the backing asset and the claim token.
DECIMALS: int = 6

#: 1 whole unit in integer units (10^6).
SCALE: int = 10 ** DECIMALS

#: Upper bound for any stored quantity (uint256, as on the host ledger).
MAX_UINT: int = 2 ** 256 - 1


# ---------------------------------------------------------------------------
# Instrument parameters (defaults for SeriesConfig)
# ---------------------------------------------------------------------------

#: Claim units minted per backing unit (both at 6 decimals, so no precision loss).
MINT_RATIO: int = 10

#: Coupon per snapshot as a ratio of outstanding supply: 1 / 1000 (0.1%).
COUPON_RATE_NUM: int = 1
COUPON_RATE_DEN: int = 1_000

#: Reserve the treasury must keep, in basis points of lifetime deposits (30%).
RESERVE_RATIO_BPS: int = 3_000
BPS_DENOMINATOR: int = 10_000

#: Issuance cap in integer units (100,000 backing units).
ISSUANCE_CAP: int = 100_000 * SCALE

#: Minimum spacing between snapshots (1 day).
SNAPSHOT_INTERVAL_SECONDS: int = 24 * 60 * 60

#: Term of the series (14 days).
MATURITY_HOURS: int = 336

#: Health thresholds on the number of snapshots awaiting distribution.
PENDING_WARNING_THRESHOLD: int = 1
PENDING_CRITICAL_THRESHOLD: int = 3


# ---------------------------------------------------------------------------
# Decimal quantum for display/IO quantisation (formatting helpers)
# ---------------------------------------------------------------------------

# Smallest representable step (1 unit = 1e-6).
UNIT_QUANTUM: Decimal = Decimal("1e-6")


# ---------------------------------------------------------------------------
# Metadata
# ---------------------------------------------------------------------------

__all__ = [
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
    "PENDING_WARNING_THRESHOLD",
    "PENDING_CRITICAL_THRESHOLD",
    "UNIT_QUANTUM",
]
