"""
Decimal bridges at the I/O boundary (non-core arithmetic).

Core arithmetic uses integer units. Decimal here is only for parsing caller
input (scenario files, CLI arguments) and for tables and logs.
"""

from decimal import Decimal, getcontext, ROUND_DOWN
from typing import Union

from .constants import UNIT_QUANTUM
from .exc import InvalidAmount


#: Default global precision for Decimal bridges. Does not affect core arithmetic.
DEFAULT_DECIMAL_PRECISION: int = 28
getcontext().prec = DEFAULT_DECIMAL_PRECISION

DecimalLike = Union[Decimal, int, str]


def decimal_from_units(units: int) -> Decimal:
    """Return the Decimal value of integer units (tables/logs only)."""
    if isinstance(units, bool) or not isinstance(units, int):
        raise InvalidAmount("decimal_from_units: units must be int")
    if units < 0:
        raise InvalidAmount("decimal_from_units: units must be >= 0")
    return Decimal(units) * UNIT_QUANTUM


def units_from_decimal_down(x: DecimalLike) -> int:
    """Floor a Decimal-like value onto the 1e-6 grid (never credits more than given)."""
    d = x if isinstance(x, Decimal) else Decimal(str(x))
    if d.is_nan() or d.is_infinite():
        raise InvalidAmount("units_from_decimal_down: invalid Decimal")
    if d < 0:
        raise InvalidAmount("units_from_decimal_down: negative not allowed")
    q = (d / UNIT_QUANTUM).to_integral_value(rounding=ROUND_DOWN)
    return int(q)


def fmt_units(units: int, places: int = 6) -> str:
    """Fixed-point string for logs and tables, e.g. 20_000 -> '0.020000'."""
    return format(decimal_from_units(units), f".{places}f")


__all__ = [
    "DEFAULT_DECIMAL_PRECISION",
    "decimal_from_units",
    "units_from_decimal_down",
    "fmt_units",
]
