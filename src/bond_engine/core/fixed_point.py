"""
Fixed-point primitives: unsigned integers scaled by 10^6.

- Non-negative domain: every input and result is ≥ 0; negatives are rejected at input.
- Bounded: results above MAX_UINT raise ArithmeticOverflow instead of wrapping.
- Rounding semantics: floor only. The engine never owes more than it can cover.

Amounts are plain Python ints so they can be stored in dicts and compared
directly; these helpers are the only place arithmetic on them is checked.
"""

from __future__ import annotations

from .constants import MAX_UINT
from .exc import ArithmeticOverflow, ArithmeticUnderflow, InvalidAmount

# Debug printing control
DEBUG_FIXED_POINT = False

def _dbg(msg: str) -> None:
    if DEBUG_FIXED_POINT:
        print(msg)


# ----------------------------
# Input validation
# ----------------------------

def check_amount(x: int, name: str = "amount") -> int:
    """Return x if it is a non-negative int within MAX_UINT, else raise InvalidAmount.

    bool is rejected even though it subclasses int.
    """
    if isinstance(x, bool) or not isinstance(x, int):
        raise InvalidAmount(f"{name} must be an int, got {type(x).__name__}")
    if x < 0:
        raise InvalidAmount(f"{name} must be >= 0, got {x}")
    if x > MAX_UINT:
        raise ArithmeticOverflow(f"{name} exceeds MAX_UINT")
    return x


def check_positive(x: int, name: str = "amount") -> int:
    """Like check_amount but zero is also rejected."""
    check_amount(x, name)
    if x == 0:
        raise InvalidAmount(f"{name} must be > 0")
    return x


def _bounded(x: int) -> int:
    if x > MAX_UINT:
        raise ArithmeticOverflow(f"result {x} exceeds MAX_UINT")
    return x


# ----------------------------
# Integer rounding helpers (centralised)
# ----------------------------

def _floor_div(a: int, b: int) -> int:
    if a < 0 or b <= 0:
        raise InvalidAmount("_floor_div expects a>=0 and b>0")
    return a // b


# ----------------------------
# Checked arithmetic
# ----------------------------

def add(a: int, b: int) -> int:
    """a + b, raising ArithmeticOverflow above MAX_UINT."""
    check_amount(a, "a")
    check_amount(b, "b")
    return _bounded(a + b)


def sub(a: int, b: int) -> int:
    """a - b, raising ArithmeticUnderflow if b > a."""
    check_amount(a, "a")
    check_amount(b, "b")
    if a < b:
        raise ArithmeticUnderflow(f"subtraction underflow: {a} - {b}")
    return a - b


def mul(a: int, k: int) -> int:
    """a * k for a non-negative integer scalar k."""
    check_amount(a, "a")
    check_amount(k, "k")
    if a == 0 or k == 0:
        return 0
    return _bounded(a * k)


def mul_div(a: int, b: int, c: int) -> int:
    """floor(a * b / c) with an unbounded intermediate product.

    Only the final result is bounded by MAX_UINT; Python ints give the
    wide intermediate for free.
    """
    check_amount(a, "a")
    check_amount(b, "b")
    check_amount(c, "c")
    if c == 0:
        raise ZeroDivisionError("mul_div: division by zero")
    if a == 0 or b == 0:
        return 0
    q = _floor_div(a * b, c)
    _dbg(f"mul_div: {a}*{b}/{c} -> {q}")
    return _bounded(q)


def saturating_sub(a: int, b: int) -> int:
    """max(0, a - b); used for quantities that are floored at zero by definition."""
    check_amount(a, "a")
    check_amount(b, "b")
    return a - b if a > b else 0


__all__ = [
    "check_amount",
    "check_positive",
    "add",
    "sub",
    "mul",
    "mul_div",
    "saturating_sub",
]
