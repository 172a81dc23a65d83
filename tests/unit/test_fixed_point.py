import pytest

from bond_engine.core.fixed_point import (
    add,
    sub,
    mul,
    mul_div,
    saturating_sub,
    check_amount,
    check_positive,
)
from bond_engine.core.constants import MAX_UINT, SCALE
from bond_engine.core.exc import ArithmeticOverflow, ArithmeticUnderflow, InvalidAmount


# -----------------------------
# Input validation
# -----------------------------

@pytest.mark.parametrize("bad", [-1, 1.5, "10", None, True])
def test_check_amount_rejects_non_uint(bad):
    print(f"[check_amount] {bad!r} -> expect InvalidAmount")
    with pytest.raises(InvalidAmount):
        check_amount(bad)


def test_check_amount_bounds():
    assert check_amount(0) == 0
    assert check_amount(MAX_UINT) == MAX_UINT
    with pytest.raises(ArithmeticOverflow):
        check_amount(MAX_UINT + 1)


def test_check_positive_rejects_zero():
    print("[check_positive] 0 -> InvalidAmount, 1 -> 1")
    with pytest.raises(InvalidAmount):
        check_positive(0)
    assert check_positive(1) == 1


def test_invalid_amount_is_value_error():
    with pytest.raises(ValueError):
        check_amount(-5)


# -----------------------------
# Checked arithmetic
# -----------------------------

def test_add_and_overflow():
    assert add(2 * SCALE, 3 * SCALE) == 5 * SCALE
    assert add(MAX_UINT - 1, 1) == MAX_UINT
    with pytest.raises(ArithmeticOverflow):
        add(MAX_UINT, 1)


def test_sub_and_underflow():
    assert sub(5, 5) == 0
    print("[sub] 3 - 4 -> ArithmeticUnderflow (no wrap)")
    with pytest.raises(ArithmeticUnderflow):
        sub(3, 4)


def test_mul_overflow_and_zero():
    assert mul(2 * SCALE, 10) == 20 * SCALE
    assert mul(0, 10) == 0
    assert mul(MAX_UINT, 0) == 0
    with pytest.raises(ArithmeticOverflow):
        mul(MAX_UINT, 2)


@pytest.mark.parametrize(
    "a,b,c,expected",
    [
        (20_000, SCALE, 20_000_000, 1_000),   # coupon index delta
        (20_000_000, 1_000, SCALE, 20_000),   # holder claim
        (20_000_000, 1, 10, 2_000_000),       # principal from claim units
        (7, 1, 10, 0),                        # floor to zero
        (10, 3, 4, 7),                        # 7.5 floors to 7
        (0, 5, 3, 0),
    ],
)
def test_mul_div_floors(a, b, c, expected):
    got = mul_div(a, b, c)
    print(f"[mul_div] floor({a}*{b}/{c}) -> {got}")
    assert got == expected


def test_mul_div_wide_intermediate():
    # a*b exceeds MAX_UINT but the quotient does not
    assert mul_div(MAX_UINT, SCALE, SCALE) == MAX_UINT


def test_mul_div_division_by_zero():
    with pytest.raises(ZeroDivisionError):
        mul_div(1, 1, 0)


def test_mul_div_result_overflow():
    with pytest.raises(ArithmeticOverflow):
        mul_div(MAX_UINT, 2, 1)


def test_saturating_sub():
    assert saturating_sub(10, 3) == 7
    assert saturating_sub(3, 10) == 0
