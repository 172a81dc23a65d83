import pytest
from decimal import Decimal

from bond_engine.core.fmt import decimal_from_units, units_from_decimal_down, fmt_units
from bond_engine.core.exc import InvalidAmount


# -----------------------------
# units <-> Decimal bridges
# -----------------------------

def test_decimal_from_units():
    print("[decimal_from_units] 2_000_000 -> 2, 20_000 -> 0.02")
    assert decimal_from_units(2_000_000) == Decimal("2")
    assert decimal_from_units(20_000) == Decimal("0.02")
    assert decimal_from_units(0) == Decimal("0")


@pytest.mark.parametrize("bad", [-1, 1.0, True])
def test_decimal_from_units_rejects(bad):
    with pytest.raises(InvalidAmount):
        decimal_from_units(bad)


@pytest.mark.parametrize(
    "x,expected",
    [
        ("2", 2_000_000),
        ("0.02", 20_000),
        ("0.0000019", 1),     # floors onto the 1e-6 grid
        (Decimal("1.9999999"), 1_999_999),
        (3, 3_000_000),
    ],
)
def test_units_from_decimal_down(x, expected):
    got = units_from_decimal_down(x)
    print(f"[units_from_decimal_down] {x} -> {got}")
    assert got == expected


@pytest.mark.parametrize("bad", ["-0.01", "NaN", "Infinity"])
def test_units_from_decimal_down_rejects(bad):
    with pytest.raises(InvalidAmount):
        units_from_decimal_down(bad)


def test_fmt_units():
    assert fmt_units(20_000) == "0.020000"
    assert fmt_units(2_000_000, places=2) == "2.00"
