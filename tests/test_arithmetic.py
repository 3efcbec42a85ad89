"""Add, subtract, multiply, compare and power on canonical values."""

import pytest

import arithmetic
from arithmetic import DivisionByZero
from decimal_value import DecimalValue
from limbs import ZERO
from rounding import Rounding

D = DecimalValue.parse


def one_then(last: str, exponent: int) -> str:
    """108-digit '1.000...0<last>E+<exponent>'."""
    return "1." + "0" * 106 + last + f"E+{exponent}"


@pytest.mark.parametrize("x, y, expected", [
    ("5.4321", "6.7894", "1.22215E+1"),
    ("12345", "0.67890", "1.23456789E+4"),
    ("1e108", "1", "1E+108"),
    ("1E+107", "0.5", "1E+107"),
])
def test_add(x, y, expected):
    assert str(D(x) + D(y)) == expected


def test_add_keeps_108_digits():
    assert str(D("1e107") + D("1")) == one_then("1", 107)
    # 0.6 rounds the 13th limb up, 1.5 is a tie on an odd limb
    assert str(D("1E+107") + D("0.6")) == one_then("1", 107)
    assert str(D("1E+107") + D("1.5")) == one_then("2", 107)


@pytest.mark.parametrize("x, y, expected", [
    ("-8", "5", "-1.3E+1"),
    ("1E10", "1", "9.999999999E+9"),
    ("1234567890", "9.87654321", "1.23456788012345679E+9"),
    ("67890", "12345", "5.5545E+4"),
    ("0.1", "0.1", "0"),
])
def test_subtract(x, y, expected):
    assert str(D(x) - D(y)) == expected


def test_add_mixed_signs_borrows_across_limbs():
    assert D("1000000000") + D("-0.000000001") == D("999999999.999999999")
    assert D("-1e18") + D("1") == D("-999999999999999999")


def test_add_shortcuts():
    x = D("123.456")
    assert arithmetic.add(x.number, ZERO) == x.number
    assert arithmetic.add(ZERO, x.number) == x.number
    assert arithmetic.add(x.number, arithmetic.negate(x.number)) == ZERO


def test_add_operand_below_window_is_ignored():
    assert D("1e200") + D("1e-200") == D("1e200")
    assert D("1e-200") + D("1e200") == D("1e200")


def test_add_directed_rounding():
    x, y = D("1e107"), D("0.4")
    assert x.add(y, Rounding.CEILING) == D(one_then("1", 107))
    assert x.add(y, Rounding.FLOOR) == x


# 1 + 10^-99: the last of twelve limbs is one unit
ONE_PLUS_ULP = DecimalValue([1] + [0] * 10 + [1], 0)


def test_add_directed_rounding_sees_operand_below_window():
    one, tiny = DecimalValue.one(), D("1e-200")
    assert one.add(tiny, Rounding.CEILING) == ONE_PLUS_ULP
    assert one.add(tiny, Rounding.AWAY_FROM_ZERO) == ONE_PLUS_ULP
    assert one.add(tiny, Rounding.FLOOR) == one
    assert (-one).add(-tiny, Rounding.FLOOR) == -ONE_PLUS_ULP
    assert (-one).add(-tiny, Rounding.CEILING) == -one
    assert one.add(-tiny, Rounding.FLOOR) == DecimalValue([999999999] * 12, -1)
    assert one.add(-tiny, Rounding.TOWARD_ZERO) == DecimalValue([999999999] * 12, -1)


def test_add_sticky_tail_breaks_tie():
    # half a unit of the last limb plus something far below it
    above_half = DecimalValue([500000000] + [0] * 10 + [1], -12)
    assert DecimalValue.one() + above_half == ONE_PLUS_ULP
    assert DecimalValue.one() + DecimalValue([500000000], -12) == DecimalValue.one()


def test_add_cut_limb_decides_nearest_after_cancellation():
    # 1 - 0.7 units of the 12th limb below the point: nearest is 0.999...9
    assert D("1") - DecimalValue([700000000], -13) == DecimalValue([999999999] * 12, -1)
    assert D("1") - DecimalValue([300000000], -13) == D("1")


@pytest.mark.parametrize("x, y, expected", [
    ("2350", "15.67", "36824.5"),
    ("1.23e20", "6.78e-12", "833940000"),
    ("-10000", "0.5", "-5000"),
    ("-0.0001234", "-6789.543", "0.8378296062"),
    ("9.9999", "99999.9", "999989.00001"),
    ("-9.8712", "481267111", "-4750683906.1032"),
    ("999999999", "999999999", "999999998000000001"),
])
def test_multiply(x, y, expected):
    assert D(x) * D(y) == D(expected)


def test_multiply_general_format():
    assert format(D("-9.8712") * D("481267111"), "G") == "-4750683906.1032"


def test_multiply_shortcuts():
    x = D("-42.5")
    assert x * DecimalValue.one() == x
    assert DecimalValue.one() * x == x
    assert (x * DecimalValue.zero()).is_zero


def test_multiply_rounds_to_108_digits():
    x = D("1" * 60)
    exact = int("1" * 60) ** 2
    assert (x * x).to_int() != exact
    assert abs((x * x).to_fraction() - exact) <= exact / 10 ** 107


def test_multiply_directed_rounding_sees_dropped_products():
    # (1 + u)^2 = 1 + 2u + u^2, the u^2 product falls below the buffer
    assert ONE_PLUS_ULP.multiply(ONE_PLUS_ULP, Rounding.CEILING).limbs[-1] == 3
    assert ONE_PLUS_ULP.multiply(ONE_PLUS_ULP, Rounding.FLOOR).limbs[-1] == 2
    assert ONE_PLUS_ULP * ONE_PLUS_ULP == DecimalValue([1] + [0] * 10 + [2], 0)
    assert (-ONE_PLUS_ULP).multiply(ONE_PLUS_ULP, Rounding.FLOOR).limbs[-1] == -3


@pytest.mark.parametrize("policy", list(Rounding))
def test_multiply_wide_operands_bracket_exact_product(policy):
    x = DecimalValue([123456789, 987654321] * 6, 3)
    y = DecimalValue([999999999] * 11 + [1], -2)
    exact = x.to_fraction() * y.to_fraction()
    lower = x.multiply(y, Rounding.FLOOR).to_fraction()
    upper = x.multiply(y, Rounding.CEILING).to_fraction()
    assert lower < exact < upper
    assert lower <= x.multiply(y, policy).to_fraction() <= upper


@pytest.mark.parametrize("smaller, larger", [
    ("-5", "-3"),
    ("-1e10", "-1"),
    ("-1", "0"),
    ("0", "0.5"),
    ("0.5", "1"),
    ("1", "1.000000000000000000001"),
    ("999", "1e3"),
])
def test_compare(smaller, larger):
    a, b = D(smaller), D(larger)
    assert arithmetic.compare(a.number, b.number) == -1
    assert arithmetic.compare(b.number, a.number) == 1
    assert arithmetic.compare(a.number, a.number) == 0
    assert a < b and b > a and a <= b and b >= a and a != b


def test_sorting():
    values = [D(s) for s in ("3", "-1e10", "0", "-2.5", "1e-20", "2.5")]
    assert [str(v) for v in sorted(values)] == ["-1E+10", "-2.5", "0", "1E-20", "2.5", "3"]


def test_power():
    assert D("2") ** 10 == D("1024")
    assert D("-2") ** 3 == D("-8")
    assert D("1.5") ** 2 == D("2.25")
    assert D("10") ** -2 == D("0.01")
    assert D("0") ** 0 == DecimalValue.one()
    assert D("2") ** 300 == DecimalValue.from_int(2 ** 300)


def test_power_of_zero_to_negative_exponent():
    with pytest.raises(DivisionByZero):
        D("0") ** -1


def test_power_requires_integer_exponent():
    with pytest.raises(TypeError):
        D("2").power(0.5)


def test_negate_and_abs():
    x = D("-3.25")
    assert -x == D("3.25")
    assert abs(x) == D("3.25")
    assert +x is x
    assert (-DecimalValue.zero()).is_zero
