import logging
from fractions import Fraction

import pytest

import arithmetic
from arithmetic import DivisionByZero
from decimal_value import DecimalValue

D = DecimalValue.parse

TOLERANCE = Fraction(1, 10 ** 100)


def test_one_third_fills_twelve_limbs():
    q = D("1") / D("3")
    assert q.limbs == (333333333,) * 12
    assert q.exponent == -1


def test_one_half():
    q = D("1") / D("2")
    assert q.number == ((500000000,), -1)
    assert str(q) == "5E-1"


@pytest.mark.parametrize("n, d, expected", [
    ("10", "4", "2.5"),
    ("1", "8", "0.125"),
    ("2", "0.5", "4"),
    ("1e20", "1e-20", "1e40"),
    ("-7", "2", "-3.5"),
    ("-9", "-3", "3"),
    ("36824.5", "15.67", "2350"),
])
def test_exact_quotients(n, d, expected):
    assert D(n) / D(d) == D(expected)


def test_negative_quotient_is_mirror_image():
    assert D("-1") / D("3") == -(D("1") / D("3"))


@pytest.mark.parametrize("n, d", [
    ("22", "7"),
    ("1", "3"),
    ("2", "3"),
    ("123456789.123456789", "987654321.987654321"),
    ("1e-50", "7.77"),
    ("-5", "0.000000000123"),
])
def test_inexact_quotients_within_tolerance(n, d):
    x, y = D(n), D(d)
    exact = x.to_fraction() / y.to_fraction()
    assert abs((x / y).to_fraction() - exact) <= abs(exact) * TOLERANCE


def test_shortcuts():
    x = D("-42.125")
    assert x / DecimalValue.one() == x
    assert x / x == DecimalValue.one()
    assert (DecimalValue.zero() / x).is_zero


@pytest.mark.parametrize("n", ["1", "0", "-3.5"])
def test_division_by_zero(n):
    with pytest.raises(DivisionByZero):
        D(n) / DecimalValue.zero()
    with pytest.raises(ZeroDivisionError):
        arithmetic.divide(D(n).number, ((), 0))


def test_reciprocal_of_zero():
    with pytest.raises(DivisionByZero):
        DecimalValue.zero().reciprocal()


@pytest.mark.parametrize("x", ["2", "4", "5", "8", "0.5", "1.25e-10"])
def test_reciprocal_exact_roundtrip(x):
    v = D(x)
    assert v * v.reciprocal() == DecimalValue.one()


@pytest.mark.parametrize("x", ["3", "7", "1.1", "-9.8712"])
def test_reciprocal_close_to_one(x):
    v = D(x)
    product = (v * v.reciprocal()).to_fraction()
    assert abs(product - 1) < TOLERANCE


def test_iterations_are_logged(caplog):
    caplog.set_level(logging.DEBUG, logger="arithmetic")
    D("1") / D("3")
    assert "Goldschmidt iteration 1" in caplog.text
    assert not [r for r in caplog.records if r.levelno >= logging.WARNING]
