from __future__ import annotations
import math
from decimal import Decimal
from fractions import Fraction
from typing import Optional, Sequence, Union

import numpy as np

import arithmetic
from arithmetic import Q
from formats import get_float_format, get_int_format
from formatting import format_default, format_value
from limbs import (
    B, MAX_LIMBS, Number,
    digits_to_limbs, is_canonical, limbs_to_digits, limbs_to_significand, sign_of,
)
from overflow import check_float_range, check_int_magnitude, check_int_range, near_float_limit
from parsing import parse_decimal
from rounding import DEFAULT_ROUNDING, Rounding, canonicalize, round_decimal_places, round_limbs

Operand = Union["DecimalValue", int, float, Decimal, str]


class DecimalValue:
    """
    Immutable decimal number of up to 108 significant digits.

    Stored as limbs of radix 10^9, most significant first, and a limb
    exponent: value = sum(limbs[i] * 10**(9 * (exponent - i))). Every
    instance is canonical: no leading or trailing zero limbs, all limbs
    share the sign of the value, at most 12 limbs, and zero is ((), 0).
    """

    __slots__ = ("_limbs", "_exponent")

    def __init__(self, limbs: Sequence[int] = (), exponent: int = 0,
                 rounding: Rounding = DEFAULT_ROUNDING):
        self._limbs, self._exponent = canonicalize(limbs, exponent, rounding)

    @classmethod
    def _wrap(cls, number: Number) -> "DecimalValue":
        # arithmetic results are already canonical
        obj = cls.__new__(cls)
        obj._limbs, obj._exponent = number
        return obj

    # ---- construction ----------------------------------------------------

    @classmethod
    def from_int(cls, value: Union[int, np.integer]) -> "DecimalValue":
        if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
            raise TypeError(f"Expected an integer, got {type(value).__name__}")
        value = int(value)
        sign = -1 if value < 0 else 1
        magnitude = abs(value)
        limbs = []
        while magnitude:
            magnitude, limb = divmod(magnitude, B)
            limbs.append(sign * limb)
        limbs.reverse()
        return cls(limbs, len(limbs) - 1)

    @classmethod
    def from_float(cls, value: Union[float, np.floating], exact: bool = False) -> "DecimalValue":
        """
        By default the shortest decimal string that round-trips in the
        value's own precision is used, so from_float(np.float32(0.1)) is 0.1.
        With exact=True the full binary expansion is converted (rounded to
        108 digits).
        """
        if not isinstance(value, (float, np.floating)):
            raise TypeError(f"Expected a float, got {type(value).__name__}")
        if not math.isfinite(float(value)):
            raise ValueError(f"Cannot convert {value!r} to a decimal value.")
        if exact:
            return cls.from_fraction(Fraction(float(value)))
        text = np.format_float_scientific(value, unique=True, trim="-")
        return cls._wrap(parse_decimal(text))

    @classmethod
    def from_decimal(cls, value: Decimal) -> "DecimalValue":
        if not value.is_finite():
            raise ValueError(f"Cannot convert {value!r} to a decimal value.")
        sign, digits, exp = value.as_tuple()
        text = ("-" if sign else "") + "".join(str(d) for d in digits)
        limbs, exponent = digits_to_limbs(text, exp + len(digits) - 1)
        return cls(limbs, exponent)

    @classmethod
    def from_fraction(cls, value: Fraction) -> "DecimalValue":
        """Exact when the denominator only has factors 2 and 5, else a Goldschmidt quotient."""
        numerator, denominator = value.numerator, value.denominator
        twos = (denominator & -denominator).bit_length() - 1
        rest = denominator >> twos
        fives = 0
        while rest % 5 == 0:
            rest //= 5
            fives += 1
        if rest != 1:
            return cls.from_int(numerator) / cls.from_int(denominator)
        # n / (2^a 5^b) == n * 2^(k-a) * 5^(k-b) / 10^k
        k = max(twos, fives)
        scaled = numerator * 2 ** (k - twos) * 5 ** (k - fives)
        digits = str(scaled)
        return cls(*digits_to_limbs(digits, len(digits.lstrip("-")) - 1 - k))

    @classmethod
    def parse(cls, text: str, rounding: Rounding = DEFAULT_ROUNDING) -> "DecimalValue":
        return cls._wrap(parse_decimal(text, rounding=rounding))

    @classmethod
    def coerce(cls, value: Operand) -> "DecimalValue":
        if isinstance(value, DecimalValue):
            return value
        if isinstance(value, (int, np.integer)) and not isinstance(value, bool):
            return cls.from_int(value)
        if isinstance(value, (float, np.floating)):
            return cls.from_float(value)
        if isinstance(value, Decimal):
            return cls.from_decimal(value)
        if isinstance(value, Fraction):
            return cls.from_fraction(value)
        if isinstance(value, str):
            return cls.parse(value)
        raise TypeError(f"Cannot convert {type(value).__name__} to DecimalValue")

    @classmethod
    def zero(cls) -> "DecimalValue":
        return cls()

    @classmethod
    def one(cls) -> "DecimalValue":
        return cls((1,), 0)

    @classmethod
    def max_value(cls, exponent: int = 0) -> "DecimalValue":
        return cls((B - 1,) * MAX_LIMBS, exponent)

    @classmethod
    def min_value(cls, exponent: int = 0) -> "DecimalValue":
        return cls((1 - B,) * MAX_LIMBS, exponent)

    # ---- inspection ------------------------------------------------------

    @property
    def limbs(self):
        return self._limbs

    @property
    def exponent(self) -> int:
        return self._exponent

    @property
    def number(self) -> Number:
        return self._limbs, self._exponent

    @property
    def sign(self) -> int:
        return sign_of(self._limbs)

    @property
    def length(self) -> int:
        return len(self._limbs)

    @property
    def is_zero(self) -> bool:
        return not self._limbs

    @property
    def is_one(self) -> bool:
        return arithmetic.is_one(self.number)

    @property
    def is_negative(self) -> bool:
        return self.sign < 0

    @property
    def is_positive(self) -> bool:
        return self.sign > 0

    @property
    def is_integer(self) -> bool:
        # the last limb is non-zero, so any limb below B^0 is a fraction
        return self._exponent - len(self._limbs) + 1 >= 0

    def digits(self) -> int:
        """Number of significant decimal digits (0 for zero)."""
        significand, _ = limbs_to_significand(self._limbs, self._exponent)
        return len(str(abs(significand))) if significand else 0

    def is_canonical(self) -> bool:
        return is_canonical(self._limbs, self._exponent)

    # ---- arithmetic ------------------------------------------------------

    def add(self, other: Operand, rounding: Rounding = DEFAULT_ROUNDING) -> "DecimalValue":
        return self._wrap(arithmetic.add(self.number, self.coerce(other).number, rounding))

    def subtract(self, other: Operand, rounding: Rounding = DEFAULT_ROUNDING) -> "DecimalValue":
        return self._wrap(arithmetic.subtract(self.number, self.coerce(other).number, rounding))

    def multiply(self, other: Operand, rounding: Rounding = DEFAULT_ROUNDING) -> "DecimalValue":
        return self._wrap(arithmetic.multiply(self.number, self.coerce(other).number, rounding))

    def divide(self, other: Operand, rounding: Rounding = DEFAULT_ROUNDING) -> "DecimalValue":
        return self._wrap(arithmetic.divide(self.number, self.coerce(other).number, rounding))

    def reciprocal(self, rounding: Rounding = DEFAULT_ROUNDING) -> "DecimalValue":
        return self._wrap(arithmetic.reciprocal(self.number, rounding))

    def power(self, exponent: int, rounding: Rounding = DEFAULT_ROUNDING) -> "DecimalValue":
        if isinstance(exponent, bool) or not isinstance(exponent, (int, np.integer)):
            raise TypeError(f"Only integer powers are supported, got {type(exponent).__name__}")
        return self._wrap(arithmetic.power(self.number, int(exponent), rounding))

    def negate(self) -> "DecimalValue":
        return self._wrap(arithmetic.negate(self.number))

    def abs_value(self) -> "DecimalValue":
        return self._wrap(arithmetic.absolute(self.number))

    def round_to_limbs(self, max_limbs: int, rounding: Rounding = DEFAULT_ROUNDING) -> "DecimalValue":
        """Round to at most `max_limbs` limbs, i.e. 9 * max_limbs significant digits."""
        limbs, exponent = round_limbs(self._limbs, self._exponent, rounding, max_limbs)
        return DecimalValue(limbs, exponent)

    def round_places(self, places: int, rounding: Rounding = DEFAULT_ROUNDING) -> "DecimalValue":
        return self._wrap(round_decimal_places(self._limbs, self._exponent, places, rounding))

    @staticmethod
    def max_magnitude(x: Operand, y: Operand) -> "DecimalValue":
        x, y = DecimalValue.coerce(x), DecimalValue.coerce(y)
        c = arithmetic.compare(arithmetic.absolute(x.number), arithmetic.absolute(y.number))
        if c == 0:
            return x if x >= y else y
        return x if c > 0 else y

    @staticmethod
    def min_magnitude(x: Operand, y: Operand) -> "DecimalValue":
        x, y = DecimalValue.coerce(x), DecimalValue.coerce(y)
        c = arithmetic.compare(arithmetic.absolute(x.number), arithmetic.absolute(y.number))
        if c == 0:
            return x if x <= y else y
        return x if c < 0 else y

    def __add__(self, other):
        try:
            return self.add(other)
        except TypeError:
            return NotImplemented

    def __radd__(self, other):
        try:
            return self.coerce(other).add(self)
        except TypeError:
            return NotImplemented

    def __sub__(self, other):
        try:
            return self.subtract(other)
        except TypeError:
            return NotImplemented

    def __rsub__(self, other):
        try:
            return self.coerce(other).subtract(self)
        except TypeError:
            return NotImplemented

    def __mul__(self, other):
        try:
            return self.multiply(other)
        except TypeError:
            return NotImplemented

    def __rmul__(self, other):
        try:
            return self.coerce(other).multiply(self)
        except TypeError:
            return NotImplemented

    def __truediv__(self, other):
        try:
            return self.divide(other)
        except TypeError:
            return NotImplemented

    def __rtruediv__(self, other):
        try:
            return self.coerce(other).divide(self)
        except TypeError:
            return NotImplemented

    def __pow__(self, exponent):
        if isinstance(exponent, bool) or not isinstance(exponent, (int, np.integer)):
            return NotImplemented
        return self.power(exponent)

    def __neg__(self):
        return self.negate()

    def __pos__(self):
        return self

    def __abs__(self):
        return self.abs_value()

    def __round__(self, ndigits: Optional[int] = None):
        if ndigits is None:
            return self.round_places(0).to_int()
        return self.round_places(ndigits)

    # ---- comparison ------------------------------------------------------

    @staticmethod
    def _comparable(other) -> Optional["DecimalValue"]:
        # floats are left out: 0.1 has no exact 108-digit form and would break hash consistency
        if isinstance(other, DecimalValue):
            return other
        if isinstance(other, (int, np.integer)) and not isinstance(other, bool):
            return DecimalValue.from_int(other)
        if isinstance(other, Decimal) and other.is_finite():
            return DecimalValue.from_decimal(other)
        return None

    def compare(self, other: Operand) -> int:
        return arithmetic.compare(self.number, self.coerce(other).number)

    def __eq__(self, other):
        other = self._comparable(other)
        if other is None:
            return NotImplemented
        return self.number == other.number

    def __lt__(self, other):
        other = self._comparable(other)
        if other is None:
            return NotImplemented
        return arithmetic.compare(self.number, other.number) < 0

    def __le__(self, other):
        other = self._comparable(other)
        if other is None:
            return NotImplemented
        return arithmetic.compare(self.number, other.number) <= 0

    def __gt__(self, other):
        other = self._comparable(other)
        if other is None:
            return NotImplemented
        return arithmetic.compare(self.number, other.number) > 0

    def __ge__(self, other):
        other = self._comparable(other)
        if other is None:
            return NotImplemented
        return arithmetic.compare(self.number, other.number) >= 0

    def __hash__(self):
        # Decimal hashes like the equal int and Fraction, reducing 10**exp
        # modulo the hash prime instead of building it
        return hash(self.to_decimal())

    def __bool__(self):
        return not self.is_zero

    # ---- conversion ------------------------------------------------------

    def to_fraction(self) -> Q:
        significand, decimal_exponent = limbs_to_significand(self._limbs, self._exponent)
        if decimal_exponent >= 0:
            return Q(significand * 10 ** decimal_exponent)
        return Q(significand, 10 ** -decimal_exponent)

    def to_decimal(self) -> Decimal:
        significand, decimal_exponent = limbs_to_significand(self._limbs, self._exponent)
        return Decimal(f"{significand}E{decimal_exponent}")

    def to_int(self, fmt: Optional[str] = None) -> int:
        """Truncates toward zero. With a named integer format the range is checked."""
        int_format = get_int_format(fmt) if fmt is not None else None
        leading = limbs_to_digits(self._limbs, self._exponent)[1]
        if int_format is not None:
            check_int_magnitude(leading, int_format)
        significand, decimal_exponent = limbs_to_significand(self._limbs, self._exponent)
        if decimal_exponent >= 0:
            value = significand * 10 ** decimal_exponent
        elif leading < 0:
            # |value| < 1
            value = 0
        else:
            value = abs(significand) // 10 ** -decimal_exponent
            if significand < 0:
                value = -value
        if int_format is not None:
            check_int_range(value, int_format)
        return value

    def to_float(self, fmt: str = "float64"):
        """
        Nearest value of the named binary format, rounded from the decimal digits.
        float64 and bfloat16 give a Python float, float32/float16 a numpy scalar.
        """
        ff = get_float_format(fmt)
        if near_float_limit(limbs_to_digits(self._limbs, self._exponent)[1], ff):
            check_float_range(self.to_fraction(), ff)
        text = format_value(self._limbs, self._exponent, "R")
        if ff.numpy_type is None:
            return _round_to_bits(float(text), ff.p)
        if ff.numpy_type is np.float64:
            return float(text)
        return ff.numpy_type(text)

    def __int__(self):
        return self.to_int()

    def __float__(self):
        return self.to_float()

    # ---- text ------------------------------------------------------------

    def __format__(self, spec: str) -> str:
        if not spec:
            return str(self)
        return format_value(self._limbs, self._exponent, spec)

    def format(self, spec: str = "G", rounding: Rounding = DEFAULT_ROUNDING) -> str:
        return format_value(self._limbs, self._exponent, spec, rounding)

    def __str__(self):
        return format_default(self._limbs, self._exponent)

    def __repr__(self):
        return f"DecimalValue('{format_value(self._limbs, self._exponent, 'R')}')"


def _round_to_bits(x: float, p: int) -> float:
    """Round a double to p significant bits, ties to even (bfloat16 has no numpy type)."""
    if x == 0.0:
        return x
    m, e = math.frexp(x)
    return math.ldexp(round(m * 2 ** p), e - p)
