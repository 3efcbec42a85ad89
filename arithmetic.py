from __future__ import annotations
import logging
from decimal import Decimal, localcontext
from fractions import Fraction
from typing import List

from limbs import (
    B, GUARD_LIMBS, MAX_LIMBS, ONE, ZERO, Limbs, Number,
    digits_to_limbs, limb_at, sign_of,
)
from overflow import fix_overflow
from rounding import DEFAULT_ROUNDING, Rounding, canonicalize

logger = logging.getLogger(__name__)

Q = Fraction  # rational type alias

SEED_PRECISION = 28          # significant digits of the reciprocal seed
SEED_LIMBS = 3               # leading divisor limbs feeding the seed
GOLDSCHMIDT_ITERATIONS = 64

TWO: Number = ((2,), 0)

class DivisionByZero(ZeroDivisionError):
    pass


def is_zero(x: Number) -> bool:
    return len(x[0]) == 0

def is_one(x: Number) -> bool:
    return x == ONE

def negate(x: Number) -> Number:
    limbs, exponent = x
    return tuple(-limb for limb in limbs), exponent

def absolute(x: Number) -> Number:
    limbs, exponent = x
    return tuple(abs(limb) for limb in limbs), exponent

def _lowest(x: Number) -> int:
    """Limb position of the least significant limb."""
    limbs, exponent = x
    return exponent - len(limbs) + 1


def compare(x: Number, y: Number) -> int:
    """-1, 0 or 1. Sign first, then exponent, then limbs from the top."""
    s1, s2 = sign_of(x[0]), sign_of(y[0])
    if s1 != s2:
        return -1 if s1 < s2 else 1
    if s1 == 0:
        return 0
    if x[1] != y[1]:
        # a larger exponent means a larger magnitude
        return s1 if x[1] > y[1] else -s1
    for i in range(max(len(x[0]), len(y[0]))):
        a, b = limb_at(x[0], i), limb_at(y[0], i)
        if a != b:
            return -1 if a < b else 1
    return 0


def _tail(x: Number, low: int) -> List[int]:
    """
    The part of x below limb position `low`, as two limbs: the limb at
    low - 1 exactly, then a sticky unit when anything further down is
    non-zero. Empty when nothing of x lies below `low`.
    """
    limbs, exponent = x
    first = exponent - low + 1  # index of position low - 1
    if not any(limbs[max(first, 0):]):
        return []
    sticky = sign_of(limbs) if any(limbs[max(first + 1, 0):]) else 0
    return [limb_at(limbs, first), sticky]


def add(x: Number, y: Number, rounding: Rounding = DEFAULT_ROUNDING) -> Number:
    """
    Sum in a window of at most MAX_LIMBS + GUARD_LIMBS limb positions.

    The window starts one limb above the larger exponent (room for the carry)
    and reaches down to the lowest limb of either operand. When the cap cuts
    an operand, or the operand lies entirely below the window, its part below
    the window is appended as one exact limb plus a sticky unit, so every
    rounding policy sees the true remainder.
    """
    if is_zero(x):
        return y
    if is_zero(y):
        return x
    if x == negate(y):
        return ZERO

    (limbs1, max1), (limbs2, max2) = x, y
    max3 = max(max1, max2) + 1
    min3 = min(_lowest(x), _lowest(y))
    if max3 - min3 + 1 > MAX_LIMBS + GUARD_LIMBS:
        min3 = max3 - (MAX_LIMBS + GUARD_LIMBS) + 1

    result = [limb_at(limbs1, max1 - e) + limb_at(limbs2, max2 - e)
              for e in range(max3, min3 - 1, -1)]
    # only the operand with the lower exponent can reach below a capped window
    result.extend(_tail(x, min3) or _tail(y, min3))
    result, max3 = fix_overflow(result, max3)
    return canonicalize(result, max3, rounding)


def subtract(x: Number, y: Number, rounding: Rounding = DEFAULT_ROUNDING) -> Number:
    return add(x, negate(y), rounding)


def _split_product(product: int):
    """(high, low) of a limb product, both carrying the product's sign."""
    high, low = divmod(abs(product), B)
    if product < 0:
        return -high, -low
    return high, low


def multiply(x: Number, y: Number, rounding: Rounding = DEFAULT_ROUNDING) -> Number:
    """
    Schoolbook product into a buffer of at most MAX_LIMBS + GUARD_LIMBS limbs.

    The buffer's top position is e1 + e2 + 1. Each limb product is split into
    its low part (placed at the product's position) and its high part (one
    position to the left). The carry engine runs right after every
    accumulation, and positions are recomputed from the current top exponent
    since a carry may have grown it. Parts below the buffer are summed
    exactly on the side and folded back in at the end: whole units into the
    lowest buffer limb, the rest as one exact limb plus a sticky unit.
    """
    if is_zero(x) or is_zero(y):
        return ZERO
    if is_one(x):
        return y
    if is_one(y):
        return x

    (limbs1, max1), (limbs2, max2) = x, y
    max3 = max1 + max2 + 1
    lowest = _lowest(x) + _lowest(y)
    length = min(max3 - lowest + 1, MAX_LIMBS + GUARD_LIMBS)
    result: List[int] = [0] * length
    dropped = 0  # in units of limb position `lowest`

    for i1, d1 in enumerate(limbs1):
        if d1 == 0:
            continue
        for i2, d2 in enumerate(limbs2):
            if d2 == 0:
                continue
            high, low = _split_product(d1 * d2)
            index = max3 - ((max1 - i1) + (max2 - i2))
            start = None
            if 0 <= index < len(result):
                result[index] += low
                start = index
            else:
                dropped += low * B ** (max3 - index - lowest)
            if 0 <= index - 1 < len(result):
                result[index - 1] += high
                if start is None:
                    start = index - 1
            else:
                dropped += high * B ** (max3 - index + 1 - lowest)
            if start is not None:
                result, max3 = fix_overflow(result, max3, start)

    if dropped:
        sign = 1 if dropped > 0 else -1
        scale = B ** (max3 - len(result) + 1 - lowest)
        carry, rest = divmod(abs(dropped), scale)
        limb, rest = divmod(rest, scale // B)
        result[-1] += sign * carry
        result.extend([sign * limb, sign if rest else 0])

    return canonicalize(result, max3, rounding)


def _reciprocal_seed(limbs: Limbs) -> Number:
    """Approximate 1/d for an exponent-free significand, from its leading limbs."""
    lead = limbs[:SEED_LIMBS]
    scaled = 0
    for limb in lead:
        scaled = scaled * B + limb
    with localcontext() as ctx:
        ctx.prec = SEED_PRECISION
        seed = Decimal(B ** (len(lead) - 1)) / Decimal(scaled)
    sign, digits, exp = seed.as_tuple()
    text = ("-" if sign else "") + "".join(str(d) for d in digits)
    seed_limbs, seed_exponent = digits_to_limbs(text, exp + len(digits) - 1)
    return canonicalize(seed_limbs, seed_exponent)


def divide(n: Number, d: Number, rounding: Rounding = DEFAULT_ROUNDING) -> Number:
    """Goldschmidt division.

    Both operands are moved to exponent 0 and the exponent difference is put
    back at the end. Starting from a seed f ~ 1/d, each step multiplies
    numerator and divisor by f and sets f = 2 - d, so d converges
    quadratically to One and the numerator to the quotient. The loop stops
    when d is One, when f itself canonicalizes to One (no further
    correction representable in 108 digits) or after GOLDSCHMIDT_ITERATIONS
    steps.
    """
    if is_zero(d):
        raise DivisionByZero("Division by 0 is undefined.")
    if is_one(d):
        return n
    if is_zero(n):
        return ZERO
    if n == d:
        return ONE

    result_exponent = n[1] - d[1]
    numerator: Number = (n[0], 0)
    divisor: Number = (d[0], 0)
    f = _reciprocal_seed(d[0])

    for iteration in range(1, GOLDSCHMIDT_ITERATIONS + 1):
        numerator = multiply(numerator, f, rounding)
        divisor = multiply(divisor, f, rounding)
        logger.debug("Goldschmidt iteration %d: d = %s", iteration, divisor)
        if is_one(divisor):
            break
        f = subtract(TWO, divisor, rounding)
        if is_one(f):
            logger.debug("Goldschmidt stopped at iteration %d: correction factor is One", iteration)
            break
    else:
        logger.warning("Goldschmidt division did not converge in %d iterations", GOLDSCHMIDT_ITERATIONS)

    limbs, exponent = numerator
    return canonicalize(limbs, exponent + result_exponent, rounding)


def reciprocal(x: Number, rounding: Rounding = DEFAULT_ROUNDING) -> Number:
    return divide(ONE, x, rounding)


def power(x: Number, exponent: int, rounding: Rounding = DEFAULT_ROUNDING) -> Number:
    """x**exponent for an integer exponent by binary exponentiation. 0**0 is One."""
    if exponent < 0:
        if is_zero(x):
            raise DivisionByZero("0 cannot be raised to a negative power.")
        return reciprocal(power(x, -exponent, rounding), rounding)

    result, base = ONE, x
    while exponent:
        if exponent & 1:
            result = multiply(result, base, rounding)
        exponent >>= 1
        if exponent:
            base = multiply(base, base, rounding)
    return result
