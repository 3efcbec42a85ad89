import math
from fractions import Fraction
from typing import List, Optional, Sequence, Tuple

from formats import FloatFormat, IntFormat, overflow_threshold
from limbs import B, sign_of

LOG10_2 = math.log10(2)

class ConversionOverflow(OverflowError):
    pass


def _split(value: int, sign: int) -> Tuple[int, int]:
    """(carry, limb) with the limb inside the window of `sign`: [0, B) or (-B, 0]."""
    if sign >= 0:
        return divmod(value, B)
    high, low = divmod(-value, B)
    return -high, -low


def fix_overflow(
    limbs: Sequence[int],
    exponent: int,
    start_index: Optional[int] = None,
) -> Tuple[List[int], int]:
    """Bring every limb back inside the window of the value's sign.

    The sign is taken from the most significant non-zero limb. Scanning right
    to left from `start_index` (default: the last limb), a limb outside the
    window is reduced by multiples of B and the quotient is carried into its
    left neighbour. A carry past index 0 prepends a limb and bumps the
    exponent. Limbs right of `start_index` are not touched.

    The input is never modified; the result is always a fresh list.
    If the carries flip the sign of the leading limb (only possible for
    mixed-sign input), the pass is repeated over the whole array.
    """
    result = list(limbs)
    sign = sign_of(result)
    if sign == 0:
        return result, exponent
    if start_index is None:
        start_index = len(result) - 1

    carry = 0
    for i in range(start_index, -1, -1):
        carry, result[i] = _split(result[i] + carry, sign)
    while carry:
        if (carry > 0) != (sign > 0):
            # the carry out of the top limb has the other sign
            result.insert(0, carry)
            return fix_overflow(result, exponent + 1)
        carry, limb = _split(carry, sign)
        result.insert(0, limb)
        exponent += 1

    if sign_of(result) != sign:
        return fix_overflow(result, exponent)
    return result, exponent


def check_int_magnitude(leading: int, fmt: IntFormat) -> None:
    """Reject from the power of ten of the leading digit alone, before the int is built."""
    if leading > fmt.bits * LOG10_2 + 1:
        raise ConversionOverflow(
            f"Value of order 1E+{leading} does not fit in {fmt.name} [{fmt.min_value}, {fmt.max_value}]"
        )


def check_int_range(value: int, fmt: IntFormat) -> int:
    if not fmt.min_value <= value <= fmt.max_value:
        raise ConversionOverflow(
            f"Value does not fit in {fmt.name} [{fmt.min_value}, {fmt.max_value}]"
        )
    return value


def near_float_limit(leading: int, fmt: FloatFormat) -> bool:
    """
    Range check from the power of ten of the leading digit. Raises when the
    value is far above Fmax. True when it is close enough to Fmax that only
    check_float_range on the exact value can decide.
    """
    limit = math.log10(fmt.Fmax)
    if leading > limit + 1:
        raise ConversionOverflow(
            f"Value of order 1E+{leading} overflows {fmt.name}: magnitude exceeds Fmax = {fmt.Fmax!r}"
        )
    return leading >= math.floor(limit) - 1


def check_float_range(value: Fraction, fmt: FloatFormat) -> Fraction:
    # |value| >= threshold rounds to +-inf in the target format
    if abs(value) >= overflow_threshold(fmt):
        raise ConversionOverflow(
            f"Value overflows {fmt.name}: magnitude exceeds Fmax = {fmt.Fmax!r}"
        )
    return value
