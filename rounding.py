from __future__ import annotations
from enum import Enum
from typing import List, Sequence, Tuple

from limbs import (
    MAX_LIMBS, Number,
    digits_to_limbs, limbs_to_significand, sign_of,
    trim_leading_zeros, trim_trailing_zeros,
)
from overflow import fix_overflow

MIDPOINT = 500_000_000      # B / 2

class Rounding(Enum):
    HALF_EVEN = "half_even"
    HALF_AWAY_FROM_ZERO = "half_away_from_zero"
    HALF_TOWARD_ZERO = "half_toward_zero"
    TOWARD_ZERO = "toward_zero"
    AWAY_FROM_ZERO = "away_from_zero"
    CEILING = "ceiling"
    FLOOR = "floor"

DEFAULT_ROUNDING = Rounding.HALF_EVEN


def get_rounding(name: str) -> Rounding:
    key = (name or DEFAULT_ROUNDING.value).lower().replace("-", "_")
    try:
        return Rounding(key)
    except ValueError:
        raise NotImplementedError(
            f"Rounding '{name}' not implemented. Supported policies {[r.value for r in Rounding]}"
        )


def should_increment(
    policy: Rounding,
    negative: bool,
    odd: bool,
    remainder: int,
    half: int,
    sticky: bool = False,
) -> bool:
    """
    Decide whether the magnitude of the last retained digit goes up by one.
    `remainder` is the magnitude of the first discarded unit, `half` its
    midpoint and `sticky` tells whether anything further down is non-zero.
    """
    above = remainder > half or (remainder == half and sticky)
    tie = remainder == half and not sticky
    inexact = remainder != 0 or sticky

    if policy is Rounding.HALF_EVEN:
        return above or (tie and odd)
    if policy is Rounding.HALF_AWAY_FROM_ZERO:
        return above or tie
    if policy is Rounding.HALF_TOWARD_ZERO:
        return above
    if policy is Rounding.TOWARD_ZERO:
        return False
    if policy is Rounding.AWAY_FROM_ZERO:
        return inexact
    if policy is Rounding.CEILING:
        return inexact and not negative
    if policy is Rounding.FLOOR:
        return inexact and negative
    raise NotImplementedError(f"Rounding policy {policy!r} not implemented")


def round_limbs(
    limbs: Sequence[int],
    exponent: int,
    policy: Rounding = DEFAULT_ROUNDING,
    max_limbs: int = MAX_LIMBS,
) -> Tuple[List[int], int]:
    """Cut an in-window limb array down to `max_limbs` limbs under `policy`."""
    if max_limbs < 1:
        raise ValueError(f"max_limbs must be at least 1, got {max_limbs}")
    if len(limbs) <= max_limbs:
        return list(limbs), exponent

    result = list(limbs[:max_limbs])
    discarded = limbs[max_limbs:]
    sign = sign_of(limbs)
    if should_increment(
        policy,
        negative=sign < 0,
        odd=abs(result[-1]) % 2 == 1,
        remainder=abs(discarded[0]),
        half=MIDPOINT,
        sticky=any(discarded[1:]),
    ):
        result[-1] += sign
        result, exponent = fix_overflow(result, exponent)
        if len(result) > max_limbs:
            # 999..9 + 1 grew a limb; the dropped trailing limb is zero
            result = result[:max_limbs]
    return result, exponent


def canonicalize(
    limbs: Sequence[int],
    exponent: int,
    policy: Rounding = DEFAULT_ROUNDING,
) -> Number:
    """carry fix-up -> trim leading zeros -> round -> trim trailing zeros."""
    result, exponent = fix_overflow(limbs, exponent)
    result, exponent = trim_leading_zeros(result, exponent)
    result, exponent = round_limbs(result, exponent, policy)
    result, exponent = trim_trailing_zeros(result, exponent)
    return tuple(result), exponent


def round_decimal_places(
    limbs: Sequence[int],
    exponent: int,
    places: int,
    policy: Rounding = DEFAULT_ROUNDING,
) -> Number:
    """Round to `places` digits after the decimal point (negative places round left of it)."""
    significand, decimal_exponent = limbs_to_significand(limbs, exponent)
    if significand == 0 or decimal_exponent >= -places:
        return tuple(limbs), exponent

    dropped = -places - decimal_exponent
    quotient, remainder = divmod(abs(significand), 10 ** dropped)
    if should_increment(
        policy,
        negative=significand < 0,
        odd=quotient % 2 == 1,
        remainder=remainder,
        half=5 * 10 ** (dropped - 1),
    ):
        quotient += 1
    if quotient == 0:
        return (), 0

    digits = str(quotient)
    signed = "-" + digits if significand < 0 else digits
    packed, packed_exponent = digits_to_limbs(signed, len(digits) - 1 - places)
    return canonicalize(packed, packed_exponent, policy)
