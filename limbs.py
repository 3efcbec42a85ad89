from __future__ import annotations
from typing import List, Sequence, Tuple

B = 1_000_000_000       # limb radix
DIGITS_PER_LIMB = 9
MAX_LIMBS = 12          # 108 significant decimal digits
GUARD_LIMBS = 2         # carry-out limb + rounding limb in working buffers

Limbs = Tuple[int, ...]
Number = Tuple[Limbs, int]   # (limbs, exponent), value = sum(limbs[i] * B**(exponent - i))

ZERO: Number = ((), 0)
ONE: Number = ((1,), 0)


def sign_of(limbs: Sequence[int]) -> int:
    """Sign of the most significant non-zero limb (0 for an all-zero array)."""
    for limb in limbs:
        if limb > 0:
            return 1
        if limb < 0:
            return -1
    return 0


def limb_at(limbs: Sequence[int], index: int) -> int:
    if 0 <= index < len(limbs):
        return limbs[index]
    return 0


def trim_leading_zeros(limbs: Sequence[int], exponent: int) -> Tuple[List[int], int]:
    for i, limb in enumerate(limbs):
        if limb != 0:
            return list(limbs[i:]), exponent - i
    return [], 0


def trim_trailing_zeros(limbs: Sequence[int], exponent: int) -> Tuple[List[int], int]:
    for i in range(len(limbs) - 1, -1, -1):
        if limbs[i] != 0:
            return list(limbs[:i + 1]), exponent
    return [], 0


def trim_digits(digits: str, decimal_exponent: int) -> Tuple[str, int]:
    """
    Strip zero characters from both ends of an unsigned digit string.
    `decimal_exponent` is the power of ten of the first character and moves
    down by one for every leading zero removed. All zeros gives ("", 0).
    """
    stripped = digits.lstrip("0")
    if not stripped:
        return "", 0
    decimal_exponent -= len(digits) - len(stripped)
    return stripped.rstrip("0"), decimal_exponent


def digits_to_limbs(signed_digits: str, decimal_exponent: int) -> Tuple[List[int], int]:
    """
    Pack a decimal digit string into limbs.

    `decimal_exponent` is the power of ten of the first digit. The limb
    exponent is floor(decimal_exponent / 9) and the first digit lands at
    offset 8 - (decimal_exponent mod 9) inside its limb; the string is padded
    with zeros on both sides to whole chunks of 9 and every chunk becomes one
    limb carrying the sign. No rounding happens here.

        digits_to_limbs("12345", 10)  -> ([12, 345000000], 1)
        digits_to_limbs("12345", -8)  -> ([12, 345000000], -1)
    """
    negative = signed_digits.startswith("-")
    digits = signed_digits.lstrip("+-")
    if not digits.isdigit() or not digits.isascii():
        raise ValueError(f"Not a digit string: {signed_digits!r}")

    digits, decimal_exponent = trim_digits(digits, decimal_exponent)
    if not digits:
        return [], 0

    exponent = decimal_exponent // DIGITS_PER_LIMB      # floor, also for negatives
    shift = decimal_exponent - exponent * DIGITS_PER_LIMB
    padded = "0" * (DIGITS_PER_LIMB - 1 - shift) + digits
    padded += "0" * (-len(padded) % DIGITS_PER_LIMB)

    sign = -1 if negative else 1
    limbs = [sign * int(padded[i:i + DIGITS_PER_LIMB])
             for i in range(0, len(padded), DIGITS_PER_LIMB)]
    return trim_trailing_zeros(limbs, exponent)


def limbs_to_digits(limbs: Sequence[int], exponent: int) -> Tuple[str, int]:
    """
    Unpack limbs into (signed digit string, power of ten of the first digit).
    The first limb is written unpadded, every following limb zero-padded to
    9 digits. Zero gives ("0", 0).
    """
    limbs, exponent = trim_leading_zeros(limbs, exponent)
    if not limbs:
        return "0", 0
    head = str(abs(limbs[0]))
    digits = head + "".join(f"{abs(limb):09d}" for limb in limbs[1:])
    if limbs[0] < 0:
        digits = "-" + digits
    return digits, exponent * DIGITS_PER_LIMB + len(head) - 1


def limbs_to_significand(limbs: Sequence[int], exponent: int) -> Tuple[int, int]:
    """Integer form: value == significand * 10**decimal_exponent, no trailing zeros in the significand."""
    digits, first = limbs_to_digits(limbs, exponent)
    negative = digits.startswith("-")
    digits, first = trim_digits(digits.lstrip("-"), first)
    if not digits:
        return 0, 0
    significand = int(digits)
    return (-significand if negative else significand), first - (len(digits) - 1)


def is_canonical(limbs: Sequence[int], exponent: int, max_limbs: int = MAX_LIMBS) -> bool:
    if len(limbs) == 0:
        return exponent == 0
    if len(limbs) > max_limbs or limbs[0] == 0 or limbs[-1] == 0:
        return False
    sign = sign_of(limbs)
    if sign > 0:
        return all(0 <= limb < B for limb in limbs)
    return all(-B < limb <= 0 for limb in limbs)
