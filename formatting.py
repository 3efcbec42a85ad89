from __future__ import annotations
import re
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from limbs import digits_to_limbs, limbs_to_digits, limbs_to_significand, trim_digits
from rounding import DEFAULT_ROUNDING, Rounding, round_decimal_places

FORMAT_SPEC = re.compile(r"([DRFEGNP])(\d*)(U?)", re.IGNORECASE | re.ASCII)

SUPERSCRIPTS = str.maketrans("-0123456789", "⁻⁰¹²³⁴⁵⁶⁷⁸⁹")

class FormatSpecError(ValueError):
    pass

@dataclass(frozen=True)
class FormatSpec:
    style: str                  # one of D R F E G N P
    precision: Optional[int]    # None when no digits were given
    unicode: bool               # U flag: ×10 and superscript exponent

def parse_format_spec(spec: str) -> FormatSpec:
    match = FORMAT_SPEC.fullmatch(spec or "")
    if match is None:
        raise FormatSpecError(f"Invalid format specifier: {spec!r}")
    style, precision, flag = match.groups()
    return FormatSpec(
        style=style.upper(),
        precision=int(precision) if precision else None,
        unicode=bool(flag),
    )

def _unpack(limbs: Sequence[int], exponent: int) -> Tuple[bool, str, int]:
    """(negative, significant digits without trailing zeros, power of ten of the first digit)"""
    signed, first = limbs_to_digits(limbs, exponent)
    negative = signed.startswith("-")
    digits, first = trim_digits(signed.lstrip("-"), first)
    if not digits:
        return False, "0", 0
    return negative, digits, first

def exponent_suffix(exponent: int, unicode: bool = False) -> str:
    if unicode:
        return "×10" + str(exponent).translate(SUPERSCRIPTS)
    return f"E{exponent:+d}"

def format_default(limbs: Sequence[int], exponent: int) -> str:
    """Scientific form without a zero exponent: 0, 2, 5.4321, 1.22215E+1, -1.3E+1."""
    negative, digits, first = _unpack(limbs, exponent)
    text = digits[0] + ("." + digits[1:] if len(digits) > 1 else "")
    if first != 0:
        text += exponent_suffix(first)
    return ("-" if negative else "") + text

def format_round_trip(limbs, exponent, precision=None, unicode=False) -> str:
    significand, decimal_exponent = limbs_to_significand(limbs, exponent)
    text = str(abs(significand))
    if precision is not None:
        text = text.zfill(precision)
    if decimal_exponent != 0:
        text += exponent_suffix(decimal_exponent, unicode)
    return ("-" if significand < 0 else "") + text

def format_scientific(limbs, exponent, precision=None, unicode=False,
                      rounding: Rounding = DEFAULT_ROUNDING) -> str:
    if precision is not None:
        _, _, first = _unpack(limbs, exponent)
        # precision + 1 significant digits; a carry (9.99 -> 10.0) moves the first digit up
        limbs, exponent = round_decimal_places(limbs, exponent, precision - first, rounding)
    negative, digits, first = _unpack(limbs, exponent)
    if precision is not None:
        digits = digits.ljust(precision + 1, "0")
    text = digits[0] + ("." + digits[1:] if len(digits) > 1 else "")
    return ("-" if negative else "") + text + exponent_suffix(first, unicode)

def format_fixed(limbs, exponent, precision=None, grouping=False,
                 rounding: Rounding = DEFAULT_ROUNDING) -> str:
    if precision is not None:
        limbs, exponent = round_decimal_places(limbs, exponent, precision, rounding)
    negative, digits, first = _unpack(limbs, exponent)
    if digits == "0":
        int_part, frac_part = "0", ""
    elif first >= 0:
        int_part = digits[:first + 1].ljust(first + 1, "0")
        frac_part = digits[first + 1:]
    else:
        int_part, frac_part = "0", "0" * (-first - 1) + digits
    if precision is not None:
        frac_part = frac_part.ljust(precision, "0")
    if grouping:
        int_part = f"{int(int_part):,}"
    text = int_part + ("." + frac_part if frac_part else "")
    return ("-" if negative else "") + text

def format_value(limbs: Sequence[int], exponent: int, spec: str = "G",
                 rounding: Rounding = DEFAULT_ROUNDING) -> str:
    """
    Render a canonical (limbs, exponent) pair.

    Styles: R/D round-trip significand + exponent, E scientific, F fixed,
    N fixed with thousands grouping, G shorter of E and F, P percent.
    A trailing U switches exponents to ×10 with superscript digits.
    """
    fs = parse_format_spec(spec)
    if fs.style in ("R", "D"):
        return format_round_trip(limbs, exponent, fs.precision, fs.unicode)
    if fs.style == "E":
        return format_scientific(limbs, exponent, fs.precision, fs.unicode, rounding)
    if fs.style == "F":
        return format_fixed(limbs, exponent, fs.precision, rounding=rounding)
    if fs.style == "N":
        return format_fixed(limbs, exponent, fs.precision, grouping=True, rounding=rounding)
    if fs.style == "P":
        # x100 is a pure shift of the digits
        signed, first = limbs_to_digits(limbs, exponent)
        shifted, shifted_exponent = digits_to_limbs(signed, first + 2)
        return format_fixed(shifted, shifted_exponent, fs.precision, rounding=rounding) + "%"
    # G
    scientific = format_scientific(limbs, exponent, fs.precision, fs.unicode, rounding)
    fixed = format_fixed(limbs, exponent, fs.precision, rounding=rounding)
    return scientific if len(scientific) < len(fixed) else fixed
