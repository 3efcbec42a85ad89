import re
from typing import List, Union

import numpy as np

from limbs import Number, digits_to_limbs
from rounding import DEFAULT_ROUNDING, Rounding, canonicalize

GROUP_SEPARATORS = ",_ '\u00a0\u202f"

# sign, integer digits, optional fraction digits, optional exponent
NUMBER = re.compile(r"([-+]?)(\d+)(?:\.(\d+))?(?:[eE]([-+]?\d+))?", re.ASCII)

class ParseError(ValueError):
    pass

def strip_separators(text: str, separators: str = GROUP_SEPARATORS) -> str:
    return text.strip().translate({ord(c): None for c in separators})

def parse_decimal(
    text: str,
    separators: str = GROUP_SEPARATORS,
    rounding: Rounding = DEFAULT_ROUNDING,
) -> Number:
    """
    Parse a decimal literal into canonical (limbs, exponent).
    Accepted: "1234", "-1.5", "+6.02e23", "1.2345E-10", "149 597 870 700".
    Rejected: "", "e15", ".5", "5.", "6.02e", "1.2.3", "3891.6 km".
    """
    if not isinstance(text, str):
        raise TypeError(f"Expected str, got {type(text).__name__}")
    cleaned = strip_separators(text, separators)
    match = NUMBER.fullmatch(cleaned)
    if match is None:
        raise ParseError(f"Invalid decimal number: {text!r}")

    sign, int_digits, frac_digits, exp_digits = match.groups()
    decimal_exponent = int(exp_digits or 0) + len(int_digits) - 1
    limbs, exponent = digits_to_limbs(sign + int_digits + (frac_digits or ""), decimal_exponent)
    return canonicalize(limbs, exponent, rounding)

def load_values_from_file(path: str) -> List[Number]:
    """One number per line; blank lines and '#' comments are skipped."""
    with open(path, "r", encoding="utf-8") as f:
        lines = f.read().splitlines()
    values = []
    for lineno, line in enumerate(lines, start=1):
        s = line.split("#", 1)[0].strip()
        if not s:
            continue
        try:
            values.append(parse_decimal(s))
        except ParseError as e:
            raise ParseError(f"Line {lineno}: {e}") from e
    if not values:
        raise ParseError("Empty file.")
    return values

def load_values_from_npy_file(path: str) -> List[Union[int, np.floating]]:
    """
    Elements of a numpy array file, flattened. Integer arrays give Python
    ints; float arrays give numpy scalars, which keep their own precision
    for the shortest-digits conversion.
    """
    arr = np.load(path, allow_pickle=False).ravel()
    if arr.size == 0:
        raise ParseError("Empty file.")
    k = arr.dtype.kind

    if k in ('i', 'u'):
        return [int(x) for x in arr]
    if k == 'f':
        if not np.isfinite(arr).all():
            raise ValueError("NaN/Inf encountered; cannot convert to a decimal value.")
        return [x for x in arr]
    raise TypeError(f"Unsupported dtype: {arr.dtype!r}")
