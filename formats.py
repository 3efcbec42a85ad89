from dataclasses import dataclass
from fractions import Fraction
from math import ldexp
from typing import Optional

import numpy as np

@dataclass(frozen=True)
class FloatFormat:
    name: str
    p: int              # precision in bits (incl. implicit 1)
    emin: int           # minimum normal exponent (unbiased)
    emax: int           # maximum finite exponent (unbiased)
    # Derived (IEEE-754, round-to-nearest-even):
    Fmax: float         # largest finite positive
    eps: float          # machine epsilon = 2^(1-p)
    u: float            # unit roundoff = eps/2 = 2^(-p)
    min_normal: float   # smallest positive normal = 2^emin
    denorm_min: float   # smallest positive subnormal = 2^(emin - (p-1))
    numpy_type: Optional[type] = None   # scalar type to return, None when numpy has none

@dataclass(frozen=True)
class IntFormat:
    name: str
    bits: int
    signed: bool
    min_value: int
    max_value: int
    numpy_type: type

def _derive(name: str, p: int, emin: int, emax: int, numpy_type: Optional[type]) -> FloatFormat:
    eps = ldexp(1.0, 1 - p)
    u = ldexp(1.0, -p)
    min_normal = ldexp(1.0, emin)
    denorm_min = ldexp(1.0, emin - (p - 1))
    # Fmax = (2 - 2^(1-p)) * 2^emax
    Fmax = (2.0 - ldexp(1.0, 1 - p)) * ldexp(1.0, emax)
    return FloatFormat(
        name=name, p=p, emin=emin, emax=emax,
        Fmax=Fmax, eps=eps, u=u,
        min_normal=min_normal, denorm_min=denorm_min,
        numpy_type=numpy_type,
    )

# IEEE-754 binary formats (unbiased exponent bounds):
# - binary16:   p=11,  emin = -14, emax = 15
# - bfloat16:   p=8,   emin = -126, emax = 127   (same exponent range as fp32)
# - binary32:   p=24,  emin = -126, emax = 127
# - binary64:   p=53,  emin = -1022, emax = 1023
_FLOAT_REGISTRY = {
    "float16":   (11,  -14, 15, np.float16),
    "fp16":      (11,  -14, 15, np.float16),
    "binary16":  (11,  -14, 15, np.float16),
    "half":      (11,  -14, 15, np.float16),

    "bfloat16":  (8,  -126, 127, None),
    "bf16":      (8,  -126, 127, None),

    "float32":   (24, -126, 127, np.float32),
    "fp32":      (24, -126, 127, np.float32),
    "binary32":  (24, -126, 127, np.float32),
    "single":    (24, -126, 127, np.float32),

    "float64":   (53, -1022, 1023, np.float64),
    "fp64":      (53, -1022, 1023, np.float64),
    "binary64":  (53, -1022, 1023, np.float64),
    "double":    (53, -1022, 1023, np.float64),
}

_INT_REGISTRY = {
    "int8":   np.int8,   "sbyte":  np.int8,
    "int16":  np.int16,  "short":  np.int16,
    "int32":  np.int32,  "int":    np.int32,
    "int64":  np.int64,  "long":   np.int64,
    "uint8":  np.uint8,  "byte":   np.uint8,
    "uint16": np.uint16, "ushort": np.uint16,
    "uint32": np.uint32, "uint":   np.uint32,
    "uint64": np.uint64, "ulong":  np.uint64,
}

def get_float_format(name: str) -> FloatFormat:
    key = (name or "float64").lower()
    try:
        p, emin, emax, numpy_type = _FLOAT_REGISTRY[key]
    except KeyError:
        raise NotImplementedError(f"Format '{name}' not implemented. Supported formats {list(_FLOAT_REGISTRY)}")
    return _derive(key, p, emin, emax, numpy_type)

def get_int_format(name: str) -> IntFormat:
    key = (name or "int64").lower()
    try:
        numpy_type = _INT_REGISTRY[key]
    except KeyError:
        raise NotImplementedError(f"Format '{name}' not implemented. Supported formats {list(_INT_REGISTRY)}")
    info = np.iinfo(numpy_type)
    return IntFormat(
        name=key, bits=info.bits, signed=info.min < 0,
        min_value=int(info.min), max_value=int(info.max),
        numpy_type=numpy_type,
    )

def overflow_threshold(fmt: FloatFormat) -> Fraction:
    """
    Smallest magnitude that rounds to infinity under round-to-nearest-even:
    Fmax plus half an ulp at the top binade, i.e. 2^emax * (2 - 2^-p).
    Exactly at the threshold the tie goes to the even neighbour, which is infinity.
    """
    return Fraction(2) ** fmt.emax * (2 - Fraction(1, 2 ** fmt.p))
