"""
Numeric helpers and sanity checks shared by curves and models.
"""

from __future__ import annotations
import math
from typing import Iterable

from .errors import InvalidParameterError


# Maturities are rounded to this many decimals before being used as keys,
# so that T + dt computed in floating point lands on the literal key.
MATURITY_DECIMALS = 12


def maturity_key(t: float) -> float:
    return round(float(t), MATURITY_DECIMALS)


# ===== Sanity checks / assertions ============================================

def require_finite(name: str, value: float) -> float:
    """Return value as float, raise InvalidParameterError on NaN/Inf."""
    v = float(value)
    if not math.isfinite(v):
        raise InvalidParameterError(f"{name}: must be finite, got {value!r}")
    return v


def require_positive(name: str, value: float) -> float:
    v = require_finite(name, value)
    if v <= 0.0:
        raise InvalidParameterError(f"{name}: must be > 0, got {v}")
    return v


def require_non_negative(name: str, value: float) -> float:
    v = require_finite(name, value)
    if v < 0.0:
        raise InvalidParameterError(f"{name}: must be >= 0, got {v}")
    return v


def is_monotone_decreasing(x: Iterable[float]) -> bool:
    """True if non-increasing (allows equal)."""
    prev = None
    for v in x:
        if prev is not None and v > prev + 1e-14:
            return False
        prev = v
    return True
