"""Math utilities for common operations."""

from __future__ import annotations

import math
from typing import TypeVar

import numpy as np

Number = TypeVar("Number", int, float, np.number)


def clamp(value: Number, min_val: Number, max_val: Number) -> Number:
    """Clamp value to range [min_val, max_val].

    Args:
        value: Value to clamp
        min_val: Minimum allowed value
        max_val: Maximum allowed value

    Returns:
        Clamped value
    """
    return max(min_val, min(max_val, value))


def finite_or(value: object, fallback: float) -> float:
    """Coerce value to a finite float, or return fallback.

    Args:
        value: Any value (number, numeric string, None, ...)
        fallback: Value used when coercion fails or the result is NaN/inf

    Returns:
        Finite float
    """
    try:
        number = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return fallback
    return number if math.isfinite(number) else fallback


def digits(n: int) -> int:
    """Number of decimal digits needed to print a non-negative int."""
    return len(str(max(0, n)))
