"""Rounding helpers for display values."""

import math


def round_half_up(value: float, digits: int = 0) -> float:
    """Round to `digits` decimals with halves rounded upward."""
    scale = 10**digits
    return math.floor(value * scale + 0.5) / scale


def round_int(value: float) -> int:
    """Round to the nearest integer with halves rounded up."""
    return int(math.floor(value + 0.5))
