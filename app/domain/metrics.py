"""
Shared arithmetic for all rollups.

Every percentage on the dashboard goes through ``safe_ratio`` so that a zero
denominator (no income, no tasks, target == baseline ...) yields a fixed
sentinel instead of NaN/Infinity.
"""
import math
from decimal import Decimal
from typing import Union

Number = Union[int, float, Decimal]


class _Unknown:
    """Marker for a metric that could not be loaded (distinct from zero)."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "UNKNOWN"


UNKNOWN = _Unknown()


def is_unknown(value) -> bool:
    return value is UNKNOWN


def safe_ratio(numerator: Number, denominator: Number, scale: Number = 100, default: float = 0) -> float:
    """
    numerator / denominator * scale, or ``default`` when undefined.

    >>> safe_ratio(1, 4)
    25.0
    >>> safe_ratio(5, 0)
    0
    """
    if denominator is None or denominator == 0:
        return default
    result = float(numerator) / float(denominator) * float(scale)
    if not math.isfinite(result):
        return default
    return result


def round_half_up(value: Number) -> int:
    """Round to nearest int, .5 goes up (same as the web client's Math.round)."""
    return int(math.floor(float(value) + 0.5))


def clamp_percent(value: Number) -> Number:
    """Clamp to [0, 100]."""
    if value < 0:
        return 0
    if value > 100:
        return 100
    return value


def percent(numerator: Number, denominator: Number) -> int:
    """Rounded integer percentage with the zero-denominator guard."""
    return round_half_up(safe_ratio(numerator, denominator))
