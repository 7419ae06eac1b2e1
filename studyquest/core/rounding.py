"""Rounding helpers shared by the scoring math."""
from __future__ import annotations

import math


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going up.

    Python's ``round`` uses banker's rounding (``round(72.5) == 72``); grade
    math always rounds ``.5`` up.
    """

    return int(math.floor(value + 0.5))


def clamp(value: float, lower: float, upper: float) -> float:
    """Constrain ``value`` to the closed interval ``[lower, upper]``."""

    return max(lower, min(upper, value))
