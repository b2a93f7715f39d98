"""Rounding shared by every 0-100 score."""

import math


def round_half_up(value: float) -> int:
    """Round .5 away from zero for non-negative scores (round() would bank it)."""
    return int(math.floor(value + 0.5))


def clamp_score(value: float) -> int:
    return max(0, min(100, round_half_up(value)))
