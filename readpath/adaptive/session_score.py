"""
Composite session score and the difficulty adjustment it implies.

score = 0.65 * comprehension + 0.25 * pace + 0.10 * stability
"""

from __future__ import annotations

from enum import Enum

COMPREHENSION_WEIGHT = 0.65
PACE_WEIGHT = 0.25
STABILITY_WEIGHT = 0.10

RAISE_THRESHOLD = 0.80
HOLD_THRESHOLD = 0.60


class AdjustmentDirection(str, Enum):
    """Which way the next text's difficulty should move."""

    UP = "up"
    HOLD = "hold"
    DOWN = "down"


def session_score(comprehension: float, pace: float = 0.0, stability: float = 0.0) -> float:
    """
    Weighted session score rounded to two decimals.

    All inputs are expected in [0, 1]; ``pace`` is the normalized reading pace.
    """
    score = (
        COMPREHENSION_WEIGHT * comprehension
        + PACE_WEIGHT * pace
        + STABILITY_WEIGHT * stability
    )
    return round(score, 2)


def adjustment_direction(score: float) -> AdjustmentDirection:
    """>= 0.80 up, >= 0.60 hold, otherwise down."""
    if score >= RAISE_THRESHOLD:
        return AdjustmentDirection.UP
    if score >= HOLD_THRESHOLD:
        return AdjustmentDirection.HOLD
    return AdjustmentDirection.DOWN
