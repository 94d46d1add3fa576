"""
Adaptive engines.

Components:
- rating_engine: Glicko-style rating with anti-farming damping
- baseline: placement level estimator
- session_score: composite session score and difficulty adjustment
"""

from readpath.adaptive.baseline import BaselineEstimator
from readpath.adaptive.rating_engine import (
    CATEGORY_MODIFIER,
    RatingEngine,
    anti_farming_factor,
    consistency_adjusted_rd,
    expected_score,
    glicko_g,
    glicko_step,
    inflate_rd_for_inactivity,
    item_rating,
    max_global_delta,
    rating_band,
)
from readpath.adaptive.session_score import (
    AdjustmentDirection,
    adjustment_direction,
    session_score,
)

__all__ = [
    "BaselineEstimator",
    "CATEGORY_MODIFIER",
    "RatingEngine",
    "anti_farming_factor",
    "consistency_adjusted_rd",
    "expected_score",
    "glicko_g",
    "glicko_step",
    "inflate_rd_for_inactivity",
    "item_rating",
    "max_global_delta",
    "rating_band",
    "AdjustmentDirection",
    "adjustment_direction",
    "session_score",
]
