"""
Glicko-style comprehension rating engine.

Adaptive rating system in the style of online chess ladders:

1. Every learner has a rating plus an RD (rating deviation: how much we know
   about the true level). RD starts at 350 and shrinks with every response.
2. RD grows back when the learner is inconsistent (the model fails to predict
   their answers) and shrinks further when they are predictable. This is
   measured per batch with the Brier score.
3. The change per response is proportional to RD: high RD means large
   calibration steps, low RD means a stable rating.
4. Surprises (right answers on hard items, wrong answers on easy ones) move
   the rating most, through the Glicko expected score.
5. Easy correct answers are damped on the global rating (anti-farming) so a
   streak of trivial items cannot inflate the estimate that drives
   difficulty targeting. Category ratings are never damped.

Rating 1000 = a five-year-old with basic comprehension.

Each question is scored against a synthetic item rating derived from the
text level, the item's own difficulty and its category.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass, replace

from loguru import logger

from readpath.core.models import (
    RD_MAX,
    RD_MIN,
    GradedResponse,
    QuestionCategory,
    Rating,
    RatingBand,
    RatingDelta,
)

# =============================================================================
# CONSTANTS
# =============================================================================

# At equal nominal difficulty, literal recall is easiest and summary hardest.
CATEGORY_MODIFIER: dict[QuestionCategory, int] = {
    QuestionCategory.LITERAL: -40,
    QuestionCategory.VOCABULARY: 0,
    QuestionCategory.INFERENCE: 40,
    QuestionCategory.SUMMARY: 60,
}

# Glicko constant: ln(10) / 400
Q = math.log(10) / 400

# Items are near-certain in their own difficulty.
ITEM_RD = 50.0

# A Brier score of 0.25 is a coin flip; 0.20 lets decent predictions still
# shave a little RD.
NEUTRAL_BRIER = 0.20

# RD points per unit of Brier deviation:
#   brier=0.05 -> -18 RD, 0.20 -> 0, 0.35 -> +18, 0.50 -> +36
RD_SENSITIVITY = 120.0

# Anti-farming: a gap of this many points reaches the maximum easy-item penalty.
FARMING_GAP = 500.0
MIN_EASY_PENALTY = 0.05
MIN_FARMING_FACTOR = 0.02

# RD window over which anti-farming is relaxed (RD >= 300 bypasses half of it,
# RD <= 100 applies it in full).
RELAX_RD_FLOOR = 100.0
RELAX_RD_SPAN = 200.0
RELAX_MAX_BYPASS = 0.5

# Per-item global delta clamp: +/-(8 + rd/50), i.e. 15 at RD 350, 9.5 at RD 75.
DELTA_CLAMP_BASE = 8.0
DELTA_CLAMP_RD_DIVISOR = 50.0

# Category learning rate: K = max(12, rd * 0.15)
CATEGORY_K_MIN = 12.0
CATEGORY_K_RD_FACTOR = 0.15

MIN_PREDICTIONS_FOR_CONSISTENCY = 2

# Bounds that keep the logistic finite for arbitrarily distant ratings.
MAX_EXPONENT = 300.0
MIN_EXPECTED = 1e-9


def _round1(value: float) -> float:
    return round(value, 1)


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def _logistic(exponent: float) -> float:
    """1 / (1 + 10^exponent), clamped into (0, 1)."""
    value = 1.0 / (1.0 + math.pow(10.0, _clamp(exponent, -MAX_EXPONENT, MAX_EXPONENT)))
    return _clamp(value, MIN_EXPECTED, 1.0 - MIN_EXPECTED)


# =============================================================================
# GLICKO PRIMITIVES
# =============================================================================


def item_rating(text_level: float, item_difficulty: int, category: QuestionCategory) -> int:
    """
    Synthetic rating of one question.

    Ranges from ~200 (level 1, easy, literal) to ~1380 (level 4.8, hard, summary).
    """
    base = text_level * 200 + 200
    difficulty_bonus = (item_difficulty - 3) * 80
    return round(base + difficulty_bonus + CATEGORY_MODIFIER[QuestionCategory(category)])


def glicko_g(rd: float) -> float:
    """Attenuation factor g(RD) for an opponent's uncertainty."""
    return 1.0 / math.sqrt(1.0 + (3.0 * Q * Q * rd * rd) / (math.pi * math.pi))


def expected_score(rating: float, opponent_rating: float, opponent_rd: float = ITEM_RD) -> float:
    """Glicko expected score E of ``rating`` against an opponent."""
    g = glicko_g(opponent_rd)
    return _logistic((-g * (rating - opponent_rating)) / 400.0)


@dataclass(frozen=True)
class GlickoStep:
    """Raw outcome of one Glicko update."""

    new_rating: float
    new_rd: float

    def delta(self, rating: float) -> float:
        return self.new_rating - rating


def glicko_step(
    rating: float,
    rd: float,
    opponent_rating: float,
    score: float,
    opponent_rd: float = ITEM_RD,
) -> GlickoStep:
    """Standard single-game Glicko update; the new RD is floored at RD_MIN."""
    g = glicko_g(opponent_rd)
    e = expected_score(rating, opponent_rating, opponent_rd)

    d2 = 1.0 / (Q * Q * g * g * e * (1.0 - e))
    rd_sq = rd * rd
    precision = 1.0 / rd_sq + 1.0 / d2

    new_rating = rating + (Q / precision) * g * (score - e)
    new_rd = max(RD_MIN, math.sqrt(1.0 / precision))
    return GlickoStep(new_rating=_round1(new_rating), new_rd=_round1(new_rd))


def anti_farming_factor(
    rating: float,
    opponent_rating: float,
    score: float,
    expected: float,
    rd: float,
) -> float:
    """
    Multiplier applied to the raw global delta.

    Only correct answers on items below the current rating are damped.
    The damping grows with the gap (full at FARMING_GAP) and with how
    unsurprising the answer was. While RD is high the system is still
    calibrating, so up to half of the damping is bypassed; at RD <= 100
    it applies in full. Every other answer returns 1.0.
    """
    if score != 1 or rating <= opponent_rating:
        return 1.0

    surprise = abs(score - expected)
    surprise_factor = 0.2 + 0.8 * surprise
    gap = rating - opponent_rating
    easy_penalty = max(MIN_EASY_PENALTY, 1.0 - gap / FARMING_GAP)
    raw_factor = max(MIN_FARMING_FACTOR, surprise_factor * easy_penalty)

    rd_norm = _clamp((rd - RELAX_RD_FLOOR) / RELAX_RD_SPAN, 0.0, 1.0)
    return raw_factor + (rd_norm * RELAX_MAX_BYPASS) * (1.0 - raw_factor)


def max_global_delta(rd: float) -> float:
    """Bound on a single item's global swing for the given RD."""
    return DELTA_CLAMP_BASE + rd / DELTA_CLAMP_RD_DIVISOR


def consistency_adjusted_rd(rd: float, predictions: Sequence[tuple[float, float]]) -> float:
    """
    Shift RD by how well the batch was predicted.

    ``predictions`` holds (expected, actual) pairs. With fewer than two pairs
    the RD is returned unchanged.
    """
    if len(predictions) < MIN_PREDICTIONS_FOR_CONSISTENCY:
        return rd
    brier = sum((actual - expected) ** 2 for expected, actual in predictions) / len(predictions)
    adjustment = (brier - NEUTRAL_BRIER) * RD_SENSITIVITY
    return _clamp(_round1(rd + adjustment), RD_MIN, RD_MAX)


def rating_band(global_rating: float) -> RatingBand:
    """Textual band of a global rating."""
    return RatingBand.from_rating(global_rating)


def inflate_rd_for_inactivity(
    rating: Rating,
    days_inactive: float | None,
    c: float = 10.0,
    grace_days: int = 7,
) -> Rating:
    """
    Grow RD after a period without sessions (Glicko time decay).

    rd' = min(350, sqrt(rd^2 + c^2 * (days_inactive - grace_days)))
    Inactivity within the grace window, or unknown, leaves the rating as is.
    """
    if days_inactive is None or days_inactive <= grace_days:
        return rating
    periods = days_inactive - grace_days
    new_rd = min(RD_MAX, math.sqrt(rating.rd * rating.rd + c * c * periods))
    return replace(rating, rd=_round1(new_rd))


# =============================================================================
# RATING ENGINE
# =============================================================================


class RatingEngine:
    """
    Fold a batch of graded responses into a learner's Rating.

    The engine is stateless: ``update`` is a pure function of its arguments
    and never mutates the input rating.

    Usage:
        engine = RatingEngine()
        new_rating, deltas = engine.update(rating, responses, text_level=2.0)
    """

    def update(
        self,
        rating: Rating,
        responses: Sequence[GradedResponse],
        text_level: float,
    ) -> tuple[Rating, list[RatingDelta]]:
        """
        Process one batch, in input order.

        For each response:
        1. Compute the item rating.
        2. Record (E, actual) against the rating as of this response.
        3. Glicko-update the global rating and RD.
        4. Damp the global delta for easy correct answers, then clamp it.
        5. Update the category rating with K derived from the new RD.

        After the batch, RD is shifted by the Brier score of the recorded
        predictions.

        Returns:
            (new rating, one RatingDelta per response)
        """
        if not responses:
            return rating, []

        global_rating = rating.global_rating
        rd = rating.rd
        categories = {category: rating.category(category) for category in QuestionCategory}

        deltas: list[RatingDelta] = []
        predictions: list[tuple[float, float]] = []

        for response in responses:
            item = item_rating(text_level, response.item_difficulty, response.category)
            score = 1.0 if response.correct else 0.0

            previous_global = global_rating
            previous_category = categories[response.category]

            expected = expected_score(previous_global, item)
            predictions.append((expected, score))

            step = glicko_step(previous_global, rd, item, score)
            factor = anti_farming_factor(previous_global, item, score, expected, rd)
            bound = max_global_delta(rd)
            clamped = _clamp(step.delta(previous_global) * factor, -bound, bound)

            global_rating = _round1(previous_global + clamped)
            rd = step.new_rd

            k = max(CATEGORY_K_MIN, rd * CATEGORY_K_RD_FACTOR)
            expected_category = _logistic((item - previous_category) / 400.0)
            categories[response.category] = _round1(
                previous_category + k * (score - expected_category)
            )

            deltas.append(
                RatingDelta(
                    category=response.category,
                    item_rating=item,
                    d_global=_round1(global_rating - previous_global),
                    d_category=_round1(categories[response.category] - previous_category),
                )
            )

        rd = consistency_adjusted_rd(rd, predictions)

        new_rating = Rating(
            global_rating=global_rating,
            literal=categories[QuestionCategory.LITERAL],
            inference=categories[QuestionCategory.INFERENCE],
            vocabulary=categories[QuestionCategory.VOCABULARY],
            summary=categories[QuestionCategory.SUMMARY],
            rd=rd,
        )
        logger.debug(
            "Rated batch of {} at level {}: global {} -> {}, rd {} -> {}",
            len(responses),
            text_level,
            rating.global_rating,
            new_rating.global_rating,
            rating.rd,
            new_rating.rd,
        )
        return new_rating, deltas
