"""
Baseline placement estimator.

Turns the graded results of the onboarding placement texts (four texts of
increasing nominal level) into an initial reading level.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from loguru import logger

from readpath.core.models import (
    BaselineConfidence,
    BaselineResult,
    CategoryAccuracy,
    PlacementTextResult,
    QuestionCategory,
)

PASS_RATIO = 0.6
BONUS_RATIO = 0.8
LEVEL_BONUS = 0.5
MIN_LEVEL = 1.0
MAX_LEVEL = 4.0


def _coerce_result(item: PlacementTextResult | Mapping[str, Any]) -> PlacementTextResult:
    if isinstance(item, PlacementTextResult):
        return item
    by_category = {
        QuestionCategory(category): int(count)
        for category, count in (item.get("correct_by_category") or {}).items()
    }
    return PlacementTextResult(
        level=float(item["level"]),
        total_questions=int(item["total_questions"]),
        correct=int(item["correct"]),
        correct_by_category=by_category,
    )


def _ratio(result: PlacementTextResult) -> float:
    if result.total_questions <= 0:
        return 0.0
    return result.correct / result.total_questions


class BaselineEstimator:
    """
    Estimate a starting level from placement results.

    - level: highest text level passed with >= 60%, +0.5 when that text
      was answered >= 80%, capped at 4. Level 1 when nothing passes.
    - comprehension_score: correct / questions over all texts.
    - confidence: driven by how many texts were completed.
    """

    def estimate(
        self, per_text_results: Iterable[PlacementTextResult | Mapping[str, Any]]
    ) -> BaselineResult:
        results = [_coerce_result(item) for item in per_text_results]

        if not results:
            return BaselineResult(
                level=MIN_LEVEL,
                comprehension_score=0.0,
                confidence=BaselineConfidence.LOW,
                per_category_accuracy={},
                texts_completed=0,
            )

        passed = [r for r in results if _ratio(r) >= PASS_RATIO]
        level = MIN_LEVEL
        if passed:
            best = max(passed, key=lambda r: (r.level, _ratio(r)))
            level = best.level
            if _ratio(best) >= BONUS_RATIO:
                level += LEVEL_BONUS
        level = min(MAX_LEVEL, level)

        total_questions = sum(r.total_questions for r in results)
        total_correct = sum(r.correct for r in results)
        score = round(total_correct / total_questions, 2) if total_questions > 0 else 0.0

        # Each category present in a text counts as one question of that text.
        tallies: dict[QuestionCategory, list[int]] = {}
        for result in results:
            for category, correct in result.correct_by_category.items():
                tally = tallies.setdefault(category, [0, 0])
                tally[0] += 1
                tally[1] += correct

        baseline = BaselineResult(
            level=level,
            comprehension_score=score,
            confidence=BaselineConfidence.from_texts_completed(len(results)),
            per_category_accuracy={
                category: CategoryAccuracy(total=total, correct=correct)
                for category, (total, correct) in tallies.items()
            },
            texts_completed=len(results),
        )
        logger.debug(
            "Baseline from {} texts: level {} ({}), score {}",
            baseline.texts_completed,
            baseline.level,
            baseline.confidence.value,
            baseline.comprehension_score,
        )
        return baseline
