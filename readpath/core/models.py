"""
Core domain models.

Closed enums for question categories, suggestion intents and session intents,
plus the frozen value objects exchanged with callers. Every model here is
immutable: engines return fresh instances and never mutate their inputs.
"""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any

from readpath.core.errors import RatingValidationError, ResponseValidationError

RD_MIN = 75.0
RD_MAX = 350.0
INITIAL_RATING = 1000.0


# =============================================================================
# ENUMS
# =============================================================================


class QuestionCategory(str, Enum):
    """Comprehension question category."""

    LITERAL = "literal"
    INFERENCE = "inference"
    VOCABULARY = "vocabulary"
    SUMMARY = "summary"

    @property
    def display_name(self) -> str:
        """Human-readable name."""
        return self.value.title()


class SuggestionIntent(str, Enum):
    """Pedagogical intent attached to a next-skill suggestion."""

    DEEPEN = "deepen"  # go further down the same skill line
    BRIDGE = "bridge"  # move the concept into another domain
    APPLY = "apply"  # curated cross-domain application
    REINFORCE = "reinforce"  # remediate a weak same-domain skill


class SessionIntent(str, Enum):
    """What the next learning session should do with its skill."""

    INTRODUCE = "introduce"
    CONSOLIDATE = "consolidate"
    REINFORCE = "reinforce"
    ADVANCE = "advance"


class BaselineConfidence(str, Enum):
    """Confidence in a placement estimate."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @classmethod
    def from_texts_completed(cls, texts_completed: int) -> BaselineConfidence:
        """
        Map the number of completed placement texts to a confidence label.

        4+ texts = high, 3 = medium, fewer = low.
        """
        if texts_completed >= 4:
            return cls.HIGH
        if texts_completed == 3:
            return cls.MEDIUM
        return cls.LOW


class RatingBand(str, Enum):
    """Coarse classification of a global rating for reporting."""

    BEGINNER = "beginner"  # < 800
    DEVELOPING = "developing"  # 800-1099
    COMPETENT = "competent"  # 1100-1399
    ADVANCED = "advanced"  # 1400+

    @classmethod
    def from_rating(cls, rating: float) -> RatingBand:
        if rating < 800:
            return cls.BEGINNER
        if rating < 1100:
            return cls.DEVELOPING
        if rating < 1400:
            return cls.COMPETENT
        return cls.ADVANCED


class PedagogicalStrategy(str, Enum):
    """How generated content balances narrative and instruction."""

    STORY_FIRST = "story_first"
    BALANCED = "balanced"
    LEARNING_FIRST = "learning_first"


# =============================================================================
# RATING
# =============================================================================


@dataclass(frozen=True)
class Rating:
    """
    Per-learner ability estimate.

    A global rating, one sub-rating per question category and a single
    rating deviation (RD) bounded to [75, 350].
    """

    global_rating: float = INITIAL_RATING
    literal: float = INITIAL_RATING
    inference: float = INITIAL_RATING
    vocabulary: float = INITIAL_RATING
    summary: float = INITIAL_RATING
    rd: float = RD_MAX

    def __post_init__(self) -> None:
        for name in ("global_rating", "literal", "inference", "vocabulary", "summary", "rd"):
            value = getattr(self, name)
            if not isinstance(value, (int, float)) or not math.isfinite(value):
                raise RatingValidationError(f"Rating.{name} must be a finite number, got {value!r}")
        if not RD_MIN <= self.rd <= RD_MAX:
            raise RatingValidationError(f"Rating.rd must be within [{RD_MIN}, {RD_MAX}], got {self.rd}")

    @classmethod
    def initial(cls) -> Rating:
        """Rating assigned at onboarding."""
        return cls()

    def category(self, category: QuestionCategory) -> float:
        """Sub-rating for one question category."""
        return {
            QuestionCategory.LITERAL: self.literal,
            QuestionCategory.INFERENCE: self.inference,
            QuestionCategory.VOCABULARY: self.vocabulary,
            QuestionCategory.SUMMARY: self.summary,
        }[QuestionCategory(category)]

    @property
    def band(self) -> RatingBand:
        return RatingBand.from_rating(self.global_rating)

    def to_dict(self) -> dict[str, float]:
        return {
            "global": self.global_rating,
            "literal": self.literal,
            "inference": self.inference,
            "vocabulary": self.vocabulary,
            "summary": self.summary,
            "rd": self.rd,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Rating:
        """Build a Rating from a persisted snapshot (missing keys use onboarding defaults)."""
        return cls(
            global_rating=float(data.get("global", INITIAL_RATING)),
            literal=float(data.get("literal", INITIAL_RATING)),
            inference=float(data.get("inference", INITIAL_RATING)),
            vocabulary=float(data.get("vocabulary", INITIAL_RATING)),
            summary=float(data.get("summary", INITIAL_RATING)),
            rd=float(data.get("rd", RD_MAX)),
        )


@dataclass(frozen=True)
class GradedResponse:
    """One graded comprehension answer."""

    category: QuestionCategory
    correct: bool
    item_difficulty: int = 3

    def __post_init__(self) -> None:
        object.__setattr__(self, "category", QuestionCategory(self.category))
        if isinstance(self.item_difficulty, bool) or not isinstance(self.item_difficulty, int):
            raise ResponseValidationError(
                f"item_difficulty must be an integer, got {self.item_difficulty!r}"
            )
        if not 1 <= self.item_difficulty <= 5:
            raise ResponseValidationError(
                f"item_difficulty must be within 1..5, got {self.item_difficulty}"
            )


@dataclass(frozen=True)
class RatingDelta:
    """Audit trace for one folded response."""

    category: QuestionCategory
    item_rating: int
    d_global: float
    d_category: float


# =============================================================================
# PROGRESS & SUGGESTIONS
# =============================================================================


@dataclass(frozen=True)
class SkillProgress:
    """Progress snapshot for one learner/skill pair (read-only here)."""

    attempts: int = 0
    mastery: float = 0.0
    dominated: bool = False
    correct: int = 0


@dataclass(frozen=True)
class LearningSuggestion:
    """A ranked next-skill proposal."""

    slug: str
    name: str
    emoji: str
    domain: str
    intent: SuggestionIntent
    rationale: str
    score: float

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["intent"] = self.intent.value
        return data


# =============================================================================
# BASELINE
# =============================================================================


@dataclass(frozen=True)
class CategoryAccuracy:
    """Question count and correct count for one category."""

    total: int = 0
    correct: int = 0

    @property
    def accuracy(self) -> float:
        return self.correct / self.total if self.total else 0.0


@dataclass(frozen=True)
class PlacementTextResult:
    """Graded outcome of one placement text."""

    level: float
    total_questions: int
    correct: int
    correct_by_category: dict[QuestionCategory, int] = field(default_factory=dict)


@dataclass(frozen=True)
class BaselineResult:
    """Initial level estimate produced at onboarding."""

    level: float
    comprehension_score: float
    confidence: BaselineConfidence
    per_category_accuracy: dict[QuestionCategory, CategoryAccuracy]
    texts_completed: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "level": self.level,
            "comprehension_score": self.comprehension_score,
            "confidence": self.confidence.value,
            "per_category_accuracy": {
                category.value: {"total": acc.total, "correct": acc.correct}
                for category, acc in self.per_category_accuracy.items()
            },
            "texts_completed": self.texts_completed,
        }
