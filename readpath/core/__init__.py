"""
Core Module - Shared domain models and helpers.

Components:
- models: enums and frozen value objects (Rating, GradedResponse, SkillProgress, ...)
- errors: ReadpathError hierarchy
- progress: domination predicate and progress-map construction

Design Principle:
adaptive/, catalog/ and graph/ import their shared concepts from here
rather than redefining them.
"""

from readpath.core.errors import (
    CatalogIntegrityError,
    RatingValidationError,
    ReadpathError,
    ResponseValidationError,
)
from readpath.core.models import (
    RD_MAX,
    RD_MIN,
    BaselineConfidence,
    BaselineResult,
    CategoryAccuracy,
    GradedResponse,
    LearningSuggestion,
    PedagogicalStrategy,
    PlacementTextResult,
    QuestionCategory,
    Rating,
    RatingBand,
    RatingDelta,
    SessionIntent,
    SkillProgress,
    SuggestionIntent,
)
from readpath.core.progress import (
    DOMINATION_THRESHOLD,
    ProgressMap,
    build_progress_map,
    is_dominated,
    is_progress_dominated,
    normalize_skill_slug,
)

__all__ = [
    # Errors
    "ReadpathError",
    "RatingValidationError",
    "ResponseValidationError",
    "CatalogIntegrityError",
    # Enums
    "QuestionCategory",
    "SuggestionIntent",
    "SessionIntent",
    "BaselineConfidence",
    "RatingBand",
    "PedagogicalStrategy",
    # Models
    "Rating",
    "GradedResponse",
    "RatingDelta",
    "SkillProgress",
    "LearningSuggestion",
    "CategoryAccuracy",
    "PlacementTextResult",
    "BaselineResult",
    "RD_MIN",
    "RD_MAX",
    # Progress
    "DOMINATION_THRESHOLD",
    "ProgressMap",
    "build_progress_map",
    "is_dominated",
    "is_progress_dominated",
    "normalize_skill_slug",
]
