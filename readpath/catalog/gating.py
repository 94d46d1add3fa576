"""Unlock and age predicates over catalog skills and a progress snapshot."""

from __future__ import annotations

from readpath.catalog.models import Skill
from readpath.core.progress import ProgressMap, is_dominated


def is_unlocked(skill: Skill, progress_map: ProgressMap) -> bool:
    """True iff every prerequisite of ``skill`` is dominated (vacuously true for none)."""
    return all(is_dominated(prerequisite, progress_map) for prerequisite in skill.prerequisites)


def age_eligible(skill: Skill, age: int) -> bool:
    """True iff ``age`` lies within the skill's inclusive age range."""
    return skill.age_min <= age <= skill.age_max
