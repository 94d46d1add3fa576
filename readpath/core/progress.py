"""
Shared progress helpers.

Single source of truth for the domination threshold and for turning
persistence rows into the slug-keyed snapshot every engine consumes.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from readpath.core.models import SkillProgress

# Mastery at or above this counts as dominated even without the explicit flag.
DOMINATION_THRESHOLD = 0.85

# Persistence stores skill progress under "topic-<slug>" identifiers.
SKILL_ID_PREFIX = "topic-"

ProgressMap = Mapping[str, SkillProgress]


def is_progress_dominated(progress: SkillProgress | None) -> bool:
    """True when a progress record is flagged dominated or above the threshold."""
    if progress is None:
        return False
    return progress.dominated or progress.mastery >= DOMINATION_THRESHOLD


def is_dominated(slug: str, progress_map: ProgressMap) -> bool:
    """True when the skill identified by ``slug`` is dominated in the snapshot."""
    return is_progress_dominated(progress_map.get(slug))


def normalize_skill_slug(skill_id: str) -> str | None:
    """
    Strip the persistence prefix from a skill id.

    Returns None when the id does not carry the expected prefix.
    Example: "topic-solar-system" -> "solar-system"
    """
    if skill_id.startswith(SKILL_ID_PREFIX):
        return skill_id[len(SKILL_ID_PREFIX):]
    return None


def build_progress_map(rows: Iterable[Mapping[str, Any]]) -> dict[str, SkillProgress]:
    """
    Build a slug -> SkillProgress snapshot from persistence rows.

    Each row needs ``skill_id`` and may carry ``attempts``, ``correct``,
    ``mastery`` and ``dominated``. Rows whose id lacks the "topic-" prefix
    are skipped.
    """
    progress_map: dict[str, SkillProgress] = {}
    for row in rows:
        slug = normalize_skill_slug(str(row.get("skill_id", "")))
        if not slug:
            continue
        progress_map[slug] = SkillProgress(
            attempts=int(row.get("attempts", 0) or 0),
            mastery=float(row.get("mastery", 0.0) or 0.0),
            dominated=bool(row.get("dominated", False)),
            correct=int(row.get("correct", 0) or 0),
        )
    return progress_map
