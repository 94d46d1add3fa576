"""
Tech Tree Selector.

Picks the single skill that drives the next learning session and builds
the small descriptive record content generation needs: session objective,
teaching strategy and where the skill sits among its neighbours.
"""

from __future__ import annotations

from collections.abc import Collection, Sequence
from dataclasses import asdict, dataclass, field
from typing import Any

from loguru import logger

from readpath.catalog.gating import is_unlocked
from readpath.catalog.models import Skill, SkillCatalog
from readpath.core.models import PedagogicalStrategy, SessionIntent, SkillProgress
from readpath.core.progress import ProgressMap, is_dominated, is_progress_dominated
from readpath.graph.recommender import REINFORCE_MASTERY, recent_window

# A skill needs at least this many attempts before low mastery means "reinforce".
MIN_REINFORCE_ATTEMPTS = 3

# Related-skill lists in the context are capped at this many names.
RELATED_LIMIT = 3

STORY_FIRST_MAX_AGE = 6
STORY_FIRST_MAX_LEVEL = 2.4
LEARNING_FIRST_MIN_AGE = 8
LEARNING_FIRST_MIN_LEVEL = 3.6

_OBJECTIVE_TEMPLATES: dict[SessionIntent, str] = {
    SessionIntent.INTRODUCE: 'Introduce the idea of "{name}" with a fun, easy-to-remember example.',
    SessionIntent.CONSOLIDATE: 'Consolidate "{name}" by applying it in a new context to build transfer.',
    SessionIntent.REINFORCE: 'Reinforce the basics of "{name}" with very concrete examples and simple language.',
    SessionIntent.ADVANCE: 'Advance in "{name}", raising the difficulty a little without losing clarity.',
}


# =============================================================================
# SESSION OBJECTIVE & STRATEGY
# =============================================================================


def classify_session(progress: SkillProgress | None) -> SessionIntent:
    """Classify the next session on a skill from its progress record."""
    if progress is None or progress.attempts == 0:
        return SessionIntent.INTRODUCE
    if is_progress_dominated(progress):
        return SessionIntent.CONSOLIDATE
    if progress.attempts >= MIN_REINFORCE_ATTEMPTS and progress.mastery < REINFORCE_MASTERY:
        return SessionIntent.REINFORCE
    return SessionIntent.ADVANCE


def build_session_objective(skill: Skill, progress: SkillProgress | None = None) -> str:
    """One-sentence objective for the next session on ``skill``."""
    return _OBJECTIVE_TEMPLATES[classify_session(progress)].format(name=skill.name)


def infer_strategy(age: int, level: float) -> PedagogicalStrategy:
    """Balance between narrative and instruction for a learner's age and level."""
    if age <= STORY_FIRST_MAX_AGE or level < STORY_FIRST_MAX_LEVEL:
        return PedagogicalStrategy.STORY_FIRST
    if age >= LEARNING_FIRST_MIN_AGE or level >= LEARNING_FIRST_MIN_LEVEL:
        return PedagogicalStrategy.LEARNING_FIRST
    return PedagogicalStrategy.BALANCED


@dataclass(frozen=True)
class TechTreeContext:
    """Where a skill sits in the tree for one learner."""

    skill_slug: str
    skill_name: str
    skill_level: int
    objective: str
    strategy: PedagogicalStrategy
    prerequisites_dominated: list[str] = field(default_factory=list)
    prerequisites_pending: list[str] = field(default_factory=list)
    related_dominated: list[str] = field(default_factory=list)
    related_in_progress: list[str] = field(default_factory=list)
    related_to_reinforce: list[str] = field(default_factory=list)
    suggested_next: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["strategy"] = self.strategy.value
        return data


# =============================================================================
# SELECTOR
# =============================================================================


class TechTreeSelector:
    """
    Choose the next session's skill along the tech tree.

    Preference order:
    1. A not-dominated level-1 skill in an interest domain
    2. An unlocked, not-dominated skill at the lowest available level
    3. The first age-eligible skill in catalog order

    Within a tier, recently visited skills go last, then lower levels,
    then interest domains, then catalog order.
    """

    def __init__(self, catalog: SkillCatalog):
        self.catalog = catalog

    def pick_next(
        self,
        age: int,
        interests: Collection[str],
        progress_map: ProgressMap,
        recent_history: Sequence[str] = (),
    ) -> Skill | None:
        eligible = self.catalog.skills_for_age(age)
        if not eligible:
            logger.debug("No age-eligible skills for age {}", age)
            return None

        interest_set = set(interests)
        recent = recent_window(recent_history)
        pending = [
            skill
            for skill in eligible
            if is_unlocked(skill, progress_map) and not is_dominated(skill.slug, progress_map)
        ]

        tiers = [
            [s for s in pending if s.level == 1 and s.domain in interest_set],
        ]
        if pending:
            lowest = min(skill.level for skill in pending)
            tiers.append([s for s in pending if s.level == lowest])

        for index, tier in enumerate(tiers, start=1):
            if tier:
                choice = min(
                    tier,
                    key=lambda s: (s.slug in recent, s.level, s.domain not in interest_set, s.order),
                )
                logger.debug("Tech tree tier {} picked {}", index, choice.slug)
                return choice

        logger.debug("Every eligible skill dominated; falling back to {}", eligible[0].slug)
        return eligible[0]

    def build_context(
        self,
        skill: Skill,
        progress_map: ProgressMap,
        age: int,
        level: float,
    ) -> TechTreeContext:
        """Describe ``skill`` and its same-domain neighbours for one learner."""
        domain_skills = [
            s for s in self.catalog.skills_in_domain(skill.domain) if s.slug != skill.slug
        ]

        def names(predicate) -> list[str]:
            matched = [s.name for s in domain_skills if predicate(s, progress_map.get(s.slug))]
            return matched[:RELATED_LIMIT]

        def prerequisite_name(slug: str) -> str:
            prerequisite = self.catalog.get(slug)
            return prerequisite.name if prerequisite is not None else slug

        dominated = names(lambda s, p: is_dominated(s.slug, progress_map))
        in_progress = names(
            lambda s, p: p is not None
            and p.attempts > 0
            and not is_progress_dominated(p)
            and p.mastery >= REINFORCE_MASTERY
        )
        to_reinforce = names(
            lambda s, p: p is not None
            and p.attempts >= MIN_REINFORCE_ATTEMPTS
            and p.mastery < REINFORCE_MASTERY
        )

        suggested = next(
            (
                s.name
                for s in domain_skills
                if is_unlocked(s, progress_map) and not is_dominated(s.slug, progress_map)
            ),
            None,
        )

        return TechTreeContext(
            skill_slug=skill.slug,
            skill_name=skill.name,
            skill_level=skill.level,
            objective=build_session_objective(skill, progress_map.get(skill.slug)),
            strategy=infer_strategy(age, level),
            prerequisites_dominated=[
                prerequisite_name(slug)
                for slug in skill.prerequisites
                if is_dominated(slug, progress_map)
            ],
            prerequisites_pending=[
                prerequisite_name(slug)
                for slug in skill.prerequisites
                if not is_dominated(slug, progress_map)
            ],
            related_dominated=dominated,
            related_in_progress=in_progress,
            related_to_reinforce=to_reinforce,
            suggested_next=suggested,
        )
