"""
Skill Graph Recommender.

Ranks next-skill suggestions from the skill tree based on:
- The current skill (deepen / apply / bridge once it is dominated)
- Weak same-domain skills (reinforce)
- Learner interests (score boost)
- Recent history (score penalty over the 6 newest entries)
- Prerequisite gating (unlocked skills only, unless previewing)
"""

from __future__ import annotations

from collections.abc import Collection, Sequence
from dataclasses import dataclass

from loguru import logger

from config import get_settings
from readpath.catalog.gating import age_eligible, is_unlocked
from readpath.catalog.models import Skill, SkillCatalog
from readpath.core.models import LearningSuggestion, SuggestionIntent
from readpath.core.progress import ProgressMap, is_dominated

# Only the newest entries of recent_history are penalized.
RECENCY_WINDOW = 6

# Below this mastery an attempted skill is a remediation target.
REINFORCE_MASTERY = 0.6

# Same-domain deepen candidates must have fewer attempts than this.
DEEPEN_MAX_ATTEMPTS = 3


@dataclass(frozen=True)
class CandidateWeights:
    """Base score, interest boost and recency penalty of one candidate source."""

    base: float
    interest: float
    recent: float

    def score(self, in_interest: bool, recently_seen: bool) -> float:
        value = self.base
        if in_interest:
            value += self.interest
        if recently_seen:
            value -= self.recent
        return value


CURATED_DEEPEN = CandidateWeights(base=62, interest=12, recent=18)
DEEPEN = CandidateWeights(base=55, interest=15, recent=20)
REINFORCE = CandidateWeights(base=58, interest=10, recent=14)
APPLY = CandidateWeights(base=46, interest=12, recent=12)
BRIDGE = CandidateWeights(base=40, interest=10, recent=12)
FALLBACK = CandidateWeights(base=30, interest=14, recent=14)

# Fallback candidates lose this much per level above 1.
FALLBACK_LEVEL_STEP = 3


def recent_window(recent_history: Sequence[str]) -> set[str]:
    """Slugs in the newest RECENCY_WINDOW entries (history is newest-first)."""
    return set(list(recent_history)[:RECENCY_WINDOW])


class SkillGraphRecommender:
    """
    Rank next-skill suggestions over a skill catalog.

    Stateless apart from the catalog; every call works on the progress
    snapshot it is given.

    Usage:
        recommender = SkillGraphRecommender(catalog)
        suggestions = recommender.recommend(age=7, interests={"universe"}, progress_map={})
    """

    def __init__(self, catalog: SkillCatalog):
        self.catalog = catalog

    def recommend(
        self,
        age: int,
        interests: Collection[str],
        progress_map: ProgressMap,
        current_skill: str | None = None,
        recent_history: Sequence[str] = (),
        unlocked_only: bool = True,
        limit: int | None = None,
    ) -> list[LearningSuggestion]:
        """
        Get ranked suggestions for the next skill.

        Args:
            age: Learner age in years
            interests: Domain slugs the learner likes
            progress_map: slug -> SkillProgress snapshot
            current_skill: Slug of the skill just worked on, if any
            recent_history: Recently visited slugs, newest first
            unlocked_only: Exclude skills whose prerequisites are not dominated
            limit: Maximum suggestions (defaults to settings.recommend_limit)

        Returns:
            Suggestions sorted by score descending, never including current_skill
        """
        if limit is None:
            limit = get_settings().recommend_limit
        if limit <= 0:
            return []

        interest_set = set(interests)
        recent = recent_window(recent_history)
        current = self.catalog.get(current_skill)
        if current is not None and not age_eligible(current, age):
            current = None

        candidates: dict[str, LearningSuggestion] = {}
        if current is not None:
            self._graph_candidates(candidates, current, age, interest_set, recent, progress_map)
        suggestions = self._qualify(candidates, current_skill, progress_map, unlocked_only)

        source = "graph"
        if not suggestions:
            source = "fallback"
            candidates = {}
            self._fallback_candidates(candidates, age, interest_set, recent, progress_map)
            suggestions = self._qualify(candidates, current_skill, progress_map, unlocked_only)

        suggestions.sort(key=self._rank_key)
        result = suggestions[:limit]
        logger.debug(
            "Recommended {} of {} {} candidates (current={}, unlocked_only={})",
            len(result),
            len(suggestions),
            source,
            current_skill,
            unlocked_only,
        )
        return result

    # =========================================================================
    # CANDIDATE GENERATION
    # =========================================================================

    def _graph_candidates(
        self,
        candidates: dict[str, LearningSuggestion],
        current: Skill,
        age: int,
        interests: set[str],
        recent: set[str],
        progress_map: ProgressMap,
    ) -> None:
        same_domain = [
            skill
            for skill in self.catalog.skills_in_domain(current.domain)
            if skill.slug != current.slug and age_eligible(skill, age)
        ]

        # Reinforce: attempted but weak skills in the same domain
        for skill in same_domain:
            progress = progress_map.get(skill.slug)
            if (
                progress is not None
                and progress.attempts > 0
                and progress.mastery < REINFORCE_MASTERY
                and not is_dominated(skill.slug, progress_map)
            ):
                self._add(
                    candidates,
                    skill,
                    SuggestionIntent.REINFORCE,
                    f"Reinforce the basics of {skill.name}",
                    REINFORCE.score(skill.domain in interests, skill.slug in recent),
                )

        if not is_dominated(current.slug, progress_map):
            return

        # Deepen: hand-picked next steps first, then same-line siblings
        for slug in current.deepens:
            target = self.catalog.get(slug)
            if target is None or not self._open(target, age, progress_map):
                continue
            self._add(
                candidates,
                target,
                SuggestionIntent.DEEPEN,
                f"Natural next step after {current.name}",
                CURATED_DEEPEN.score(target.domain in interests, target.slug in recent),
            )

        for skill in same_domain:
            if skill.level not in (current.level, current.level + 1):
                continue
            progress = progress_map.get(skill.slug)
            if progress is not None and progress.attempts >= DEEPEN_MAX_ATTEMPTS:
                continue
            if is_dominated(skill.slug, progress_map):
                continue
            self._add(
                candidates,
                skill,
                SuggestionIntent.DEEPEN,
                f"Go deeper in the same skill line as {current.name}",
                DEEPEN.score(skill.domain in interests, skill.slug in recent),
            )

        # Apply: curated cross-domain links
        for slug in current.applies:
            target = self.catalog.get(slug)
            if target is None or not self._open(target, age, progress_map):
                continue
            self._add(
                candidates,
                target,
                SuggestionIntent.APPLY,
                f"Apply {current.name} in a new context",
                APPLY.score(target.domain in interests, target.slug in recent),
            )

        # Bridge: unlocked skills elsewhere in the tree
        for skill in self.catalog.in_order():
            if skill.domain == current.domain or not self._open(skill, age, progress_map):
                continue
            if not is_unlocked(skill, progress_map):
                continue
            domain = self.catalog.domain(skill.domain)
            domain_name = domain.name if domain is not None else skill.domain
            self._add(
                candidates,
                skill,
                SuggestionIntent.BRIDGE,
                f"Connect {current.name} with {domain_name}",
                BRIDGE.score(skill.domain in interests, skill.slug in recent),
            )

    def _fallback_candidates(
        self,
        candidates: dict[str, LearningSuggestion],
        age: int,
        interests: set[str],
        recent: set[str],
        progress_map: ProgressMap,
    ) -> None:
        """Global pool: every age-eligible skill not yet dominated, lower levels first."""
        for skill in self.catalog.skills_for_age(age):
            if is_dominated(skill.slug, progress_map):
                continue
            score = FALLBACK.score(skill.domain in interests, skill.slug in recent)
            score -= FALLBACK_LEVEL_STEP * (skill.level - 1)
            self._add(
                candidates,
                skill,
                SuggestionIntent.BRIDGE,
                "Next skill along the curriculum route",
                score,
            )

    # =========================================================================
    # HELPERS
    # =========================================================================

    @staticmethod
    def _open(skill: Skill, age: int, progress_map: ProgressMap) -> bool:
        return age_eligible(skill, age) and not is_dominated(skill.slug, progress_map)

    @staticmethod
    def _add(
        candidates: dict[str, LearningSuggestion],
        skill: Skill,
        intent: SuggestionIntent,
        rationale: str,
        score: float,
    ) -> None:
        """Keep one suggestion per slug: reinforce wins outright, otherwise the higher score."""
        existing = candidates.get(skill.slug)
        if existing is not None:
            if existing.intent == SuggestionIntent.REINFORCE:
                return
            if intent != SuggestionIntent.REINFORCE and score <= existing.score:
                return
        candidates[skill.slug] = LearningSuggestion(
            slug=skill.slug,
            name=skill.name,
            emoji=skill.emoji,
            domain=skill.domain,
            intent=intent,
            rationale=rationale,
            score=float(score),
        )

    def _qualify(
        self,
        candidates: dict[str, LearningSuggestion],
        current_skill: str | None,
        progress_map: ProgressMap,
        unlocked_only: bool,
    ) -> list[LearningSuggestion]:
        qualified = []
        for suggestion in candidates.values():
            if suggestion.slug == current_skill:
                continue
            skill = self.catalog.get(suggestion.slug)
            if skill is None:
                continue
            if unlocked_only and not is_unlocked(skill, progress_map):
                continue
            qualified.append(suggestion)
        return qualified

    def _rank_key(self, suggestion: LearningSuggestion) -> tuple[float, int, int]:
        skill = self.catalog.get(suggestion.slug)
        level, order = skill.route_key if skill is not None else (99, 0)
        return (-suggestion.score, level, order)
