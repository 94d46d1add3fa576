"""
Unit tests for SkillGraphRecommender.

Scenarios use the small hand-checkable catalog from conftest:

    space:    sun, moon (L1) -> gravity, orbits (L2) -> black-holes (L3)
    machines: levers (L1) -> pulleys (L2)
    nature:   birds (L1)

gravity curates `deepens: [orbits]` and `applies: [levers]`.
"""

import pytest

from readpath.core import SkillProgress, SuggestionIntent
from readpath.graph import SkillGraphRecommender
from readpath.graph.recommender import recent_window


@pytest.fixture
def recommender(small_catalog):
    return SkillGraphRecommender(small_catalog)


@pytest.fixture
def gravity_mastered(mastered):
    return {"sun": mastered, "moon": mastered, "gravity": mastered}


def slugs(suggestions):
    return [s.slug for s in suggestions]


class TestGraphCandidates:
    def test_dominated_current_skill(self, recommender, gravity_mastered):
        result = recommender.recommend(7, set(), gravity_mastered, current_skill="gravity")

        assert slugs(result) == ["orbits", "levers", "birds"]
        assert [s.intent for s in result] == [
            SuggestionIntent.DEEPEN,
            SuggestionIntent.APPLY,
            SuggestionIntent.BRIDGE,
        ]
        assert [s.score for s in result] == [62, 46, 40]

    def test_curated_deepen_rationale(self, recommender, gravity_mastered):
        top = recommender.recommend(7, set(), gravity_mastered, current_skill="gravity")[0]
        assert top.rationale == "Natural next step after Gravity"
        assert top.domain == "space"

    def test_locked_candidates_excluded(self, recommender, gravity_mastered):
        result = recommender.recommend(7, set(), gravity_mastered, current_skill="gravity")
        # black-holes still needs orbits, pulleys still needs levers
        assert "black-holes" not in slugs(result)
        assert "pulleys" not in slugs(result)

    def test_preview_ignores_gating(self, recommender, gravity_mastered):
        result = recommender.recommend(
            7, set(), gravity_mastered, current_skill="gravity", unlocked_only=False
        )
        assert slugs(result) == ["orbits", "black-holes", "levers", "birds"]
        assert result[1].intent == SuggestionIntent.DEEPEN

    def test_age_filters_candidates(self, recommender, gravity_mastered):
        result = recommender.recommend(
            6, set(), gravity_mastered, current_skill="gravity", unlocked_only=False
        )
        assert "black-holes" not in slugs(result)

    def test_interest_boost(self, recommender, gravity_mastered):
        result = recommender.recommend(7, {"nature"}, gravity_mastered, current_skill="gravity")
        assert slugs(result) == ["orbits", "birds", "levers"]
        assert result[1].score == 50

    def test_recency_penalty(self, recommender, gravity_mastered):
        result = recommender.recommend(
            7, set(), gravity_mastered, current_skill="gravity", recent_history=["orbits"]
        )
        assert slugs(result) == ["levers", "orbits", "birds"]
        assert result[1].score == 44

    def test_recency_window_is_six_newest(self, recommender, gravity_mastered):
        history = ["a", "b", "c", "d", "e", "f", "orbits"]
        result = recommender.recommend(
            7, set(), gravity_mastered, current_skill="gravity", recent_history=history
        )
        assert result[0].slug == "orbits"
        assert result[0].score == 62

    def test_reinforce_wins_slug(self, recommender, gravity_mastered):
        progress = dict(gravity_mastered, orbits=SkillProgress(attempts=1, mastery=0.3))
        result = recommender.recommend(7, set(), progress, current_skill="gravity")

        assert result[0].slug == "orbits"
        assert result[0].intent == SuggestionIntent.REINFORCE
        assert result[0].score == 58

    def test_reinforce_without_dominated_current(self, recommender):
        progress = {
            "sun": SkillProgress(attempts=1, mastery=0.2),
            "moon": SkillProgress(attempts=4, mastery=0.4),
        }
        result = recommender.recommend(7, set(), progress, current_skill="sun")

        assert slugs(result) == ["moon"]
        assert result[0].intent == SuggestionIntent.REINFORCE

    def test_limit(self, recommender, gravity_mastered):
        result = recommender.recommend(7, set(), gravity_mastered, current_skill="gravity", limit=2)
        assert slugs(result) == ["orbits", "levers"]
        assert recommender.recommend(7, set(), gravity_mastered, limit=0) == []


class TestFallbackPool:
    def test_no_current_skill(self, recommender):
        result = recommender.recommend(7, set(), {})

        assert slugs(result) == ["sun", "moon", "levers", "birds"]
        assert all(s.intent == SuggestionIntent.BRIDGE for s in result)
        assert all(s.score == 30 for s in result)

    def test_interest_first(self, recommender):
        result = recommender.recommend(7, {"nature"}, {})
        assert result[0].slug == "birds"
        assert result[0].score == 44

    def test_lower_levels_preferred(self, recommender):
        result = recommender.recommend(7, set(), {}, unlocked_only=False, limit=8)
        assert slugs(result)[:4] == ["sun", "moon", "levers", "birds"]
        assert slugs(result)[-1] == "black-holes"
        assert result[-1].score == 24

    def test_unknown_current_skill(self, recommender):
        assert slugs(recommender.recommend(7, set(), {}, current_skill="comets")) == [
            "sun", "moon", "levers", "birds",
        ]

    def test_current_without_candidates_excluded(self, recommender):
        result = recommender.recommend(7, set(), {}, current_skill="sun")
        assert slugs(result) == ["moon", "levers", "birds"]

    def test_everything_dominated(self, recommender, small_catalog, mastered):
        progress = {skill.slug: mastered for skill in small_catalog.skills}
        assert recommender.recommend(7, {"space"}, progress, current_skill="gravity") == []

    def test_default_limit_from_settings(self, recommender):
        result = recommender.recommend(7, set(), {}, unlocked_only=False)
        assert len(result) == 5


class TestRankingInvariants:
    @pytest.mark.parametrize(
        "current,interests,recent",
        [
            (None, set(), []),
            ("gravity", {"universe"}, ["planets-up-close"]),
            ("solar-system", {"time-people"}, []),
            ("emotions", {"body-mind", "nature-life"}, ["the-brain", "how-we-learn"]),
            ("the-sun", set(), ["gravity"]),
        ],
    )
    def test_sorted_bounded_and_excludes_current(self, bundled_catalog, current, interests, recent):
        recommender = SkillGraphRecommender(bundled_catalog)
        dominated = SkillProgress(attempts=5, mastery=0.9, dominated=True)
        progress = {
            "the-sun": dominated,
            "the-moon": dominated,
            "solar-system": dominated,
            "gravity": dominated,
            "emotions": dominated,
            "the-five-senses": SkillProgress(attempts=2, mastery=0.4),
        }
        for limit in (1, 3, 5, 10):
            result = recommender.recommend(
                8, interests, progress, current_skill=current, recent_history=recent, limit=limit
            )
            scores = [s.score for s in result]
            assert scores == sorted(scores, reverse=True)
            assert len(result) <= limit
            assert current not in slugs(result)
            assert len(set(slugs(result))) == len(result)

    def test_deterministic(self, bundled_catalog, mastered):
        recommender = SkillGraphRecommender(bundled_catalog)
        args = dict(
            age=7,
            interests={"universe", "how-things-work"},
            progress_map={"the-sun": mastered, "the-moon": mastered, "gravity": mastered},
            current_skill="gravity",
            recent_history=["the-sun"],
        )
        assert recommender.recommend(**args) == recommender.recommend(**args)


class TestRecentWindow:
    def test_newest_six(self):
        assert recent_window(["a", "b", "c", "d", "e", "f", "g"]) == {"a", "b", "c", "d", "e", "f"}

    def test_short(self):
        assert recent_window([]) == set()
