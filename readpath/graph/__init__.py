"""
Skill graph navigation.

Components:
- recommender: ranked next-skill suggestions (deepen / bridge / apply / reinforce)
- tech_tree: single next-skill pick, session objective and context
"""

from readpath.graph.recommender import SkillGraphRecommender
from readpath.graph.tech_tree import (
    TechTreeContext,
    TechTreeSelector,
    build_session_objective,
    classify_session,
    infer_strategy,
)

__all__ = [
    "SkillGraphRecommender",
    "TechTreeContext",
    "TechTreeSelector",
    "build_session_objective",
    "classify_session",
    "infer_strategy",
]
