"""
readpath - adaptive comprehension rating and skill-tree sequencing.

Subpackages:
- core: shared domain types, errors, progress helpers, logging setup
- catalog: validated skill catalog and unlock predicates
- adaptive: Glicko-style rating engine, placement baseline, session scoring
- graph: next-skill recommender and tech-tree selector
"""

__version__ = "1.0.0"
