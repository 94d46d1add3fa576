"""
Skill catalog.

Components:
- models: Domain, Skill and the validated SkillCatalog DAG
- loader: YAML/JSON loading, bundled catalog, process-wide cache
- gating: is_unlocked / age_eligible predicates
"""

from readpath.catalog.gating import age_eligible, is_unlocked
from readpath.catalog.loader import (
    catalog_from_dict,
    get_catalog,
    load_bundled_catalog,
    load_catalog,
)
from readpath.catalog.models import Domain, Skill, SkillCatalog

__all__ = [
    "Domain",
    "Skill",
    "SkillCatalog",
    "age_eligible",
    "is_unlocked",
    "catalog_from_dict",
    "get_catalog",
    "load_bundled_catalog",
    "load_catalog",
]
