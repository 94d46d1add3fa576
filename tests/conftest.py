"""
Pytest Configuration and Fixtures.

This file configures pytest and provides shared fixtures for all tests.
"""
import sys
from pathlib import Path

import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from readpath.catalog import catalog_from_dict, load_bundled_catalog  # noqa: E402
from readpath.core import SkillProgress  # noqa: E402


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "smoke: Smoke tests for CLI commands")
    config.addinivalue_line("markers", "slow: Slow tests")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        # Mark based on test file location
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "smoke" in str(item.fspath):
            item.add_marker(pytest.mark.smoke)


@pytest.fixture(scope="session")
def project_root():
    """Return the project root directory."""
    return PROJECT_ROOT


@pytest.fixture(scope="session")
def bundled_catalog():
    """The catalog shipped with the package."""
    return load_bundled_catalog()


def _skill(slug, domain, level, order, prerequisites=(), age_min=5, age_max=9, **extra):
    return {
        "slug": slug,
        "name": slug.replace("-", " ").capitalize(),
        "emoji": "",
        "domain": domain,
        "level": level,
        "prerequisites": list(prerequisites),
        "age_min": age_min,
        "age_max": age_max,
        "order": order,
        **extra,
    }


@pytest.fixture
def small_catalog_data():
    """
    A three-domain catalog small enough to reason about by hand.

    space:    sun, moon (L1) -> gravity, orbits (L2) -> black-holes (L3, ages 7-9)
    machines: levers (L1) -> pulleys (L2)
    nature:   birds (L1)
    """
    return {
        "version": 1,
        "domains": [
            {"slug": "space", "name": "Space", "order": 1, "level_names": ["Stargazer", "Explorer", "Cosmologist"]},
            {"slug": "machines", "name": "Machines", "order": 2, "level_names": ["Apprentice", "Builder", "Engineer"]},
            {"slug": "nature", "name": "Nature", "order": 3, "level_names": ["Explorer", "Naturalist", "Biologist"]},
        ],
        "skills": [
            _skill("sun", "space", 1, 1),
            _skill("moon", "space", 1, 2),
            _skill("gravity", "space", 2, 3, ["sun", "moon"], deepens=["orbits"], applies=["levers"]),
            _skill("orbits", "space", 2, 4, ["sun"]),
            _skill("black-holes", "space", 3, 5, ["gravity", "orbits"], age_min=7),
            _skill("levers", "machines", 1, 6),
            _skill("pulleys", "machines", 2, 7, ["levers"]),
            _skill("birds", "nature", 1, 8),
        ],
    }


@pytest.fixture
def small_catalog(small_catalog_data):
    """Validated small catalog."""
    return catalog_from_dict(small_catalog_data)


@pytest.fixture
def mastered():
    """A dominated progress record."""
    return SkillProgress(attempts=5, mastery=0.9, dominated=True, correct=5)


@pytest.fixture
def make_progress():
    """Factory for progress records."""

    def factory(attempts=1, mastery=0.5, dominated=False):
        return SkillProgress(attempts=attempts, mastery=mastery, dominated=dominated)

    return factory
