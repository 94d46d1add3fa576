"""
Skill catalog models.

The catalog is an immutable DAG of skills grouped into domains, three
difficulty levels per domain. It is loaded once, validated once, and then
only queried.

Invariants enforced at construction:
- level 1 skills have no prerequisites; level 2/3 skills have at least one
- every prerequisite and curated edge references a known slug
- age_min <= age_max
- slugs are unique and `order` is a dense 1..N sequence
- the prerequisite graph has no cycles
"""

from __future__ import annotations

from collections import defaultdict
from typing import Any, Literal

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    PrivateAttr,
    ValidationError,
    field_validator,
    model_validator,
)

from readpath.core.errors import CatalogIntegrityError


class Domain(BaseModel):
    """A group of skills with its own three level names."""

    model_config = ConfigDict(frozen=True)

    slug: str = Field(..., min_length=1)
    name: str
    emoji: str = ""
    order: int = 0
    level_names: tuple[str, str, str]


class Skill(BaseModel):
    """One node of the skill tree."""

    model_config = ConfigDict(frozen=True)

    slug: str = Field(..., min_length=1)
    name: str
    emoji: str = ""
    domain: str
    level: Literal[1, 2, 3]
    core_concept: str = ""
    prerequisites: tuple[str, ...] = ()
    age_min: int = Field(..., ge=0)
    age_max: int = Field(..., ge=0)
    order: int = Field(..., ge=1)
    deepens: tuple[str, ...] = ()
    applies: tuple[str, ...] = ()

    @field_validator("prerequisites", "deepens", "applies", mode="before")
    @classmethod
    def _none_as_empty(cls, value: Any) -> Any:
        return () if value is None else value

    @model_validator(mode="after")
    def _check_node(self) -> Skill:
        if self.age_min > self.age_max:
            raise ValueError(
                f"Skill '{self.slug}' has age_min {self.age_min} > age_max {self.age_max}"
            )
        if self.level == 1 and self.prerequisites:
            raise ValueError(f"Level 1 skill '{self.slug}' must not have prerequisites")
        if self.level > 1 and not self.prerequisites:
            raise ValueError(f"Level {self.level} skill '{self.slug}' needs at least one prerequisite")
        if self.slug in self.prerequisites:
            raise ValueError(f"Skill '{self.slug}' lists itself as a prerequisite")
        return self

    @property
    def route_key(self) -> tuple[int, int]:
        """Sort key for walking the tree: level first, then catalog order."""
        return (self.level, self.order)


class SkillCatalog(BaseModel):
    """
    Validated, read-only skill tree.

    Build it through ``validate_catalog`` (or the loader), which reports
    problems as CatalogIntegrityError. Calling the constructor directly
    surfaces pydantic's ValidationError instead.
    """

    model_config = ConfigDict(frozen=True)

    version: int = 1
    domains: tuple[Domain, ...] = ()
    skills: tuple[Skill, ...]

    _by_slug: dict[str, Skill] = PrivateAttr(default_factory=dict)
    _domains_by_slug: dict[str, Domain] = PrivateAttr(default_factory=dict)
    _children: dict[str, tuple[Skill, ...]] = PrivateAttr(default_factory=dict)

    @classmethod
    def validate_catalog(cls, raw: Any) -> SkillCatalog:
        """
        Validate raw catalog data.

        Raises:
            CatalogIntegrityError: if the data is malformed or violates a
                catalog invariant.
        """
        if not isinstance(raw, dict):
            raise CatalogIntegrityError("Catalog root must be a mapping with a 'skills' list")
        try:
            return cls.model_validate(raw)
        except ValidationError as exc:
            raise CatalogIntegrityError(f"Invalid skill catalog: {exc}") from exc

    @model_validator(mode="after")
    def _check_graph(self) -> SkillCatalog:
        by_slug: dict[str, Skill] = {}
        for skill in self.skills:
            if skill.slug in by_slug:
                raise ValueError(f"Duplicate skill slug: {skill.slug}")
            by_slug[skill.slug] = skill

        domain_slugs = {domain.slug for domain in self.domains}
        if len(domain_slugs) != len(self.domains):
            raise ValueError("Duplicate domain slug in catalog")

        for skill in self.skills:
            if domain_slugs and skill.domain not in domain_slugs:
                raise ValueError(f"Skill '{skill.slug}' belongs to unknown domain '{skill.domain}'")
            for prerequisite in skill.prerequisites:
                if prerequisite not in by_slug:
                    raise ValueError(
                        f"Skill '{skill.slug}' has unknown prerequisite '{prerequisite}'"
                    )
            for edge_name in ("deepens", "applies"):
                for target in getattr(skill, edge_name):
                    if target not in by_slug:
                        raise ValueError(
                            f"Skill '{skill.slug}' {edge_name} unknown skill '{target}'"
                        )

        orders = sorted(skill.order for skill in self.skills)
        if orders != list(range(1, len(self.skills) + 1)):
            raise ValueError("Skill order must be a dense 1..N sequence across the catalog")

        _check_acyclic(by_slug)
        return self

    def model_post_init(self, __context: Any) -> None:
        self._by_slug = {skill.slug: skill for skill in self.skills}
        self._domains_by_slug = {domain.slug: domain for domain in self.domains}
        children: dict[str, list[Skill]] = defaultdict(list)
        for skill in sorted(self.skills, key=lambda s: s.order):
            for prerequisite in skill.prerequisites:
                children[prerequisite].append(skill)
        self._children = {slug: tuple(items) for slug, items in children.items()}

    # =========================================================================
    # QUERIES
    # =========================================================================

    def get(self, slug: str | None) -> Skill | None:
        if slug is None:
            return None
        return self._by_slug.get(slug)

    def __contains__(self, slug: object) -> bool:
        return slug in self._by_slug

    def __len__(self) -> int:
        return len(self.skills)

    def in_order(self) -> list[Skill]:
        """All skills in catalog order."""
        return sorted(self.skills, key=lambda s: s.order)

    def skills_for_age(self, age: int) -> list[Skill]:
        """Age-eligible skills in catalog order."""
        return [skill for skill in self.in_order() if skill.age_min <= age <= skill.age_max]

    def skills_in_domain(self, domain: str) -> list[Skill]:
        """Skills of one domain, sorted by level then order."""
        return sorted((s for s in self.skills if s.domain == domain), key=lambda s: s.route_key)

    def children_of(self, slug: str) -> tuple[Skill, ...]:
        """Skills that list ``slug`` as a prerequisite."""
        return self._children.get(slug, ())

    def domain(self, slug: str) -> Domain | None:
        return self._domains_by_slug.get(slug)

    def level_name(self, domain: str, level: int) -> str | None:
        """Human-readable name of a domain level (1-based)."""
        info = self._domains_by_slug.get(domain)
        if info is None or not 1 <= level <= 3:
            return None
        return info.level_names[level - 1]


def _check_acyclic(by_slug: dict[str, Skill]) -> None:
    """Raise ValueError on a prerequisite cycle."""
    visiting: set[str] = set()
    visited: set[str] = set()

    def visit(slug: str, path: list[str]) -> None:
        if slug in visited:
            return
        if slug in visiting:
            cycle = path[path.index(slug):] + [slug]
            raise ValueError(f"Circular prerequisite detected: {' -> '.join(cycle)}")
        visiting.add(slug)
        path.append(slug)
        for prerequisite in by_slug[slug].prerequisites:
            visit(prerequisite, path)
        path.pop()
        visiting.remove(slug)
        visited.add(slug)

    for slug in by_slug:
        visit(slug, [])
