"""Load skill catalogs from YAML/JSON files or the bundled resource."""

from __future__ import annotations

import json
from functools import lru_cache
from importlib import resources
from pathlib import Path
from typing import Any

import yaml
from loguru import logger

from config import get_settings
from readpath.core.errors import CatalogIntegrityError
from readpath.catalog.models import SkillCatalog

BUNDLED_PACKAGE = "readpath.catalog.data"
BUNDLED_FILE = "skills.yaml"


def catalog_from_dict(raw: dict[str, Any]) -> SkillCatalog:
    """
    Validate raw catalog data.

    Raises:
        CatalogIntegrityError: if the data is malformed or violates a
            catalog invariant.
    """
    catalog = SkillCatalog.validate_catalog(raw)
    logger.debug(
        "Loaded skill catalog v{} ({} domains, {} skills)",
        catalog.version,
        len(catalog.domains),
        len(catalog.skills),
    )
    return catalog


def _parse_text(text: str, suffix: str) -> dict[str, Any]:
    if suffix in {".yaml", ".yml"}:
        return yaml.safe_load(text)
    if suffix == ".json":
        return json.loads(text)
    raise CatalogIntegrityError(f"Unsupported catalog format: {suffix}")


def load_catalog(path: Path | str) -> SkillCatalog:
    """Load and validate a catalog file (.yaml, .yml or .json)."""
    file_path = Path(path)
    text = file_path.read_text(encoding="utf-8-sig")
    return catalog_from_dict(_parse_text(text, file_path.suffix.lower()))


def load_bundled_catalog() -> SkillCatalog:
    """Load the catalog shipped with the package."""
    text = resources.files(BUNDLED_PACKAGE).joinpath(BUNDLED_FILE).read_text(encoding="utf-8")
    return catalog_from_dict(_parse_text(text, ".yaml"))


@lru_cache(maxsize=4)
def _cached_catalog(path: str | None) -> SkillCatalog:
    if path is None:
        return load_bundled_catalog()
    return load_catalog(path)


def get_catalog(path: Path | str | None = None) -> SkillCatalog:
    """
    Process-wide catalog.

    Uses ``path`` when given, otherwise ``READPATH_CATALOG_PATH``, otherwise
    the bundled catalog. Each source is loaded and validated once.
    """
    if path is None:
        path = get_settings().catalog_path
    return _cached_catalog(str(path) if path is not None else None)
