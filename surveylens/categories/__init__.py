"""Question category table: reads the keyword table from YAML.

The table is an explicit value handed to the classifier, so callers can load
their own file or build a ``CategoryTable`` directly in tests.

Public API::

    from surveylens.categories import (
        Category,
        CategoryTable,
        default_category_table,
        load_category_table,
    )
"""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import cache
from pathlib import Path
from typing import Any

import yaml

_DEFAULT_PATH = Path(__file__).resolve().parent / "default.yaml"


# ---------------------------------------------------------------------------
# Dataclasses
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Category:
    id: str
    name: str
    color: str = "#6b7280"
    order: int = 50
    keywords: tuple[str, ...] = ()


@dataclass(frozen=True)
class CategoryTable:
    """Ordered categories; keyword matching walks them in list order."""

    categories: tuple[Category, ...] = field(default_factory=tuple)
    default_id: str = "cat-other"

    def get(self, category_id: str) -> Category | None:
        for category in self.categories:
            if category.id == category_id:
                return category
        return None

    def ids(self) -> list[str]:
        return [c.id for c in self.categories]


# ---------------------------------------------------------------------------
# YAML → dataclass parsing
# ---------------------------------------------------------------------------


def _str(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _require(raw: dict[str, Any], key: str, filename: str) -> Any:
    """Return raw[key] or raise ValueError with a clear message."""
    if key not in raw:
        msg = f"{filename}: missing required key '{key}'"
        raise ValueError(msg)
    return raw[key]


def _parse_category(raw: dict[str, Any], filename: str) -> Category:
    category_id = _str(_require(raw, "id", filename))
    name = _str(_require(raw, "name", filename))
    keywords = tuple(_str(k) for k in (raw.get("keywords") or []) if _str(k))
    return Category(
        id=category_id,
        name=name,
        color=_str(raw.get("color")) or "#6b7280",
        order=int(raw.get("order", 50)),
        keywords=keywords,
    )


def _parse_table(raw: dict[str, Any], filename: str) -> CategoryTable:
    if not isinstance(raw, dict):
        msg = f"{filename}: expected a mapping at the top level"
        raise ValueError(msg)
    raw_categories = _require(raw, "categories", filename) or []
    categories = tuple(_parse_category(c, filename) for c in raw_categories)

    seen: set[str] = set()
    for category in categories:
        if category.id in seen:
            msg = f"{filename}: duplicate category id '{category.id}'"
            raise ValueError(msg)
        seen.add(category.id)

    default_id = _str(raw.get("default_id")) or "cat-other"
    if default_id not in seen:
        msg = f"{filename}: default_id '{default_id}' is not a listed category"
        raise ValueError(msg)
    return CategoryTable(categories=categories, default_id=default_id)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def load_category_table(path: Path | None = None) -> CategoryTable:
    """Load a category table from *path*, or the bundled default table."""
    if path is None:
        return default_category_table()
    raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    return _parse_table(raw, path.name)


@cache
def default_category_table() -> CategoryTable:
    raw = yaml.safe_load(_DEFAULT_PATH.read_text(encoding="utf-8"))
    return _parse_table(raw, _DEFAULT_PATH.name)
