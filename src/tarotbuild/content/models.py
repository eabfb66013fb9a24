"""
Pydantic models for the static spread/category table that drives page generation.
"""

from __future__ import annotations

import logging
import tomllib
from pathlib import Path
from typing import Any, Dict, List, Tuple

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from ..errors import ContentError
from ..util import slugify

logger = logging.getLogger(__name__)


class Spread(BaseModel):
    """
    A named tarot card layout.

    Attributes:
        id: Stable identifier (e.g. "celtic-cross").
        name: Display name.
        slug: URL/file slug; derived from the name when omitted.
        category: Tag matching a Category id.
        card_count: Number of cards drawn.
        introduction: Opening narrative, also the source of the meta description.
        when_to_use: Narrative on the situations the spread suits.
        how_to_read: Narrative on interpreting the layout.
        keywords: Short keyword tags shown as badges.
        positions: Ordered position labels, one per card.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    id: str
    name: str
    slug: str = ""
    category: str
    card_count: int = Field(ge=1)
    introduction: str
    when_to_use: str = ""
    how_to_read: str = ""
    keywords: Tuple[str, ...] = ()
    positions: Tuple[str, ...] = ()

    @model_validator(mode="before")
    @classmethod
    def _default_slug(cls, data: Any) -> Any:
        if isinstance(data, dict) and not data.get("slug"):
            data = dict(data)
            data["slug"] = slugify(str(data.get("name") or data.get("id") or ""))
        return data

    @model_validator(mode="after")
    def _check_positions(self) -> "Spread":
        if self.positions and len(self.positions) != self.card_count:
            raise ValueError(
                f"spread {self.id!r} declares {self.card_count} cards but lists {len(self.positions)} positions"
            )
        return self


class Category(BaseModel):
    """
    A grouping tag for spreads with its own landing page.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    id: str
    name: str
    icon: str = ""
    slug: str = ""
    description: str = ""

    @model_validator(mode="before")
    @classmethod
    def _default_slug(cls, data: Any) -> Any:
        if isinstance(data, dict) and not data.get("slug"):
            data = dict(data)
            data["slug"] = slugify(str(data.get("name") or data.get("id") or ""))
        return data


class ContentTable(BaseModel):
    """
    The full, read-only content table for one build.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    spreads: Tuple[Spread, ...] = ()
    categories: Tuple[Category, ...] = ()

    @model_validator(mode="after")
    def _check_references(self) -> "ContentTable":
        _require_unique("spread id", [spread.id for spread in self.spreads])
        _require_unique("spread slug", [spread.slug for spread in self.spreads])
        _require_unique("category id", [category.id for category in self.categories])
        _require_unique("category slug", [category.slug for category in self.categories])

        known = {category.id for category in self.categories}
        for spread in self.spreads:
            if spread.category not in known:
                raise ValueError(f"spread {spread.id!r} references unknown category {spread.category!r}")
        return self

    def category_for(self, spread: Spread) -> Category:
        for category in self.categories:
            if category.id == spread.category:
                return category
        raise KeyError(spread.category)

    def spreads_in(self, category: Category) -> List[Spread]:
        """Spreads whose category tag matches, in table order."""
        return [spread for spread in self.spreads if spread.category == category.id]


def _require_unique(label: str, values: List[str]) -> None:
    seen: set[str] = set()
    for value in values:
        if value in seen:
            raise ValueError(f"duplicate {label}: {value!r}")
        seen.add(value)


def load_content(path: Path | str) -> ContentTable:
    """
    Load and validate the content TOML file.

    The file uses ``[[spread]]`` and ``[[category]]`` table arrays.

    Raises:
        ContentError: If the file is missing, unreadable, or inconsistent.
    """
    content_path = Path(path).expanduser().resolve()
    if not content_path.exists():
        raise ContentError(f"Content file not found: {content_path}")

    try:
        with content_path.open("rb") as handle:
            raw_data: Dict[str, Any] = tomllib.load(handle)
    except OSError as exc:
        raise ContentError(f"Unable to read content file: {exc}") from exc
    except tomllib.TOMLDecodeError as exc:
        raise ContentError(f"Invalid TOML in content file: {exc}") from exc

    unexpected = set(raw_data) - {"spread", "category"}
    if unexpected:
        raise ContentError(
            f"Unexpected top-level keys in content file: {', '.join(sorted(unexpected))}. "
            "Use [[spread]] and [[category]] blocks."
        )

    payload = {
        "spreads": _coerce_table_array(raw_data.get("spread"), "spread"),
        "categories": _coerce_table_array(raw_data.get("category"), "category"),
    }
    try:
        table = ContentTable.model_validate(payload)
    except ValidationError as exc:
        raise ContentError(str(exc)) from exc

    for category in table.categories:
        if not table.spreads_in(category):
            logger.warning("Category %r has no spreads; its page will be empty", category.id)
    logger.debug("Loaded %d spreads and %d categories from %s", len(table.spreads), len(table.categories), content_path)
    return table


def _coerce_table_array(value: Any, label: str) -> list[dict]:
    if value is None:
        return []
    if isinstance(value, dict):
        return [value]
    if isinstance(value, list):
        if not all(isinstance(item, dict) for item in value):
            raise ContentError(f"Each [[{label}]] entry must be a table/object.")
        return value
    raise ContentError(f"Invalid [{label}] block; expected a table or array of tables.")
