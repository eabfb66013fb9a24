"""
Title, description and keyword strings for page metadata.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional

from ..content import Category, Spread
from ..util import truncate_words

DESCRIPTION_LIMIT = 155


@dataclass(frozen=True)
class SeoMeta:
    title: str
    description: str
    keywords: str


def join_keywords(values: Iterable[str]) -> str:
    """Comma-join non-empty values, dropping case-insensitive duplicates."""
    seen: set[str] = set()
    result: List[str] = []
    for value in values:
        cleaned = " ".join((value or "").split())
        if not cleaned or cleaned.lower() in seen:
            continue
        seen.add(cleaned.lower())
        result.append(cleaned)
    return ", ".join(result)


def spread_meta(spread: Spread, category: Optional[Category], site_name: str) -> SeoMeta:
    category_name = category.name if category else ""
    return SeoMeta(
        title=f"{spread.name} Tarot Spread | {site_name}",
        description=truncate_words(spread.introduction, DESCRIPTION_LIMIT),
        keywords=join_keywords([spread.name, category_name, *spread.keywords, "tarot spread"]),
    )


def category_meta(category: Category, spreads: Iterable[Spread], site_name: str) -> SeoMeta:
    names = [spread.name for spread in spreads]
    return SeoMeta(
        title=f"{category.name} Tarot Spreads | {site_name}",
        description=truncate_words(category.description, DESCRIPTION_LIMIT),
        keywords=join_keywords([category.name, *names, "tarot spreads"]),
    )
