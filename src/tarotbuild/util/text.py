"""
Text-related helpers.
"""

from __future__ import annotations

import hashlib
import re

_SLUG_PATTERN = re.compile(r"[^a-z0-9]+")
_TRAILING_PUNCTUATION = ",;:-"


def slugify(value: str) -> str:
    """
    Generate a filesystem-friendly slug.

    Uses hyphens as separators to reduce collisions.
    """
    raw = (value or "").strip().lower()
    slug = _SLUG_PATTERN.sub("-", raw).strip("-")
    if slug:
        return slug
    digest = hashlib.sha1(raw.encode("utf-8")).hexdigest()[:8]
    return f"item-{digest}"


def truncate_words(text: str, limit: int, *, suffix: str = "...") -> str:
    """
    Shorten text to at most ``limit`` characters, cutting on a word boundary.

    Text that already fits is returned whole (whitespace-normalised); the
    suffix is only appended when something was cut.
    """
    collapsed = " ".join((text or "").split())
    if len(collapsed) <= limit:
        return collapsed
    budget = max(limit - len(suffix), 0)
    head = collapsed[:budget]
    if " " in head and collapsed[budget] != " ":
        head = head.rsplit(" ", 1)[0]
    return head.rstrip().rstrip(_TRAILING_PUNCTUATION) + suffix
