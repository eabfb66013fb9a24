"""
``{{TOKEN}}`` placeholder templates.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import FrozenSet, Iterable, Mapping

from ..errors import TemplateError

logger = logging.getLogger(__name__)

TOKEN_PATTERN = re.compile(r"\{\{([A-Z][A-Z0-9_]*)\}\}")


@dataclass(frozen=True)
class PageTemplate:
    """
    A template plus the tokens every render must supply.

    Tokens found in the text but absent from the value mapping are left
    verbatim; only ``required`` tokens are enforced.
    """
    name: str
    text: str
    required: FrozenSet[str] = field(default_factory=frozenset)

    @classmethod
    def load(cls, path: Path, required: Iterable[str] = ()) -> "PageTemplate":
        try:
            text = Path(path).read_text(encoding="utf-8")
        except FileNotFoundError as exc:
            raise TemplateError(f"Template not found: {path}") from exc
        return cls(name=Path(path).name, text=text, required=frozenset(required))

    @property
    def tokens(self) -> FrozenSet[str]:
        """Every token name that appears in the template text."""
        return frozenset(TOKEN_PATTERN.findall(self.text))

    def verify(self, supplied: Iterable[str]) -> None:
        """
        Raise TemplateError unless every required token is in ``supplied``.
        """
        missing = self.required - set(supplied)
        if missing:
            raise TemplateError(f"{self.name}: missing values for {', '.join(sorted(missing))}")

    def render(self, values: Mapping[str, str]) -> str:
        self.verify(values.keys())
        return render_tokens(self.text, values)


def render_tokens(text: str, values: Mapping[str, str]) -> str:
    """
    Replace every ``{{TOKEN}}`` whose name is in ``values``.
    """

    def _substitute(match: re.Match[str]) -> str:
        key = match.group(1)
        if key in values:
            return str(values[key])
        return match.group(0)

    return TOKEN_PATTERN.sub(_substitute, text)
