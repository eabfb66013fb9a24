"""
Small HTML fragments substituted into page templates.
"""

from __future__ import annotations

import html
from typing import Iterable, Sequence

from ..content import Spread


def esc(value: object) -> str:
    return html.escape(str(value), quote=True)


def keyword_badges(keywords: Iterable[str]) -> str:
    return "\n".join(f'<span class="badge">{esc(keyword)}</span>' for keyword in keywords)


def position_list(positions: Sequence[str]) -> str:
    if not positions:
        return ""
    items = "\n".join(
        f'  <li class="position"><span class="position-number">{index}</span> {esc(label)}</li>'
        for index, label in enumerate(positions, start=1)
    )
    return f'<ol class="positions">\n{items}\n</ol>'


def spread_card(spread: Spread, href: str) -> str:
    return (
        f'<a class="spread-card" href="{esc(href)}">\n'
        f"  <h3>{esc(spread.name)}</h3>\n"
        f'  <p class="card-count">{spread.card_count} cards</p>\n'
        f"  <p>{esc(spread.introduction)}</p>\n"
        "</a>"
    )


def spread_cards(spreads: Iterable[Spread], href_prefix: str) -> str:
    cards = [spread_card(spread, f"{href_prefix}{spread.slug}.html") for spread in spreads]
    if not cards:
        return '<p class="empty">No spreads in this category yet.</p>'
    return "\n".join(cards)
