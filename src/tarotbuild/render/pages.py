"""
Materialize the index, spread and category pages from their templates.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, FrozenSet, List, Mapping

from ..config import BuildConfig
from ..content import Category, ContentTable, Spread
from ..errors import TemplateError
from ..util import write_text_file
from .fragments import esc, keyword_badges, position_list, spread_cards
from .seo import SeoMeta, category_meta, spread_meta
from .template import PageTemplate

logger = logging.getLogger(__name__)

ASSET_TOKENS = frozenset({"JS_FILE", "CSS_FILE"})
SEO_TOKENS = frozenset({"META_TITLE", "META_DESCRIPTION", "META_KEYWORDS", "CANONICAL_URL"})
INDEX_TOKENS = ASSET_TOKENS
SPREAD_TOKENS = ASSET_TOKENS | SEO_TOKENS | frozenset(
    {
        "SPREAD_ID",
        "SPREAD_NAME",
        "SPREAD_SLUG",
        "CARD_COUNT",
        "INTRODUCTION",
        "WHEN_TO_USE",
        "HOW_TO_READ",
        "CATEGORY_NAME",
        "CATEGORY_ICON",
        "CATEGORY_URL",
        "KEYWORD_BADGES",
        "POSITION_LIST",
    }
)
CATEGORY_TOKENS = ASSET_TOKENS | SEO_TOKENS | frozenset(
    {
        "CATEGORY_ID",
        "CATEGORY_NAME",
        "CATEGORY_ICON",
        "CATEGORY_DESCRIPTION",
        "SPREAD_COUNT",
        "SPREAD_CARDS",
    }
)


@dataclass(frozen=True)
class SiteTemplates:
    index: PageTemplate
    spread: PageTemplate
    category: PageTemplate


@dataclass(frozen=True)
class AssetNames:
    script: str
    stylesheet: str


PAGE_KINDS = ("index", "spread", "category")
SAMPLE_ASSETS = AssetNames(script="index.js", stylesheet="index.css")


def load_templates(config: BuildConfig, content: ContentTable) -> SiteTemplates:
    """
    Load all page templates and verify them against what the renderers
    actually supply, before anything is cleaned or written.
    """
    templates = SiteTemplates(
        index=PageTemplate.load(config.resolve(config.index_template), INDEX_TOKENS),
        spread=PageTemplate.load(config.resolve(config.spread_template), SPREAD_TOKENS),
        category=PageTemplate.load(config.resolve(config.category_template), CATEGORY_TOKENS),
    )
    verify_templates(templates, renderer_tokens(config, content))
    return templates


def renderer_tokens(config: BuildConfig, content: ContentTable) -> Dict[str, FrozenSet[str]]:
    """
    Token names each page renderer produces, taken from a sample render.

    A page kind with no items to render falls back to its declared token set.
    """
    supplied = {
        "index": frozenset(index_values(SAMPLE_ASSETS)),
        "spread": SPREAD_TOKENS,
        "category": CATEGORY_TOKENS,
    }
    if content.spreads:
        supplied["spread"] = frozenset(spread_values(config, content, content.spreads[0], SAMPLE_ASSETS))
    if content.categories:
        supplied["category"] = frozenset(category_values(config, content, content.categories[0], SAMPLE_ASSETS))
    return supplied


def verify_templates(templates: SiteTemplates, supplied: Mapping[str, FrozenSet[str]]) -> None:
    """
    Check every template against the token set its renderer supplies.

    Fails when a renderer does not produce a token the page kind declares,
    or when the index template does not load both bundles. Spread and category
    templates missing an asset token, and tokens nobody supplies, are only
    logged; unfilled tokens stay verbatim.
    """
    for kind in PAGE_KINDS:
        template: PageTemplate = getattr(templates, kind)
        template.verify(supplied[kind])
        absent = ASSET_TOKENS - template.tokens
        if absent and kind == "index":
            raise TemplateError(f"{template.name}: template never references {', '.join(sorted(absent))}")
        if absent:
            logger.warning("%s: template never references %s", template.name, ", ".join(sorted(absent)))
        unknown = template.tokens - supplied[kind]
        if unknown:
            logger.warning("%s: tokens left unfilled: %s", template.name, ", ".join(sorted(unknown)))


def relative_prefix(page_dir: Path, target_dir: Path) -> str:
    """Relative URL prefix (ending in '/') from page_dir to target_dir."""
    rel = os.path.relpath(target_dir, page_dir).replace(os.sep, "/")
    return "./" if rel == "." else (rel if rel.startswith(".") else f"./{rel}") + "/"


def canonical_url(config: BuildConfig, page: Path) -> str:
    if not config.site_url:
        return ""
    rel = page.resolve().relative_to(config.root.resolve()).as_posix()
    return f"{config.site_url}/{rel}"


def _asset_values(config: BuildConfig, page_dir: Path, assets: AssetNames) -> Dict[str, str]:
    prefix = relative_prefix(page_dir, config.resolve(config.assets_dir))
    return {"JS_FILE": f"{prefix}{assets.script}", "CSS_FILE": f"{prefix}{assets.stylesheet}"}


def _seo_values(meta: SeoMeta, canonical: str) -> Dict[str, str]:
    return {
        "META_TITLE": esc(meta.title),
        "META_DESCRIPTION": esc(meta.description),
        "META_KEYWORDS": esc(meta.keywords),
        "CANONICAL_URL": esc(canonical),
    }


def index_values(assets: AssetNames) -> Dict[str, str]:
    return {"JS_FILE": f"./assets/{assets.script}", "CSS_FILE": f"./assets/{assets.stylesheet}"}


def spread_page_path(config: BuildConfig, spread: Spread) -> Path:
    return config.resolve(config.spread_dir) / f"{spread.slug}.html"


def category_page_path(config: BuildConfig, category: Category) -> Path:
    return config.resolve(config.category_dir) / f"{category.slug}.html"


def spread_values(
    config: BuildConfig,
    content: ContentTable,
    spread: Spread,
    assets: AssetNames,
) -> Dict[str, str]:
    page = spread_page_path(config, spread)
    category = content.category_for(spread)
    category_prefix = relative_prefix(page.parent, config.resolve(config.category_dir))
    values = {
        "SPREAD_ID": esc(spread.id),
        "SPREAD_NAME": esc(spread.name),
        "SPREAD_SLUG": esc(spread.slug),
        "CARD_COUNT": str(spread.card_count),
        "INTRODUCTION": esc(spread.introduction),
        "WHEN_TO_USE": esc(spread.when_to_use),
        "HOW_TO_READ": esc(spread.how_to_read),
        "CATEGORY_NAME": esc(category.name),
        "CATEGORY_ICON": esc(category.icon),
        "CATEGORY_URL": esc(f"{category_prefix}{category.slug}.html"),
        "KEYWORD_BADGES": keyword_badges(spread.keywords),
        "POSITION_LIST": position_list(spread.positions),
    }
    values.update(_asset_values(config, page.parent, assets))
    values.update(_seo_values(spread_meta(spread, category, config.site_name), canonical_url(config, page)))
    return values


def category_values(
    config: BuildConfig,
    content: ContentTable,
    category: Category,
    assets: AssetNames,
) -> Dict[str, str]:
    page = category_page_path(config, category)
    members = content.spreads_in(category)
    spread_prefix = relative_prefix(page.parent, config.resolve(config.spread_dir))
    values = {
        "CATEGORY_ID": esc(category.id),
        "CATEGORY_NAME": esc(category.name),
        "CATEGORY_ICON": esc(category.icon),
        "CATEGORY_DESCRIPTION": esc(category.description),
        "SPREAD_COUNT": str(len(members)),
        "SPREAD_CARDS": spread_cards(members, spread_prefix),
    }
    values.update(_asset_values(config, page.parent, assets))
    values.update(_seo_values(category_meta(category, members, config.site_name), canonical_url(config, page)))
    return values


def write_index_page(config: BuildConfig, template: PageTemplate, assets: AssetNames) -> Path:
    destination = config.resolve(config.dist_dir) / "index.html"
    write_text_file(destination, template.render(index_values(assets)))
    logger.info("index.html created")
    return destination


def write_spread_pages(
    config: BuildConfig,
    template: PageTemplate,
    content: ContentTable,
    assets: AssetNames,
) -> List[Path]:
    written: List[Path] = []
    for spread in content.spreads:
        destination = spread_page_path(config, spread)
        write_text_file(destination, template.render(spread_values(config, content, spread, assets)))
        written.append(destination)
    logger.info("Generated %d spread page(s)", len(written))
    return written


def write_category_pages(
    config: BuildConfig,
    template: PageTemplate,
    content: ContentTable,
    assets: AssetNames,
) -> List[Path]:
    written: List[Path] = []
    for category in content.categories:
        destination = category_page_path(config, category)
        write_text_file(destination, template.render(category_values(config, content, category, assets)))
        written.append(destination)
    logger.info("Generated %d category page(s)", len(written))
    return written
