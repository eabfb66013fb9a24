"""
Pipeline executor ties together cleaning, bundling, and page rendering.
"""

from __future__ import annotations

import asyncio
import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Optional
from xml.sax.saxutils import escape as xml_escape

from ..build import (
    HashedAsset,
    bundle_assets,
    clean_directories,
    default_clean_targets,
    format_size,
    write_hashed_asset,
)
from ..config import BuildConfig
from ..content import ContentTable
from ..render import (
    AssetNames,
    load_templates,
    write_category_pages,
    write_index_page,
    write_spread_pages,
)
from ..render.pages import canonical_url, category_page_path, spread_page_path
from ..util import copy_file, write_text_file

logger = logging.getLogger(__name__)

MANIFEST_FILENAME = "asset-manifest.json"
SITEMAP_FILENAME = "sitemap.xml"


@dataclass
class BuildReport:
    """
    What a build produced.

    Attributes:
        root: Project/public root directory.
        removed: Stale files deleted by the cleaner.
        script: Hashed script bundle in the dist assets directory.
        stylesheet: Hashed stylesheet bundle in the dist assets directory.
        index_page: The top-level page in the dist directory.
        spread_pages: One page per spread.
        category_pages: One page per category.
        copied: Files duplicated into the public root.
        sitemap: Sitemap path, when a site URL is configured.
    """
    root: Path
    removed: List[Path] = field(default_factory=list)
    script: Optional[HashedAsset] = None
    stylesheet: Optional[HashedAsset] = None
    index_page: Optional[Path] = None
    spread_pages: List[Path] = field(default_factory=list)
    category_pages: List[Path] = field(default_factory=list)
    copied: List[Path] = field(default_factory=list)
    manifest: Optional[Path] = None
    sitemap: Optional[Path] = None

    @property
    def bundle_size(self) -> int:
        return sum(asset.size for asset in (self.script, self.stylesheet) if asset is not None)

    def summary_rows(self) -> Iterable[tuple[str, str]]:
        yield ("Root", str(self.root))
        yield ("Stale files removed", str(len(self.removed)))
        yield ("Script", self.script.filename if self.script else "-")
        yield ("Stylesheet", self.stylesheet.filename if self.stylesheet else "-")
        yield ("Spread pages", str(len(self.spread_pages)))
        yield ("Category pages", str(len(self.category_pages)))
        yield ("Files copied to root", str(len(self.copied)))
        yield ("Sitemap", str(self.sitemap) if self.sitemap else "not configured")
        yield ("Bundle size", format_size(self.bundle_size))


def execute_build(config: BuildConfig, content: ContentTable) -> BuildReport:
    """
    Run the full build in order, aborting on the first error.

    Files written before a failure are left on disk.
    """
    report = BuildReport(root=config.root)

    templates = load_templates(config, content)

    logger.info("Cleaning output directories")
    report.removed = clean_directories(default_clean_targets(config))

    logger.info("Building with esbuild")
    bundles = asyncio.run(bundle_assets(config))

    dist_assets = config.dist_assets_dir
    report.script = write_hashed_asset(dist_assets, config.asset_basename, "js", bundles.script)
    report.stylesheet = write_hashed_asset(dist_assets, config.asset_basename, "css", bundles.stylesheet)
    assets = AssetNames(script=report.script.filename, stylesheet=report.stylesheet.filename)

    report.index_page = write_index_page(config, templates.index, assets)
    report.spread_pages = write_spread_pages(config, templates.spread, content, assets)
    report.category_pages = write_category_pages(config, templates.category, content, assets)

    report.copied = publish_to_root(config, report)
    report.manifest = write_manifest(config, assets)
    report.sitemap = write_sitemap(config, content)

    logger.info("Build completed: bundle size %s", format_size(report.bundle_size))
    return report


def publish_to_root(config: BuildConfig, report: BuildReport) -> List[Path]:
    """
    Copy the index page and hashed bundles from dist into the public root.
    """
    copied: List[Path] = []
    if report.index_page is not None:
        copied.append(copy_file(report.index_page, config.root / "index.html"))
        logger.info("index.html copied to root")
    public_assets = config.resolve(config.assets_dir)
    for asset in (report.script, report.stylesheet):
        if asset is not None:
            copied.append(copy_file(asset.path, public_assets / asset.filename))
    logger.info("Assets copied to %s", public_assets)
    return copied


def write_manifest(config: BuildConfig, assets: AssetNames) -> Path:
    base = config.asset_basename
    payload = {f"{base}.js": assets.script, f"{base}.css": assets.stylesheet}
    destination = config.resolve(config.dist_dir) / MANIFEST_FILENAME
    write_text_file(destination, json.dumps(payload, indent=2, sort_keys=True) + "\n")
    return destination


def sitemap_urls(config: BuildConfig, content: ContentTable) -> List[str]:
    if not config.site_url:
        return []
    pages = [spread_page_path(config, spread) for spread in content.spreads]
    pages.extend(category_page_path(config, category) for category in content.categories)
    urls = [f"{config.site_url}/"]
    urls.extend(canonical_url(config, page) for page in pages)
    return urls


def write_sitemap(config: BuildConfig, content: ContentTable) -> Optional[Path]:
    """
    Write sitemap.xml into the public root when a site URL is configured.

    Without a site URL any sitemap left by an earlier build is removed.
    """
    destination = config.root / SITEMAP_FILENAME
    urls = sitemap_urls(config, content)
    if not urls:
        if destination.exists():
            destination.unlink()
            logger.info("Removed stale %s", destination)
        return None
    entries = "\n".join(f"  <url><loc>{xml_escape(url)}</loc></url>" for url in urls)
    document = (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        '<urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">\n'
        f"{entries}\n"
        "</urlset>\n"
    )
    write_text_file(destination, document)
    return destination
