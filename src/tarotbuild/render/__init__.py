"""
Template rendering and page materialization.
"""

from .pages import (
    AssetNames,
    SiteTemplates,
    load_templates,
    verify_templates,
    write_category_pages,
    write_index_page,
    write_spread_pages,
)
from .template import PageTemplate, render_tokens

__all__ = [
    "AssetNames",
    "PageTemplate",
    "SiteTemplates",
    "load_templates",
    "render_tokens",
    "verify_templates",
    "write_category_pages",
    "write_index_page",
    "write_spread_pages",
]
