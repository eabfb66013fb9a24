"""
Build steps: cleaning output directories, bundling, and hash-named asset writes.
"""

from .assets import HashedAsset, content_hash, format_size, hashed_filename, write_hashed_asset
from .bundler import BundleOutput, BundleRequest, bundle_assets, bundle_entry
from .cleaner import CleanTarget, clean_directories, default_clean_targets

__all__ = [
    "HashedAsset",
    "content_hash",
    "format_size",
    "hashed_filename",
    "write_hashed_asset",
    "BundleOutput",
    "BundleRequest",
    "bundle_assets",
    "bundle_entry",
    "CleanTarget",
    "clean_directories",
    "default_clean_targets",
]
