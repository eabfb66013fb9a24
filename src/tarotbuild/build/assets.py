"""
Content-hashed asset filenames for cache busting.
"""

from __future__ import annotations

import hashlib
import logging
from dataclasses import dataclass
from pathlib import Path

from ..util import write_bytes_file

logger = logging.getLogger(__name__)

HASH_LENGTH = 8


@dataclass(frozen=True)
class HashedAsset:
    path: Path
    digest: str
    size: int

    @property
    def filename(self) -> str:
        return self.path.name


def content_hash(data: bytes) -> str:
    """
    Return an 8-character lowercase hex digest of ``data``.

    Used only to make filenames change with content; collision resistance is
    not a concern.
    """
    return hashlib.md5(data, usedforsecurity=False).hexdigest()[:HASH_LENGTH]


def hashed_filename(base: str, ext: str, data: bytes) -> str:
    return f"{base}-{content_hash(data)}.{ext.lstrip('.')}"


def format_size(num_bytes: int) -> str:
    return f"{num_bytes / 1024:.2f} KB"


def write_hashed_asset(directory: Path, base: str, ext: str, data: bytes) -> HashedAsset:
    """
    Write ``data`` under ``directory`` as ``<base>-<hash>.<ext>``.
    """
    filename = hashed_filename(base, ext, data)
    path = write_bytes_file(Path(directory) / filename, data)
    logger.info("Wrote %s (%s)", filename, format_size(len(data)))
    return HashedAsset(path=path, digest=content_hash(data), size=len(data))
