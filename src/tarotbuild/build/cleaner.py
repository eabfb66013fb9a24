"""
Remove stale build artifacts before a build.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import FrozenSet, Iterable, List, Optional

from ..config import BuildConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CleanTarget:
    """
    A directory to empty before building.

    Attributes:
        path: Directory to clean; created when absent.
        keep: File names that are never removed.
        suffixes: When set, only files with one of these suffixes are removed.
    """
    path: Path
    keep: FrozenSet[str] = field(default_factory=frozenset)
    suffixes: Optional[FrozenSet[str]] = None

    def should_remove(self, entry: Path) -> bool:
        if not entry.is_file() and not entry.is_symlink():
            return False
        if entry.name in self.keep:
            return False
        if self.suffixes is not None and entry.suffix.lower() not in self.suffixes:
            return False
        return True


def default_clean_targets(config: BuildConfig) -> List[CleanTarget]:
    """
    The output directories a build owns, in cleaning order.
    """
    keep = frozenset(config.keep_files)
    return [
        CleanTarget(config.resolve(config.dist_dir), keep=keep),
        CleanTarget(config.dist_assets_dir),
        CleanTarget(config.resolve(config.assets_dir), keep=keep, suffixes=frozenset({".js", ".css"})),
        CleanTarget(config.resolve(config.spread_dir), keep=keep, suffixes=frozenset({".html"})),
        CleanTarget(config.resolve(config.category_dir), keep=keep, suffixes=frozenset({".html"})),
    ]


def clean_directories(targets: Iterable[CleanTarget]) -> List[Path]:
    """
    Delete stale files from each target, creating missing directories.

    Returns:
        The paths that were removed.
    """
    removed: List[Path] = []
    for target in targets:
        try:
            entries = sorted(target.path.iterdir())
        except FileNotFoundError:
            target.path.mkdir(parents=True, exist_ok=True)
            logger.debug("Created missing directory %s", target.path)
            continue
        for entry in entries:
            if target.should_remove(entry):
                entry.unlink()
                removed.append(entry)
    logger.info("Cleaned %d stale file(s)", len(removed))
    return removed
