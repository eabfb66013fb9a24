"""
Filesystem helpers shared across build steps.
"""

from __future__ import annotations

import logging
import os
import tempfile
from contextlib import contextmanager
from pathlib import Path

from filelock import FileLock

logger = logging.getLogger(__name__)


def _ensure_parent(target: Path) -> None:
    """Ensure the parent directory for target exists."""
    if target.parent and not target.parent.exists():
        target.parent.mkdir(parents=True, exist_ok=True)


@contextmanager
def file_lock(path: Path | str):
    """Context manager for a filesystem lock file alongside the target."""
    target = Path(path).expanduser().resolve()
    lock_path = target.parent / f".{target.name}.lock"
    _ensure_parent(lock_path)
    lock = FileLock(str(lock_path))
    try:
        with lock:
            yield
    finally:
        try:
            lock_path.unlink()
        except OSError:
            pass


def _atomic_write_bytes(target: Path, data: bytes) -> None:
    """Write bytes atomically by staging a temp file and renaming."""
    _ensure_parent(target)
    fd, tmp_path = tempfile.mkstemp(prefix=f".{target.name}.", suffix=".tmp", dir=target.parent)
    try:
        with os.fdopen(fd, "wb") as handle:
            handle.write(data)
            handle.flush()
            os.fsync(handle.fileno())
        os.replace(tmp_path, target)
    finally:
        try:
            os.unlink(tmp_path)
        except FileNotFoundError:
            pass


def write_bytes_file(path: Path | str, data: bytes, *, lock: bool = True) -> Path:
    """
    Write a byte buffer to a file, creating parent directories as needed.
    """
    target = Path(path).expanduser().resolve()
    if lock:
        with file_lock(target):
            _atomic_write_bytes(target, data)
    else:
        _atomic_write_bytes(target, data)
    return target


def write_text_file(path: Path | str, content: str, encoding: str = "utf-8", *, lock: bool = True) -> Path:
    """
    Write text to a file, creating parent directories as needed.
    """
    return write_bytes_file(path, content.encode(encoding), lock=lock)


def copy_file(source: Path | str, destination: Path | str) -> Path:
    """
    Copy a file's bytes to destination using the same atomic write path.
    """
    src = Path(source).expanduser().resolve()
    data = src.read_bytes()
    target = write_bytes_file(destination, data)
    logger.debug("Copied %s -> %s", src, target)
    return target
