"""
Core package for the tarot site build pipeline.
"""

from importlib import metadata as _metadata

try:
    __version__ = _metadata.version("tarotbuild")
except _metadata.PackageNotFoundError:  # pragma: no cover
    __version__ = "0.0.0"

__all__ = ["__version__"]
