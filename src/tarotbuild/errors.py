"""
Exception types raised by the build pipeline.
"""

from __future__ import annotations


class BuildError(RuntimeError):
    """Base class for every failure that should abort a build."""


class ConfigError(BuildError):
    """Raised when configuration files cannot be loaded or validated."""


class ContentError(BuildError):
    """Raised when the spread/category content table is unreadable or inconsistent."""


class TemplateError(BuildError):
    """Raised when a page template is missing or a required token is not supplied."""


class BundleError(BuildError):
    """Raised when the bundler exits with an error or produces no output."""
