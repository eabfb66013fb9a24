"""
Configuration helpers for the tarot site build.
"""

from ..errors import ConfigError
from .models import BuildConfig, load_config
from .settings import Settings, get_settings

__all__ = ["BuildConfig", "ConfigError", "load_config", "Settings", "get_settings"]
