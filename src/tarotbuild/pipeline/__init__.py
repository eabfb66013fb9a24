"""
Build pipeline orchestration.
"""

from .executor import BuildReport, execute_build

__all__ = ["BuildReport", "execute_build"]
