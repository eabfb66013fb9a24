"""
Shared utility helpers for filesystem and string handling.
"""

from .filesystem import copy_file, write_bytes_file, write_text_file
from .text import slugify, truncate_words

__all__ = [
    "copy_file",
    "write_bytes_file",
    "write_text_file",
    "slugify",
    "truncate_words",
]
