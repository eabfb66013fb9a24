"""
Spread and category content table.
"""

from .models import Category, ContentTable, Spread, load_content

__all__ = ["Category", "ContentTable", "Spread", "load_content"]
