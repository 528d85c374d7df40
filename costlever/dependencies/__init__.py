"""
Dependency rules and lever visibility.
"""

from .resolver import MAX_PASSES, ResolvedSelections, resolve
from .visibility import condition_holds, is_visible, visible_levers

__all__ = [
    "MAX_PASSES",
    "ResolvedSelections",
    "resolve",
    "condition_holds",
    "is_visible",
    "visible_levers",
]
