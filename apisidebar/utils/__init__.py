"""
Utility functions for apisidebar.
"""

from .naming import (
    kebab_case,
    split_words,
    with_suffix
)

__all__ = [
    'kebab_case',
    'split_words',
    'with_suffix'
]
