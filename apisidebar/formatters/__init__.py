"""Output formatters for navigation trees."""

from .docusaurus_formatter import DocusaurusSidebarFormatter, format_docusaurus_sidebar
from .json_formatter import tree_to_json

__all__ = [
    "DocusaurusSidebarFormatter",
    "format_docusaurus_sidebar",
    "tree_to_json",
]
