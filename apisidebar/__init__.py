"""
apisidebar - API reference sidebar synthesis.

Turns an API description into a deterministic navigation tree for a
documentation site: operations grouped by tag in first-seen order,
colliding identifiers suffixed `_1`, `_2`, ..., deprecated operations
marked in their render hint.

Usage:
    from pathlib import Path
    from apisidebar import load_description, synthesize, GroupingRules
    from apisidebar.formatters import format_docusaurus_sidebar

    description = load_description(Path("static/files/api.yaml"))
    tree = synthesize(description.operations, GroupingRules(overview_id="api"))
    Path("docs/openapi/sidebar.ts").write_text(format_docusaurus_sidebar(tree))
"""

from .errors import SidebarError, MalformedOperationError, DescriptionLoadError
from .schemas import (
    HttpMethod,
    Operation,
    ApiDescription,
    GroupingRules,
    NodeKind,
    NavigationNode,
    NavigationTree,
)
from .synthesizer import SidebarSynthesizer, synthesize
from .loaders import load_description, parse_description

__all__ = [
    # Synthesis
    "SidebarSynthesizer",
    "synthesize",

    # Loading
    "load_description",
    "parse_description",

    # Schemas
    "HttpMethod",
    "Operation",
    "ApiDescription",
    "GroupingRules",
    "NodeKind",
    "NavigationNode",
    "NavigationTree",

    # Errors
    "SidebarError",
    "MalformedOperationError",
    "DescriptionLoadError",
]

__version__ = "0.1.0"
