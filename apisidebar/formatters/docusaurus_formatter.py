"""
Docusaurus sidebar formatter.

Serializes a NavigationTree to a `sidebar.ts` module in the shape the
docusaurus-plugin-openapi-docs generator writes:

    import type { SidebarsConfig } from "@docusaurus/plugin-content-docs";

    const sidebar: SidebarsConfig = {
      apisidebar: [
        {
          type: "doc",
          id: "openapi/my-api",
        },
        {
          type: "category",
          label: "cases",
          items: [ ... ],
        },
      ],
    };

    export default sidebar.apisidebar;

Doc ids are `<doc_prefix>/<kebab-case target id>`.
"""

import json
from typing import Any, Dict, List
import logging

from apisidebar.schemas import NavigationNode, NavigationTree, NodeKind
from apisidebar.utils import kebab_case

logger = logging.getLogger(__name__)

INDENT = "  "


class DocusaurusSidebarFormatter:
    """Render a NavigationTree as a Docusaurus TypeScript sidebar module."""

    def __init__(self, doc_prefix: str = "openapi", sidebar_name: str = "apisidebar"):
        """
        Initialize the formatter.

        Args:
            doc_prefix: Docs folder the generated pages live in
            sidebar_name: Key of the sidebar inside the SidebarsConfig object
        """
        self.doc_prefix = doc_prefix.strip("/")
        self.sidebar_name = sidebar_name

    def doc_id(self, target_id: str) -> str:
        slug = kebab_case(target_id)
        return f"{self.doc_prefix}/{slug}" if self.doc_prefix else slug

    def to_items(self, tree: NavigationTree) -> List[Dict[str, Any]]:
        """Convert the tree to Docusaurus sidebar item dictionaries."""
        return [self._node_to_item(node) for node in tree.nodes]

    def format(self, tree: NavigationTree) -> str:
        """
        Render the complete sidebar.ts source.

        Returns:
            TypeScript module text ending with a newline
        """
        lines = [
            'import type { SidebarsConfig } from "@docusaurus/plugin-content-docs";',
            "",
            "const sidebar: SidebarsConfig = {",
            f"{INDENT}{self.sidebar_name}: [",
        ]
        for item in self.to_items(tree):
            lines.extend(self._render_value(item, depth=2, trailing=","))
        lines.append(f"{INDENT}],")
        lines.append("};")
        lines.append("")
        lines.append(f"export default sidebar.{self.sidebar_name};")

        logger.debug(f"Rendered sidebar '{self.sidebar_name}' with {len(tree.nodes)} top-level items")
        return "\n".join(lines) + "\n"

    def _node_to_item(self, node: NavigationNode) -> Dict[str, Any]:
        if node.kind == NodeKind.ROOT:
            return {"type": "doc", "id": self.doc_id(node.target_id)}

        if node.kind == NodeKind.CATEGORY:
            return {
                "type": "category",
                "label": node.label,
                "items": [self._node_to_item(child) for child in node.children or []],
            }

        return {
            "type": "doc",
            "id": self.doc_id(node.target_id),
            "label": node.label,
            "className": node.render_hint,
        }

    def _render_value(self, value: Any, depth: int, trailing: str = "") -> List[str]:
        """Render a dict/list/scalar as TypeScript object-literal lines."""
        pad = INDENT * depth

        if isinstance(value, dict):
            lines = [f"{pad}{{"]
            for key, inner in value.items():
                if isinstance(inner, (dict, list)):
                    body = self._render_value(inner, depth + 1, trailing=",")
                    lines.append(f"{pad}{INDENT}{key}: {body[0].lstrip()}")
                    lines.extend(body[1:])
                else:
                    lines.append(f"{pad}{INDENT}{key}: {json.dumps(inner, ensure_ascii=False)},")
            lines.append(f"{pad}}}{trailing}")
            return lines

        if isinstance(value, list):
            lines = [f"{pad}["]
            for inner in value:
                lines.extend(self._render_value(inner, depth + 1, trailing=","))
            lines.append(f"{pad}]{trailing}")
            return lines

        return [f"{pad}{json.dumps(value, ensure_ascii=False)}{trailing}"]


def format_docusaurus_sidebar(
    tree: NavigationTree,
    doc_prefix: str = "openapi",
    sidebar_name: str = "apisidebar"
) -> str:
    """
    Convenience function to render sidebar.ts source.

    Args:
        tree: Synthesized navigation tree
        doc_prefix: Docs folder of the generated pages
        sidebar_name: SidebarsConfig key

    Returns:
        TypeScript module text
    """
    return DocusaurusSidebarFormatter(doc_prefix=doc_prefix, sidebar_name=sidebar_name).format(tree)
