"""
JSON formatter for navigation trees.

Emits the renderer-neutral node shape:
    {kind: root|category|leaf, label, children?, targetId?, renderHint?}
"""

import json

from apisidebar.schemas import NavigationTree


def tree_to_json(tree: NavigationTree, indent: int = 2) -> str:
    """
    Serialize a tree to JSON text.

    Key order is fixed by the schema, so unchanged trees serialize to
    byte-identical output.

    Args:
        tree: Synthesized navigation tree
        indent: JSON indentation level

    Returns:
        JSON string ending with a newline
    """
    return json.dumps(tree.to_dict(), indent=indent, ensure_ascii=False) + "\n"
