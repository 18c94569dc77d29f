"""
Sidebar Synthesizer - API operations to navigation tree.

Groups operations by tag, resolves identifier collisions, and orders
categories and items deterministically. Synthesis is a pure function of
(operations, rules): every call builds its own tree and its own collision
state, never mutates the input, and performs no I/O besides logging.

Ordering:
- Categories appear in the order their tag is first seen (by sourceOrder),
  not alphabetically. The untagged category goes last unless
  GroupingRules.untagged_last is False.
- Items keep sourceOrder relative order within their category.

Collisions:
- The first operation keeps its identifier and label; each later operation
  whose slug or label is already taken gets `_1`, `_2`, ... on both,
  counted across the whole pass, not per category.
"""

from collections import Counter
from typing import Iterable, List, Dict, Optional, Sequence, Set, Tuple
import logging

from apisidebar.errors import MalformedOperationError
from apisidebar.schemas import (
    GroupingRules,
    KNOWN_METHODS,
    NavigationNode,
    NavigationTree,
    NodeKind,
    Operation,
)
from apisidebar.utils import kebab_case, with_suffix

logger = logging.getLogger(__name__)

METHOD_HINT_PREFIX = "api-method"
DEPRECATED_HINT = "menu__list-item--deprecated"


def render_hint(method: str, deprecated: bool = False) -> str:
    """
    Build the leaf rendering hint.

    Known methods yield "api-method <method>", anything else the neutral
    "api-method". Deprecation prepends the deprecated marker.
    """
    hint = f"{METHOD_HINT_PREFIX} {method}" if method in KNOWN_METHODS else METHOD_HINT_PREFIX
    if deprecated:
        hint = f"{DEPRECATED_HINT} {hint}"
    return hint


class _CollisionResolver:
    """Hands out globally unique (identifier, label) pairs for one synthesis pass."""

    def __init__(self):
        self._next_by_slug: Counter = Counter()
        self._next_by_label: Counter = Counter()
        self._used_slugs: Set[str] = set()
        self._used_labels: Set[str] = set()

    def reserve(self, identifier: str) -> None:
        """Mark an identifier taken without handing it to a leaf (the overview link)."""
        self._used_slugs.add(kebab_case(identifier))

    def claim(self, identifier: str, label: str) -> Tuple[str, str, int]:
        """
        Reserve a unique pair derived from (identifier, label).

        Returns:
            Tuple of (target_id, label, suffix) where suffix 0 means unchanged
        """
        base_slug = kebab_case(identifier)
        suffix = max(self._next_by_slug[base_slug], self._next_by_label[label])

        while True:
            candidate_id = with_suffix(identifier, suffix)
            candidate_label = with_suffix(label, suffix)
            if (kebab_case(candidate_id) not in self._used_slugs
                    and candidate_label not in self._used_labels):
                break
            suffix += 1

        self._used_slugs.add(kebab_case(candidate_id))
        self._used_labels.add(candidate_label)
        self._next_by_slug[base_slug] = suffix + 1
        self._next_by_label[label] = suffix + 1
        return candidate_id, candidate_label, suffix


class SidebarSynthesizer:
    """
    Build a NavigationTree from a normalized operation list.

    The synthesizer holds only its GroupingRules; all per-run state lives
    inside `synthesize`, so one instance may be shared across threads.
    """

    def __init__(self, rules: Optional[GroupingRules] = None):
        """
        Initialize the synthesizer.

        Args:
            rules: Grouping configuration (default: GroupingRules())
        """
        self.rules = rules or GroupingRules()

    def synthesize(self, operations: Iterable[Operation]) -> NavigationTree:
        """
        Run one full synthesis pass.

        Args:
            operations: Operations in declaration order

        Returns:
            Complete NavigationTree

        Raises:
            MalformedOperationError: If any operation has no identity or an
                unreadable tag; nothing is returned in that case
        """
        ordered = self._order(list(operations))

        categories: Dict[Optional[str], List[NavigationNode]] = {}
        category_order: List[Optional[str]] = []
        resolver = _CollisionResolver()
        if self.rules.overview_id is not None:
            resolver.reserve(self.rules.overview_id)
        renamed = 0

        for position, operation in ordered:
            identifier, label = self._identity(operation, position)
            tag = self._extract_tag(operation, position)

            target_id, display_label, suffix = resolver.claim(identifier, label)
            if suffix:
                renamed += 1
                logger.debug(f"Collision on {identifier!r}: renamed to {target_id!r}")

            if tag not in categories:
                categories[tag] = []
                category_order.append(tag)

            categories[tag].append(NavigationNode(
                kind=NodeKind.LEAF,
                label=display_label,
                target_id=target_id,
                render_hint=render_hint(operation.method, operation.deprecated),
                operation_id=operation.operation_id or None,
                method=operation.method or None,
            ))

        if self.rules.untagged_last and None in categories:
            category_order.remove(None)
            category_order.append(None)

        nodes: List[NavigationNode] = []
        if self.rules.overview_id is not None:
            nodes.append(NavigationNode(
                kind=NodeKind.ROOT,
                label=self.rules.overview_label,
                target_id=self.rules.overview_id,
            ))

        for tag in category_order:
            nodes.append(NavigationNode(
                kind=NodeKind.CATEGORY,
                label=self.rules.untagged_label if tag is None else tag,
                children=categories[tag],
            ))

        logger.info(
            f"Synthesized {len(ordered)} operations into "
            f"{len(category_order)} categories ({renamed} renamed)"
        )

        return NavigationTree(nodes=nodes)

    def _order(self, operations: List[Operation]) -> List[Tuple[int, Operation]]:
        """Sort by sourceOrder (input position when absent); ties keep input order."""
        indexed = list(enumerate(operations))
        return sorted(
            indexed,
            key=lambda pair: (
                pair[1].source_order if pair[1].source_order is not None else pair[0],
                pair[0],
            ),
        )

    def _identity(self, operation: Operation, position: int) -> Tuple[str, str]:
        """Substitute a missing identifier or label from the other one."""
        identifier = operation.operation_id.strip()
        label = operation.label.strip()

        if not identifier and not label:
            raise MalformedOperationError(
                "operation has neither an operationId nor a label",
                position=position,
            )

        return identifier or label, label or identifier

    def _extract_tag(self, operation: Operation, position: int) -> Optional[str]:
        """
        Read the grouping tag using the configured tag field.

        Returns:
            Tag string, or None for the untagged category
        """
        field = self.rules.tag_field

        if field == "tags":
            value = operation.tags
        elif field.startswith("x-"):
            value = operation.extensions.get(field)
        else:
            raise MalformedOperationError(
                f"tag field {field!r} is neither 'tags' nor an x-* extension",
                position=position,
                operation_id=operation.operation_id,
            )

        if value is None:
            return None

        if isinstance(value, str):
            tag = value
        elif isinstance(value, (list, tuple)) and all(isinstance(item, str) for item in value):
            tag = value[0] if value else ""
        else:
            raise MalformedOperationError(
                f"tag field {field!r} holds {type(value).__name__}, expected a string or list of strings",
                position=position,
                operation_id=operation.operation_id,
            )

        tag = tag.strip()
        if not tag:
            logger.debug(f"Operation #{position} has no tag, routing to {self.rules.untagged_label!r}")
            return None
        return tag


def synthesize(
    operations: Sequence[Operation],
    rules: Optional[GroupingRules] = None
) -> NavigationTree:
    """
    Convenience function for one synthesis pass.

    Args:
        operations: Operations in declaration order
        rules: Grouping configuration (default: GroupingRules())

    Returns:
        Complete NavigationTree
    """
    return SidebarSynthesizer(rules).synthesize(operations)
