"""
Pydantic schemas for apisidebar.

This module is the single source of truth for the data models shared by the
loader, the synthesizer, and the formatters:

- Operation: one documented API action, normalized from the API description
- ApiDescription: loaded description metadata plus its operations
- GroupingRules: explicit grouping configuration passed into synthesis
- NavigationNode: uniform tree element (root overview link, category, leaf)
- NavigationTree: ordered top-level nodes produced by one synthesis run
"""

from enum import Enum
from typing import List, Dict, Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


# ============================================================================
# INPUT SCHEMAS
# ============================================================================

class HttpMethod(str, Enum):
    """HTTP methods that carry a dedicated render hint."""
    GET = "get"
    POST = "post"
    PUT = "put"
    PATCH = "patch"
    DELETE = "delete"


KNOWN_METHODS = {method.value for method in HttpMethod}


class Operation(BaseModel):
    """One API action to document."""
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    operation_id: str = Field(default="", alias="operationId", description="Opaque identifier, e.g. 'listCases'")
    method: str = Field(default="", description="HTTP method, stored lower-case")
    label: str = Field(default="", description="Human-readable display name")
    tags: List[str] = Field(default_factory=list, description="Declared tag set, in declaration order")
    deprecated: bool = Field(default=False, description="Presentation-only deprecation flag")
    source_order: Optional[int] = Field(
        None,
        alias="sourceOrder",
        description="Position in the API description (defaults to input position)"
    )
    path: Optional[str] = Field(None, description="Request path, e.g. '/cases/{id}'")
    extensions: Dict[str, Any] = Field(default_factory=dict, description="x-* vendor extensions")

    @model_validator(mode='before')
    @classmethod
    def accept_single_tag(cls, data):
        """Allow `tag="cases"` as shorthand for `tags=["cases"]`."""
        if isinstance(data, dict) and "tag" in data:
            data = dict(data)
            tag = data.pop("tag")
            if "tags" not in data:
                data["tags"] = [tag] if tag else []
        return data

    @field_validator('operation_id', 'label', mode='before')
    @classmethod
    def none_to_empty(cls, v):
        return "" if v is None else v

    @field_validator('method', mode='before')
    @classmethod
    def normalize_method(cls, v):
        """Lower-case and strip the method; unknown values are kept as-is."""
        if v is None:
            return ""
        if isinstance(v, HttpMethod):
            return v.value
        return str(v).strip().lower()


class ApiDescription(BaseModel):
    """A loaded API description reduced to what synthesis needs."""
    title: str = Field(default="API", description="info.title of the description")
    version: Optional[str] = Field(None, description="info.version of the description")
    operations: List[Operation] = Field(default_factory=list, description="Operations in declaration order")


class GroupingRules(BaseModel):
    """
    Explicit grouping configuration for one synthesis run.

    Tagged categories always appear in first-seen order. The reserved
    untagged category is exempt: with `untagged_last` (the default) it is
    placed after every tagged category regardless of where its first
    operation appears; set `untagged_last=False` to keep it at its
    first-seen position.
    """
    model_config = ConfigDict(frozen=True)

    tag_field: str = Field(
        default="tags",
        description="Field supplying the tag: 'tags' (first declared tag) or an x-* extension name"
    )
    untagged_label: str = Field(default="UNTAGGED", description="Category name for untagged operations")
    untagged_last: bool = Field(
        default=True,
        description="Place the untagged category after all tagged categories"
    )
    overview_label: str = Field(default="Overview", description="Label of the root overview link")
    overview_id: Optional[str] = Field(
        None,
        description="Target of the root overview link; no overview node when None"
    )


# ============================================================================
# OUTPUT SCHEMAS
# ============================================================================

class NodeKind(str, Enum):
    ROOT = "root"
    CATEGORY = "category"
    LEAF = "leaf"


class NavigationNode(BaseModel):
    """Uniform navigation tree element."""
    model_config = ConfigDict(populate_by_name=True)

    kind: NodeKind
    label: str
    children: Optional[List["NavigationNode"]] = Field(None, description="Category items")
    target_id: Optional[str] = Field(None, alias="targetId", description="Unique lookup identifier")
    render_hint: Optional[str] = Field(None, alias="renderHint", description="e.g. 'api-method get'")
    operation_id: Optional[str] = Field(None, alias="operationId", description="operationId before collision suffixing")
    method: Optional[str] = Field(None, description="Normalized HTTP method")

    def iter_leaves(self):
        """Yield every leaf at or below this node, in order."""
        if self.kind == NodeKind.LEAF:
            yield self
        for child in self.children or []:
            yield from child.iter_leaves()

    def to_dict(self) -> Dict[str, Any]:
        """Renderer shape: camelCase keys, absent keys omitted."""
        data: Dict[str, Any] = {"kind": self.kind.value, "label": self.label}
        if self.children is not None:
            data["children"] = [child.to_dict() for child in self.children]
        if self.target_id is not None:
            data["targetId"] = self.target_id
        if self.render_hint is not None:
            data["renderHint"] = self.render_hint
        return data


NavigationNode.model_rebuild()


class NavigationTree(BaseModel):
    """Ordered top-level navigation nodes."""
    nodes: List[NavigationNode] = Field(default_factory=list)

    @property
    def categories(self) -> List[NavigationNode]:
        return [node for node in self.nodes if node.kind == NodeKind.CATEGORY]

    @property
    def overview(self) -> Optional[NavigationNode]:
        for node in self.nodes:
            if node.kind == NodeKind.ROOT:
                return node
        return None

    def leaves(self) -> List[NavigationNode]:
        return [leaf for node in self.nodes for leaf in node.iter_leaves()]

    def to_dict(self) -> List[Dict[str, Any]]:
        return [node.to_dict() for node in self.nodes]
