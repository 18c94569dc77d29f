"""
OpenAPI loader - reduces an API description to normalized operations.

Reads OpenAPI 3 / Swagger 2 documents (YAML or JSON) and walks `paths` in
document order, producing one Operation per HTTP method entry. Only the
fields synthesis needs are extracted; the description is not validated.
"""

import json
from pathlib import Path
from typing import Any, Dict, List, Literal, Optional
import logging

import yaml

from apisidebar.errors import DescriptionLoadError
from apisidebar.schemas import ApiDescription, Operation

logger = logging.getLogger(__name__)

LabelSource = Literal["operation_id", "summary"]


class OpenAPILoader:
    """
    Load an OpenAPI description and normalize its operations.

    Path items are visited in document order and, within a path item, method
    keys in document order; non-method keys (parameters, summary, servers,
    $ref, x-*) are skipped. `sourceOrder` is the running index across the
    whole document.
    """

    # Operation keys of a path item object
    PATH_ITEM_METHODS = ('get', 'put', 'post', 'delete', 'options', 'head', 'patch', 'trace')

    def __init__(self, label_source: LabelSource = "operation_id"):
        """
        Initialize the loader.

        Args:
            label_source: "operation_id" to label leaves with the operationId,
                "summary" to prefer the summary (falls back to operationId)
        """
        if label_source not in ("operation_id", "summary"):
            raise ValueError(f"Invalid label source: {label_source!r}")
        self.label_source = label_source

    def load(self, path: Path) -> ApiDescription:
        """
        Read and parse a description file.

        Args:
            path: .yaml, .yml or .json file

        Returns:
            ApiDescription with operations in declaration order
        """
        path = Path(path)
        if not path.is_file():
            raise DescriptionLoadError(f"API description not found: {path}")

        logger.info(f"Loading API description from {path}")

        try:
            text = path.read_text(encoding="utf-8")
            if path.suffix.lower() == ".json":
                document = json.loads(text)
            else:
                # JSON is a YAML subset, so unknown suffixes go through YAML
                document = yaml.safe_load(text)
        except (OSError, UnicodeDecodeError, json.JSONDecodeError, yaml.YAMLError) as e:
            raise DescriptionLoadError(f"Could not parse {path}: {e}") from e

        return self.parse(document)

    def parse(self, document: Any) -> ApiDescription:
        """
        Normalize an already-parsed description document.

        Args:
            document: Parsed OpenAPI mapping

        Returns:
            ApiDescription with operations in declaration order
        """
        if not isinstance(document, dict):
            raise DescriptionLoadError("API description must be a mapping at the top level")

        paths = document.get("paths")
        if not isinstance(paths, dict):
            raise DescriptionLoadError("API description has no 'paths' mapping")

        info = document.get("info") or {}
        operations: List[Operation] = []

        for path_key, path_item in paths.items():
            if not isinstance(path_item, dict):
                logger.debug(f"Skipping non-mapping path item {path_key!r}")
                continue

            for method, raw in path_item.items():
                if method not in self.PATH_ITEM_METHODS or not isinstance(raw, dict):
                    continue
                operations.append(self._to_operation(str(path_key), method, raw, len(operations)))

        description = ApiDescription(
            title=str(info.get("title") or "API"),
            version=str(info["version"]) if info.get("version") is not None else None,
            operations=operations,
        )

        logger.info(f"Loaded {len(operations)} operations from '{description.title}'")
        return description

    def _to_operation(self, path_key: str, method: str, raw: Dict[str, Any], order: int) -> Operation:
        operation_id = raw.get("operationId") or self._fallback_operation_id(method, path_key)
        summary = raw.get("summary")
        summary = str(summary).strip() if summary is not None else ""

        if self.label_source == "summary" and summary:
            label = summary
        else:
            label = operation_id

        tags = raw.get("tags") or []
        if not isinstance(tags, list):
            tags = [tags]
        # null entries (`tags: [~]`) mean untagged
        tags = [str(tag) for tag in tags if tag is not None]

        return Operation(
            operation_id=str(operation_id),
            method=method,
            label=str(label),
            tags=tags,
            deprecated=bool(raw.get("deprecated", False)),
            source_order=order,
            path=path_key,
            extensions={key: value for key, value in raw.items() if str(key).startswith("x-")},
        )

    @staticmethod
    def _fallback_operation_id(method: str, path_key: str) -> str:
        """Derive an identifier from method and path, e.g. get /cases/{id} -> get_cases_id."""
        parts = [part.strip("{}") for part in path_key.split("/") if part]
        return "_".join([method] + parts)


def load_description(
    path: Path,
    label_source: LabelSource = "operation_id"
) -> ApiDescription:
    """
    Convenience function to load a description file.

    Args:
        path: Description file path
        label_source: "operation_id" or "summary"

    Returns:
        ApiDescription
    """
    return OpenAPILoader(label_source=label_source).load(path)


def parse_description(
    document: Dict[str, Any],
    label_source: LabelSource = "operation_id"
) -> ApiDescription:
    """Convenience function to normalize an already-parsed document."""
    return OpenAPILoader(label_source=label_source).parse(document)
