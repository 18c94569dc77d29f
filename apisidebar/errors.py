"""Exceptions raised by apisidebar."""

from typing import Optional


class SidebarError(Exception):
    """Base class for all apisidebar errors."""


class MalformedOperationError(SidebarError, ValueError):
    """An operation cannot be placed in the navigation tree.

    Raised for operations with neither an identifier nor a label, and for
    operations whose shape the configured tag-extraction strategy cannot read.
    Synthesis aborts on the first one; no partial tree is produced.
    """

    def __init__(self, reason: str, position: int, operation_id: Optional[str] = None):
        self.reason = reason
        self.position = position
        self.operation_id = operation_id or None
        where = f"operation #{position}"
        if self.operation_id:
            where += f" ({self.operation_id!r})"
        super().__init__(f"Malformed {where}: {reason}")


class DescriptionLoadError(SidebarError):
    """The API description could not be read or parsed."""
