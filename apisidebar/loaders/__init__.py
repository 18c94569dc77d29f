"""API description loaders."""

from .openapi_loader import OpenAPILoader, load_description, parse_description

__all__ = [
    "OpenAPILoader",
    "load_description",
    "parse_description",
]
