"""Navigation tree synthesis."""

from .sidebar import (
    SidebarSynthesizer,
    synthesize,
    render_hint,
    DEPRECATED_HINT,
    METHOD_HINT_PREFIX,
)

__all__ = [
    "SidebarSynthesizer",
    "synthesize",
    "render_hint",
    "DEPRECATED_HINT",
    "METHOD_HINT_PREFIX",
]
