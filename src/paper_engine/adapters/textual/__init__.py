"""Textual adapter: UI hooks controller and the demo app."""

from .controller import (
    PaperView,
    TextualPaperAdapter,
    TextualUIHooks,
    ViewRow,
    build_view,
    parse_command,
)

__all__ = [
    "PaperView",
    "TextualPaperAdapter",
    "TextualUIHooks",
    "ViewRow",
    "build_view",
    "parse_command",
]
