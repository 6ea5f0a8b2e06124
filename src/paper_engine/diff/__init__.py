"""Diff annotation: overlap-based highlights and escaped preview windows."""

from .annotator import (
    HIGHLIGHT_CLASS,
    Annotation,
    DiffRecord,
    build_annotation,
    build_diff,
    escape_html,
    highlight_lines,
)

__all__ = [
    "Annotation",
    "DiffRecord",
    "HIGHLIGHT_CLASS",
    "build_annotation",
    "build_diff",
    "escape_html",
    "highlight_lines",
]
