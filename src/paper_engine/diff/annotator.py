"""Highlight derivation and the escaped preview window for the latest edit."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, Optional, Sequence, Tuple

from paper_engine.layout import VisualLine
from paper_engine.runtime.config import PREVIEW_LEAD, PREVIEW_WINDOW

HIGHLIGHT_CLASS = "newLineFull"

_ESCAPES = {
    "&": "&amp;",
    "<": "&lt;",
    ">": "&gt;",
    '"': "&quot;",
    "'": "&#039;",
}


def escape_html(text: str) -> str:
    return "".join(_ESCAPES.get(char, char) for char in str(text))


@dataclass(frozen=True, slots=True)
class Annotation:
    """Preview window starting at ``start_line``.

    ``html_lines`` are already escaped and must be rendered verbatim.
    """

    start_line: int
    html_lines: Tuple[str, ...] = ()

    def as_dict(self) -> Dict[str, Any]:
        return {"start_line": self.start_line, "html_lines": list(self.html_lines)}


@dataclass(frozen=True, slots=True)
class DiffRecord:
    anchor_line: int
    annotation: Annotation
    highlight_lines: Tuple[int, ...] = ()
    removed_text: Optional[str] = None
    removed_lines: Optional[Tuple[str, ...]] = None

    def __post_init__(self) -> None:
        if self.removed_text is not None and self.removed_lines is not None:
            raise ValueError("removed_text and removed_lines are mutually exclusive")

    @property
    def is_ghost(self) -> bool:
        return self.removed_lines is not None

    def as_dict(self) -> Dict[str, Any]:
        return {
            "anchor_line": self.anchor_line,
            "removed_text": self.removed_text,
            "removed_lines": (
                list(self.removed_lines) if self.removed_lines is not None else None
            ),
            "highlight_lines": list(self.highlight_lines),
            "annotation": self.annotation.as_dict(),
        }


def highlight_lines(
    lines: Iterable[VisualLine], inserted_start: int, inserted_end: int
) -> Tuple[int, ...]:
    """Line numbers whose span overlaps ``[inserted_start, inserted_end)``.

    Both spans are half-open, so an empty insertion touches nothing.
    """

    low = max(0, int(inserted_start))
    high = max(low, int(inserted_end))
    if high == low:
        return ()
    return tuple(line.line_no for line in lines if line.start < high and line.end > low)


def build_annotation(
    lines: Sequence[VisualLine],
    anchor_line: int,
    highlights: Iterable[int] = (),
    *,
    window: int = PREVIEW_WINDOW,
    lead: int = PREVIEW_LEAD,
) -> Annotation:
    start_line = max(1, anchor_line - lead)
    marked = set(highlights)
    html_lines = []
    for line in lines[start_line - 1 : start_line - 1 + window]:
        if not line.text:
            html_lines.append("")
        elif line.line_no in marked:
            html_lines.append(
                f'<span class="{HIGHLIGHT_CLASS}">{escape_html(line.text)}</span>'
            )
        else:
            html_lines.append(escape_html(line.text))
    return Annotation(start_line=start_line, html_lines=tuple(html_lines))


def build_diff(
    lines: Sequence[VisualLine],
    anchor_line: int,
    *,
    highlights: Iterable[int] = (),
    removed_text: Optional[str] = None,
    removed_lines: Optional[Iterable[str]] = None,
    window: int = PREVIEW_WINDOW,
    lead: int = PREVIEW_LEAD,
) -> DiffRecord:
    """Assemble a ``DiffRecord`` against the post-edit layout ``lines``."""

    anchor = max(1, int(anchor_line))
    marked = tuple(highlights)
    return DiffRecord(
        anchor_line=anchor,
        annotation=build_annotation(lines, anchor, marked, window=window, lead=lead),
        highlight_lines=marked,
        removed_text=removed_text,
        removed_lines=tuple(removed_lines) if removed_lines is not None else None,
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
