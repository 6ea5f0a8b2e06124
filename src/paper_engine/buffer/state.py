"""Mutable buffer state and the read-only snapshot handed to collaborators."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from paper_engine.diff import DiffRecord
from paper_engine.layout import VisualLine
from paper_engine.runtime.config import DEFAULT_COLUMNS


@dataclass(slots=True)
class BufferState:
    """The single source of truth: text, revision counter, wrap width, live diff."""

    text: str = ""
    revision: int = 0
    columns: int = DEFAULT_COLUMNS
    diff: Optional[DiffRecord] = None


@dataclass(frozen=True, slots=True)
class PaperState:
    revision: int
    columns: int
    full_text: str
    line_count: int
    head: str
    active_diff: Optional[DiffRecord]
    visual_lines: Optional[Tuple[VisualLine, ...]] = None

    def as_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "revision": self.revision,
            "columns": self.columns,
            "full_text": self.full_text,
            "line_count": self.line_count,
            "head": self.head,
            "active_diff": self.active_diff.as_dict() if self.active_diff else None,
        }
        if self.visual_lines is not None:
            payload["visual_lines"] = [
                {"line_no": line.line_no, "text": line.text}
                for line in self.visual_lines
            ]
        return payload


__all__ = ["BufferState", "PaperState"]
