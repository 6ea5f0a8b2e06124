"""Method-style access to the actions, bound to one ``Paper``."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from . import edit, query
from .base import ActionResult, ReadResult, SearchResult

if TYPE_CHECKING:
    from paper_engine.buffer import Paper


class PaperActions:
    def __init__(self, paper: "Paper") -> None:
        self.paper = paper

    def search(self, query_text: Optional[str] = "", top_k: Optional[int] = None) -> SearchResult:
        return query.search(self.paper, query_text, top_k)

    def read(self, start_line: object = 1, end_line: object = None) -> ReadResult:
        return query.read(self.paper, start_line, end_line)

    def write_replace(self, line: object, new_text: Optional[str]) -> ActionResult:
        return edit.write_replace(self.paper, line, new_text)

    def write_append(
        self, text: Optional[str], *, ensure_new_paragraph: bool = True
    ) -> ActionResult:
        return edit.write_append(
            self.paper, text, ensure_new_paragraph=ensure_new_paragraph
        )

    def clear_line(self, line: object) -> ActionResult:
        return edit.clear_line(self.paper, line)

    def clear_range(self, start_line: object, end_line: object) -> ActionResult:
        return edit.clear_range(self.paper, start_line, end_line)

    def clear_all(self) -> ActionResult:
        return edit.clear_all(self.paper)


__all__ = ["PaperActions"]
