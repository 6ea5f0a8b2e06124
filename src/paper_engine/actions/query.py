"""Read-only actions: line ranges and substring search."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from paper_engine.layout import head_listing

from .base import ReadLine, ReadResult, SearchHit, SearchResult, coerce_line

if TYPE_CHECKING:
    from paper_engine.buffer import Paper


def read(paper: "Paper", start_line: object = 1, end_line: object = None) -> ReadResult:
    lines = paper.visual_lines()
    first = coerce_line(start_line, len(lines))
    last = coerce_line(end_line, len(lines), default=first)
    if last < first:
        first, last = last, first
    rows = tuple(
        ReadLine(line=line.line_no, text=line.text, start=line.start, end=line.end)
        for line in lines[first - 1 : last]
    )
    return ReadResult(
        revision=paper.revision, start_line=first, end_line=last, lines=rows
    )


def _limit(top_k: object, fallback: int) -> int:
    if top_k is None or isinstance(top_k, bool):
        return fallback
    try:
        return max(0, int(top_k))  # type: ignore[call-overload]
    except (TypeError, ValueError, OverflowError):
        return fallback


def search(
    paper: "Paper", query: Optional[str] = "", top_k: Optional[int] = None
) -> SearchResult:
    """Case-insensitive substring search over rendered line text.

    An empty query returns the head listing instead of hits.
    """

    lines = paper.visual_lines()
    needle = str(query if query is not None else "").strip().lower()
    if not needle:
        return SearchResult(
            kind="head",
            revision=paper.revision,
            line_count=len(lines),
            head=head_listing(lines, paper.config.head_lines),
        )

    limit = _limit(top_k, paper.config.search_top_k)
    hits = []
    for line in lines:
        if len(hits) >= limit:
            break
        if needle in line.text.lower():
            hits.append(SearchHit(line=line.line_no, text=line.text))
    return SearchResult(
        kind="hits",
        revision=paper.revision,
        line_count=len(lines),
        query=needle,
        hits=tuple(hits),
    )


__all__ = ["read", "search"]
