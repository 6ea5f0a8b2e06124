"""Mutating actions addressed by visual line number."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Tuple

from paper_engine.diff import DiffRecord, build_diff, highlight_lines
from paper_engine.runtime import telemetry

from .base import ActionResult, coerce_line

if TYPE_CHECKING:
    from paper_engine.buffer import Paper, PaperTransaction

_WHITESPACE = re.compile(r"\s+")


def normalize_inline(text: Optional[str]) -> str:
    """Collapse whitespace runs (newlines included) to one space and trim."""

    return _WHITESPACE.sub(" ", str(text if text is not None else "")).strip()


@dataclass(frozen=True, slots=True)
class _Splice:
    anchor_line: int
    old_text: str
    replacement: str
    highlights: Tuple[int, ...]


def _splice_line(
    paper: "Paper", tx: "PaperTransaction", line: object, new_text: Optional[str]
) -> _Splice:
    before = paper.visual_lines()
    anchor = coerce_line(line, len(before))
    target = before[anchor - 1]
    replacement = normalize_inline(new_text)
    text = paper.state.text
    tx.stage(text[: target.start] + replacement + text[target.end :])
    inserted_end = target.start + len(replacement)
    return _Splice(
        anchor_line=anchor,
        old_text=target.text,
        replacement=replacement,
        highlights=highlight_lines(paper.visual_lines(), target.start, inserted_end),
    )


def _record_diff(paper: "Paper", anchor_line: int, **fields: Any) -> DiffRecord:
    record = build_diff(
        paper.visual_lines(),
        anchor_line,
        window=paper.config.preview_window,
        lead=paper.config.preview_lead,
        **fields,
    )
    paper.set_diff(record)
    return record


def _result(
    paper: "Paper",
    op: str,
    changed: bool,
    record: DiffRecord,
    details: Optional[Dict[str, Any]] = None,
) -> ActionResult:
    return ActionResult(
        op=op,
        changed=changed,
        revision=paper.revision,
        anchor_line=record.anchor_line,
        highlight_lines=record.highlight_lines,
        removed_text=record.removed_text,
        removed_lines=record.removed_lines,
        details=dict(details or {}),
    )


def write_replace(
    paper: "Paper", line: object, new_text: Optional[str], *, op: str = "write_replace"
) -> ActionResult:
    """Replace one visual line with ``new_text`` (whitespace-normalized).

    An empty replacement is a clear: the old line text is reported as a
    one-element ``removed_lines`` ghost instead of ``removed_text``.
    """

    with paper.transaction(op) as tx:
        splice = _splice_line(paper, tx, line, new_text)
        changed = tx.commit()
        if splice.replacement:
            record = _record_diff(
                paper,
                splice.anchor_line,
                highlights=splice.highlights,
                removed_text=splice.old_text,
            )
        else:
            record = _record_diff(
                paper,
                splice.anchor_line,
                highlights=splice.highlights,
                removed_lines=(splice.old_text,),
            )
    return _result(paper, op, changed, record)


def clear_line(paper: "Paper", line: object) -> ActionResult:
    result = write_replace(paper, line, "", op="clear_line")
    result.details["cleared_line"] = result.anchor_line
    return result


def write_append(
    paper: "Paper", text: Optional[str], *, ensure_new_paragraph: bool = True
) -> ActionResult:
    """Append ``text`` with only its ends trimmed.

    With ``ensure_new_paragraph`` a newline is inserted first unless the
    buffer is empty or already ends with one. The diff anchors on the last
    line of the layout as it was before the append.
    """

    addition = str(text if text is not None else "").strip()
    if not addition:
        telemetry.record_event(
            "paper.write_append_rejected",
            level="debug",
            data={"paper": paper.name, "reason": "empty_text"},
        )
        return ActionResult(
            op="write_append", ok=False, revision=paper.revision, reason="empty_text"
        )

    with paper.transaction("write_append") as tx:
        anchor = max(1, len(paper.visual_lines()))
        current = paper.state.text
        separator = ""
        if ensure_new_paragraph and current and not current.endswith("\n"):
            separator = "\n"
        inserted_start = len(current) + len(separator)
        tx.stage(current + separator + addition)
        changed = tx.commit()
        highlights = highlight_lines(
            paper.visual_lines(), inserted_start, inserted_start + len(addition)
        )
        record = _record_diff(paper, anchor, highlights=highlights)
    return _result(paper, "write_append", changed, record)


def clear_range(paper: "Paper", start_line: object, end_line: object) -> ActionResult:
    """Clear every visual line in ``[start_line, end_line]``.

    Lines are cleared bottom-up with a fresh layout per step: clearing a row
    can change how the rest of its paragraph wraps, so offsets from an
    earlier step are never reused. The whole range counts as one revision.
    """

    with paper.transaction("clear_range") as tx:
        count = len(paper.visual_lines())
        first = coerce_line(start_line, count)
        last = coerce_line(end_line, count, default=first)
        if last < first:
            first, last = last, first

        removed: List[str] = []
        applied: List[Dict[str, Any]] = []
        for line in range(last, first - 1, -1):
            splice = _splice_line(paper, tx, line, "")
            removed.insert(0, splice.old_text)
            applied.append({"line": splice.anchor_line, "removed_text": splice.old_text})

        changed = tx.commit()
        record = _record_diff(paper, first, removed_lines=removed)
    return _result(
        paper,
        "clear_range",
        changed,
        record,
        {
            "start_line": first,
            "end_line": last,
            "applied_count": len(applied),
            "applied": applied,
        },
    )


def clear_all(paper: "Paper") -> ActionResult:
    with paper.transaction("clear_all") as tx:
        removed = [line.text for line in paper.visual_lines()]
        tx.stage("")
        changed = tx.commit()
        record = _record_diff(paper, 1, removed_lines=removed)
    return _result(
        paper, "clear_all", changed, record, {"removed_lines_count": len(removed)}
    )


__all__ = [
    "clear_all",
    "clear_line",
    "clear_range",
    "normalize_inline",
    "write_append",
    "write_replace",
]
