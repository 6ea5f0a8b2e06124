"""Greedy word wrap that keeps absolute offsets into the source text."""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from typing import Iterator, List, Sequence, Tuple

Row = Tuple[str, int, int]  # (rendered text, absolute start, absolute end)


@dataclass(frozen=True, slots=True)
class VisualLine:
    """One wrapped row.

    ``start``/``end`` are a half-open span into the buffer running from the
    first character of the first word to the last character of the last
    word. Runs of spaces inside that span are rendered as a single space,
    so ``end - start`` may exceed ``len(text)``.
    """

    line_no: int
    text: str
    start: int
    end: int


def wrap(text: str, columns: int) -> List[VisualLine]:
    """Wrap ``text`` at ``columns`` and number the rows from 1.

    Paragraphs (runs between ``\\n``) wrap independently while numbering
    continues across them. A paragraph with no words still yields one empty
    row at its first offset, so the result is never empty.
    """

    return list(_layout(str(text), max(1, int(columns))))


@lru_cache(maxsize=32)
def _layout(text: str, columns: int) -> Tuple[VisualLine, ...]:
    lines: List[VisualLine] = []
    offset = 0
    for paragraph in text.split("\n"):
        rows = _wrap_paragraph(paragraph, columns, offset) or [("", offset, offset)]
        for row_text, start, end in rows:
            lines.append(VisualLine(len(lines) + 1, row_text, start, end))
        offset += len(paragraph) + 1
    return tuple(lines)


def _words(paragraph: str) -> Iterator[Tuple[int, int]]:
    cursor = 0
    size = len(paragraph)
    while cursor < size:
        while cursor < size and paragraph[cursor] == " ":
            cursor += 1
        if cursor >= size:
            return
        end = paragraph.find(" ", cursor)
        if end == -1:
            end = size
        yield cursor, end
        cursor = end


def _wrap_paragraph(paragraph: str, columns: int, base: int) -> List[Row]:
    rows: List[Row] = []
    parts: List[str] = []
    width = 0
    line_start = line_end = 0

    for word_start, word_end in _words(paragraph):
        while True:
            size = word_end - word_start
            needed = size if not parts else width + 1 + size
            if needed <= columns:
                if not parts:
                    line_start = word_start
                parts.append(paragraph[word_start:word_end])
                width = needed
                line_end = word_end
                break
            if parts:
                rows.append((" ".join(parts), base + line_start, base + line_end))
                parts = []
                width = 0
                continue
            # Oversized word on an empty row: emit a hard cut and carry the rest.
            cut = word_start + columns
            rows.append((paragraph[word_start:cut], base + word_start, base + cut))
            word_start = cut

    if parts:
        rows.append((" ".join(parts), base + line_start, base + line_end))
    return rows


def head_listing(lines: Sequence[VisualLine], limit: int) -> str:
    """Render the first ``limit`` rows as ``"{line_no}| {text}"`` joined by newlines."""

    return "\n".join(f"{line.line_no}| {line.text}" for line in lines[: max(0, limit)])


__all__ = ["VisualLine", "head_listing", "wrap"]
