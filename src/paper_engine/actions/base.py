"""Result types, line coercion and the event bus shared by all actions."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional, Tuple


def coerce_line(value: object, count: int, default: int = 1) -> int:
    """Clamp a caller-supplied line number into ``[1, count]``.

    ``None``, booleans, NaN and anything that does not parse as a number
    fall back to ``default``; infinities pin to the nearest end.
    """

    upper = max(1, count)
    number: float
    if value is None or isinstance(value, bool):
        number = float(default)
    else:
        try:
            number = float(value)  # type: ignore[arg-type]
        except OverflowError:
            # Integers past float range pin like infinities.
            return upper if value > 0 else 1  # type: ignore[operator]
        except (TypeError, ValueError):
            number = float(default)
    if math.isnan(number):
        number = float(default)
    if math.isinf(number):
        return upper if number > 0 else 1
    return max(1, min(int(number), upper))


@dataclass(slots=True)
class ActionResult:
    """Outcome of a mutating action."""

    op: str
    ok: bool = True
    changed: bool = False
    revision: int = 0
    anchor_line: Optional[int] = None
    highlight_lines: Tuple[int, ...] = ()
    removed_text: Optional[str] = None
    removed_lines: Optional[Tuple[str, ...]] = None
    reason: Optional[str] = None
    details: Dict[str, Any] = field(default_factory=dict)

    def as_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "op": self.op,
            "ok": self.ok,
            "changed": self.changed,
            "revision": self.revision,
        }
        if self.reason is not None:
            payload["reason"] = self.reason
        if self.ok:
            payload.update(
                anchor_line=self.anchor_line,
                highlight_lines=list(self.highlight_lines),
                removed_text=self.removed_text,
                removed_lines=(
                    list(self.removed_lines) if self.removed_lines is not None else None
                ),
            )
        payload.update(self.details)
        return payload


@dataclass(frozen=True, slots=True)
class ReadLine:
    line: int
    text: str
    start: int
    end: int


@dataclass(slots=True)
class ReadResult:
    revision: int
    start_line: int
    end_line: int
    lines: Tuple[ReadLine, ...]
    op: str = "read"
    ok: bool = True
    changed: bool = False

    def as_dict(self) -> Dict[str, Any]:
        return {
            "op": self.op,
            "ok": self.ok,
            "changed": self.changed,
            "revision": self.revision,
            "start_line": self.start_line,
            "end_line": self.end_line,
            "lines": [
                {"line": row.line, "text": row.text, "start": row.start, "end": row.end}
                for row in self.lines
            ],
        }


@dataclass(frozen=True, slots=True)
class SearchHit:
    line: int
    text: str


@dataclass(slots=True)
class SearchResult:
    """``kind`` is ``"head"`` for an empty query, ``"hits"`` otherwise."""

    kind: str
    revision: int
    line_count: int
    query: str = ""
    head: str = ""
    hits: Tuple[SearchHit, ...] = ()
    op: str = "search"
    ok: bool = True
    changed: bool = False

    def as_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "op": self.op,
            "ok": self.ok,
            "changed": self.changed,
            "kind": self.kind,
            "revision": self.revision,
            "line_count": self.line_count,
        }
        if self.kind == "head":
            payload["head"] = self.head
        else:
            payload["query"] = self.query
            payload["hits"] = [{"line": hit.line, "text": hit.text} for hit in self.hits]
        return payload


class PaperBus:
    """Minimal publish/subscribe channel for ``paper.*`` events."""

    def __init__(self) -> None:
        self._subscribers: Dict[str, list[Callable[[object], None]]] = {}

    def subscribe(self, event: str, callback: Callable[[object], None]) -> None:
        self._subscribers.setdefault(event, []).append(callback)

    def emit(self, event: str, payload: object | None = None) -> None:
        for callback in list(self._subscribers.get(event, [])):
            callback(payload)


__all__ = [
    "ActionResult",
    "PaperBus",
    "ReadLine",
    "ReadResult",
    "SearchHit",
    "SearchResult",
    "coerce_line",
]
