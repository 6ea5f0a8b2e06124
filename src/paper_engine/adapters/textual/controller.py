"""Adapter that turns paper state and bus events into UI callbacks."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Tuple

from paper_engine.actions import PaperBus, StepJournal, apply_step, run_steps
from paper_engine.buffer import Paper


def _noop(*_args, **_kwargs) -> None:  # pragma: no cover - default hook
    return None


@dataclass(frozen=True, slots=True)
class ViewRow:
    """One rendered row; ghost rows carry no line number."""

    line_no: Optional[int]
    text: str
    kind: str = "plain"  # plain | new | ghost


@dataclass(frozen=True, slots=True)
class PaperView:
    revision: int
    columns: int
    rows: Tuple[ViewRow, ...]


def build_view(paper: Paper) -> PaperView:
    """Merge visual lines with the active diff.

    Highlighted lines become ``new`` rows; removed lines are inserted as
    ``ghost`` rows just above the diff's anchor line.
    """

    diff = paper.diff
    highlighted = set(diff.highlight_lines) if diff else set()
    ghosts = list(diff.removed_lines or ()) if diff else []
    anchor = diff.anchor_line if diff else 0

    rows: List[ViewRow] = []
    for line in paper.visual_lines():
        if ghosts and line.line_no == anchor:
            rows.extend(ViewRow(None, text, "ghost") for text in ghosts)
            ghosts = []
        kind = "new" if line.line_no in highlighted else "plain"
        rows.append(ViewRow(line.line_no, line.text, kind))
    # Anchor past the end (e.g. the tail was cleared away).
    rows.extend(ViewRow(None, text, "ghost") for text in ghosts)
    return PaperView(revision=paper.revision, columns=paper.columns, rows=tuple(rows))


@dataclass(slots=True)
class TextualUIHooks:
    """Callbacks invoked by the adapter to update Textual widgets."""

    update_paper: Callable[[PaperView], None]
    update_status: Callable[[str], None] = _noop
    handle_event: Callable[[str, object | None], None] = _noop
    log: Callable[[str], None] = _noop


def _split_range(args: List[str]) -> Tuple[str, str]:
    start = args[0] if args else "1"
    end = args[1] if len(args) > 1 else start
    return start, end


def parse_command(text: str) -> Optional[Dict[str, Any]]:
    """Translate a typed command line into a step mapping.

    Supported forms::

        append <text>          replace <line> <text>
        clear <line> [<end>]   clear all
        read <start> [<end>]   search [<query>]

    Returns ``None`` for an empty or unrecognised command.
    """

    parts = text.strip().split(" ", 1)
    verb = parts[0].lower()
    rest = parts[1].strip() if len(parts) > 1 else ""
    args = rest.split()

    if verb == "append":
        return {"op": "write_append", "text": rest}
    if verb == "replace":
        line, _, new_text = rest.partition(" ")
        return {"op": "write_replace", "line": line or "1", "text": new_text}
    if verb == "clear":
        if args[:1] == ["all"]:
            return {"op": "clear_all"}
        if len(args) > 1:
            start, end = _split_range(args)
            return {"op": "clear_range", "start_line": start, "end_line": end}
        return {"op": "clear_line", "line": args[0] if args else "1"}
    if verb == "read":
        start, end = _split_range(args)
        return {"op": "read", "start_line": start, "end_line": end}
    if verb == "search":
        return {"op": "search", "query": rest}
    return None


class TextualPaperAdapter:
    """Bridges a ``Paper`` and its bus to a Textual-friendly surface."""

    def __init__(
        self, paper: Paper, hooks: TextualUIHooks, *, bus: Optional[PaperBus] = None
    ) -> None:
        self.paper = paper
        self.hooks = hooks
        self.bus = bus or PaperBus()
        self._subscribe_events()
        self._refresh_paper()

    def submit_command(self, text: str) -> Optional[object]:
        """Run one typed command; returns the step output, if any."""

        self._log("command ->", text=text)
        stripped = text.strip()
        verb, _, rest = stripped.partition(" ")
        if verb == "seed":
            self.paper.seed(rest.replace("\\n", "\n"))
            self._after("seeded")
            return None
        if verb == "cols":
            accepted = self.paper.set_columns(rest.strip())
            self._after(f"columns={self.paper.columns}" if accepted else "columns_rejected")
            return None
        if verb == "nodiff":
            self.paper.clear_diff()
            self._after("diff_cleared")
            return None

        step = parse_command(stripped)
        if step is None:
            self._after(f"unknown_command:{verb}" if verb else "command_empty")
            return None
        result = apply_step(self.paper, step, bus=self.bus)
        status = result.op if result.ok else f"{result.op}:{getattr(result, 'reason', '')}"
        self._after(status)
        return result

    def apply_steps(self, steps: Iterable[Mapping[str, Any]]) -> StepJournal:
        journal = run_steps(self.paper, steps, bus=self.bus)
        self._after(f"applied {journal.applied_count}/{journal.steps_total}")
        return journal

    def _subscribe_events(self) -> None:
        for event in ("paper.applied", "paper.state"):
            self.bus.subscribe(
                event, lambda payload, name=event: self._handle_event(name, payload)
            )

    def _handle_event(self, name: str, payload: object | None) -> None:
        self._log("event ->", event=name)
        self.hooks.handle_event(name, payload)

    def _after(self, status: str) -> None:
        self._refresh_paper()
        self.hooks.update_status(status)

    def _refresh_paper(self) -> None:
        self.hooks.update_paper(build_view(self.paper))

    def _log(self, prefix: str, **fields: object) -> None:
        parts = [prefix, f"paper={self.paper.name!r}", f"revision={self.paper.revision}"]
        parts.extend(f"{key}={value!r}" for key, value in fields.items())
        self.hooks.log(" ".join(parts))


__all__ = [
    "PaperView",
    "TextualPaperAdapter",
    "TextualUIHooks",
    "ViewRow",
    "build_view",
    "parse_command",
]
