"""Apply structured edit steps (``{"op": ..., ...}``) to a paper."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable, Dict, Iterable, List, Mapping, Optional, Union

from paper_engine.runtime.telemetry import span

from . import edit, query
from .base import ActionResult, PaperBus, ReadResult, SearchResult

if TYPE_CHECKING:
    from paper_engine.buffer import Paper

StepOutput = Union[ActionResult, ReadResult, SearchResult]
StepHandler = Callable[["Paper", Mapping[str, Any]], StepOutput]


class StepValidationError(RuntimeError):
    """Raised when a step is not a mapping at all."""

    def __init__(self, message: str, *, step: object = None) -> None:
        super().__init__(message)
        self.step = step


def _field(step: Mapping[str, Any], *names: str, default: Any = None) -> Any:
    # Steps come from external planners in either snake_case or camelCase.
    for name in names:
        value = step.get(name)
        if value is not None:
            return value
    return default


def _step_search(paper: "Paper", step: Mapping[str, Any]) -> StepOutput:
    return query.search(
        paper, _field(step, "query", default=""), _field(step, "top_k", "topK")
    )


def _step_read(paper: "Paper", step: Mapping[str, Any]) -> StepOutput:
    start = _field(step, "start_line", "startLine", default=1)
    end = _field(step, "end_line", "endLine", default=start)
    return query.read(paper, start, end)


def _step_write_append(paper: "Paper", step: Mapping[str, Any]) -> StepOutput:
    ensure = _field(step, "ensure_new_paragraph", "ensureNewParagraph", default=True)
    return edit.write_append(
        paper, _field(step, "text", default=""), ensure_new_paragraph=bool(ensure)
    )


def _step_write_replace(paper: "Paper", step: Mapping[str, Any]) -> StepOutput:
    line = _field(step, "line", "anchor_line", "anchorLine", default=1)
    text = _field(step, "text", "new_text", "newText", default="")
    return edit.write_replace(paper, line, text)


def _step_clear_line(paper: "Paper", step: Mapping[str, Any]) -> StepOutput:
    return edit.clear_line(paper, _field(step, "line", default=1))


def _step_clear_range(paper: "Paper", step: Mapping[str, Any]) -> StepOutput:
    start = _field(step, "start_line", "startLine", default=1)
    end = _field(step, "end_line", "endLine", default=start)
    return edit.clear_range(paper, start, end)


def _step_clear_all(paper: "Paper", step: Mapping[str, Any]) -> StepOutput:
    del step
    return edit.clear_all(paper)


_STEP_HANDLERS: Dict[str, StepHandler] = {
    "search": _step_search,
    "read": _step_read,
    "write_append": _step_write_append,
    "write_replace": _step_write_replace,
    "clear_line": _step_clear_line,
    "clear_range": _step_clear_range,
    "clear_all": _step_clear_all,
}

SUPPORTED_OPS = tuple(_STEP_HANDLERS)


def apply_step(
    paper: "Paper",
    step: Mapping[str, Any],
    *,
    bus: Optional[PaperBus] = None,
    step_index: int = 1,
    total_steps: int = 1,
) -> StepOutput:
    """Run one step. Unknown ops come back as ``ok=False, reason="unknown_op"``."""

    if not isinstance(step, Mapping):
        raise StepValidationError("Step must be a mapping", step=step)

    op = str(step.get("op") or "")
    handler = _STEP_HANDLERS.get(op)
    with span(
        "paper::step",
        component="dispatch",
        metadata={"op": op or "?", "step_index": step_index},
    ) as handle:
        if handler is None:
            handle.add_metadata("unknown_op", op)
            result: StepOutput = ActionResult(
                op=op or "unknown", ok=False, revision=paper.revision, reason="unknown_op"
            )
        else:
            result = handler(paper, step)

    if bus is not None:
        bus.emit(
            "paper.applied",
            {
                "step_index": step_index,
                "total_steps": total_steps,
                "op": op,
                "output": result.as_dict(),
            },
        )
    return result


@dataclass(slots=True)
class JournalEntry:
    step_index: int
    op: str
    input: Dict[str, Any]
    output: Dict[str, Any]
    changed: bool
    revision: int
    before_head: str
    after_head: str


@dataclass(slots=True)
class StepJournal:
    """What a batch of steps did, suitable for summarising to a user."""

    steps_total: int = 0
    applied_count: int = 0
    items: List[JournalEntry] = field(default_factory=list)

    def record(self, entry: JournalEntry, *, ok: bool) -> None:
        self.items.append(entry)
        if ok:
            self.applied_count += 1

    def as_dict(self) -> Dict[str, Any]:
        return {
            "steps_total": self.steps_total,
            "applied_count": self.applied_count,
            "items": [
                {
                    "step_index": item.step_index,
                    "op": item.op,
                    "input": item.input,
                    "output": item.output,
                    "changed": item.changed,
                    "revision": item.revision,
                    "before_head": item.before_head,
                    "after_head": item.after_head,
                }
                for item in self.items
            ],
        }


def run_steps(
    paper: "Paper",
    steps: Iterable[Mapping[str, Any]],
    *,
    max_steps: Optional[int] = None,
    bus: Optional[PaperBus] = None,
) -> StepJournal:
    """Apply up to ``max_steps`` steps in order and journal each one.

    ``paper.state`` is emitted on ``bus`` once, after the last step.
    """

    limit = paper.config.max_steps if max_steps is None else max(0, int(max_steps))
    selected = list(steps)[:limit]
    journal = StepJournal(steps_total=len(selected))

    for index, step in enumerate(selected, start=1):
        before_head = paper.get_state(include_visual=False).head
        result = apply_step(
            paper, step, bus=bus, step_index=index, total_steps=len(selected)
        )
        after_head = paper.get_state(include_visual=False).head
        journal.record(
            JournalEntry(
                step_index=index,
                op=str(step.get("op") or ""),
                input={key: value for key, value in step.items() if key != "op"},
                output=result.as_dict(),
                changed=result.changed,
                revision=paper.revision,
                before_head=before_head,
                after_head=after_head,
            ),
            ok=result.ok,
        )

    if bus is not None:
        bus.emit("paper.state", paper.get_state().as_dict())
    return journal


__all__ = [
    "JournalEntry",
    "StepJournal",
    "StepValidationError",
    "SUPPORTED_OPS",
    "apply_step",
    "run_steps",
]
