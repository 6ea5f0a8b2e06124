"""``Paper`` façade owning one buffer, its layout and the active diff."""

from __future__ import annotations

from contextlib import AbstractContextManager
from typing import ContextManager, List, Optional

from paper_engine.actions.namespace import PaperActions
from paper_engine.diff import DiffRecord
from paper_engine.layout import VisualLine, head_listing, wrap
from paper_engine.runtime import telemetry
from paper_engine.runtime.config import EngineConfig, clamp_columns, load_config

from .state import BufferState, PaperState


class Paper:
    """One independent document.

    Visual lines are never cached on the instance; every read wraps the
    current text again, so line numbers from before a mutation must not be
    reused after it.
    """

    def __init__(
        self,
        *,
        columns: Optional[int] = None,
        name: str = "paper",
        config: Optional[EngineConfig] = None,
    ) -> None:
        self.name = name
        self.config = config or load_config()
        width = self.config.columns
        if columns is not None:
            width = clamp_columns(columns, width)
        self.state = BufferState(columns=width)

    @property
    def actions(self) -> PaperActions:
        return PaperActions(self)

    @property
    def text(self) -> str:
        return self.state.text

    @property
    def revision(self) -> int:
        return self.state.revision

    @property
    def columns(self) -> int:
        return self.state.columns

    @property
    def diff(self) -> Optional[DiffRecord]:
        return self.state.diff

    def visual_lines(self) -> List[VisualLine]:
        return wrap(self.state.text, self.state.columns)

    def transaction(self, label: str) -> "PaperTransaction":
        return PaperTransaction(self, label)

    def set_diff(self, record: Optional[DiffRecord]) -> None:
        self.state.diff = record

    def clear_diff(self) -> None:
        self.state.diff = None

    def seed(self, text: str) -> None:
        """Replace the whole buffer; always advances the revision."""

        self._reset(str(text if text is not None else ""), label="seed")

    def clear_buffer(self) -> None:
        self._reset("", label="clear_buffer")

    def set_columns(self, columns: object) -> bool:
        """Apply a new wrap width; out-of-range values are ignored.

        Returns ``True`` when the width was accepted.
        """

        accepted = clamp_columns(columns, -1)
        if accepted < 0:
            telemetry.record_event(
                "paper.columns_rejected",
                level="debug",
                data={"paper": self.name, "requested": columns},
            )
            return False
        self.state.columns = accepted
        return True

    def get_state(self, *, include_visual: bool = True) -> PaperState:
        lines = self.visual_lines()
        return PaperState(
            revision=self.state.revision,
            columns=self.state.columns,
            full_text=self.state.text,
            line_count=len(lines),
            head=head_listing(lines, self.config.head_lines),
            active_diff=self.state.diff,
            visual_lines=tuple(lines) if include_visual else None,
        )

    def _reset(self, text: str, *, label: str) -> None:
        self.state.text = text
        self.state.revision += 1
        self.state.diff = None
        telemetry.record_event(
            f"paper.{label}",
            data={
                "paper": self.name,
                "revision": self.state.revision,
                "length": len(text),
            },
        )


class PaperTransaction(AbstractContextManager["PaperTransaction"]):
    """Groups the splices of one action under a single revision step.

    ``stage`` writes text straight into the buffer so later layout reads in
    the same action see it. ``commit`` advances the revision once if the
    text differs from what it was on entry. Leaving the block with an
    exception restores the entry text.
    """

    def __init__(self, paper: Paper, label: str) -> None:
        self.paper = paper
        self.label = label
        self.before_text = paper.state.text
        self._committed = False
        self._span_cm: Optional[ContextManager[telemetry.SpanHandle]] = None
        self._handle: Optional[telemetry.SpanHandle] = None

    def __enter__(self) -> "PaperTransaction":
        self.before_text = self.paper.state.text
        self._span_cm = telemetry.span(
            name=f"paper::{self.label}",
            component="paper",
            metadata={"paper": self.paper.name},
        )
        self._handle = self._span_cm.__enter__()
        return self

    @property
    def changed(self) -> bool:
        return self.paper.state.text != self.before_text

    def stage(self, text: str) -> None:
        self.paper.state.text = text

    def commit(self) -> bool:
        if self._committed:
            return self.changed
        self._committed = True
        changed = self.changed
        if changed:
            self.paper.state.revision += 1
        if self._handle is not None:
            self._handle.add_metadata("changed", changed)
            self._handle.add_metadata("revision", self.paper.state.revision)
        telemetry.record_event(
            f"paper.{self.label}",
            data={
                "paper": self.paper.name,
                "changed": changed,
                "revision": self.paper.state.revision,
            },
        )
        return changed

    def __exit__(self, exc_type, exc, tb) -> bool:
        if exc_type is not None and not self._committed:
            self.paper.state.text = self.before_text
        elif exc_type is None:
            self.commit()
        if self._span_cm is not None:
            self._span_cm.__exit__(exc_type, exc, tb)
        return False


__all__ = ["Paper", "PaperTransaction"]
