"""Executable Textual app that displays a paper and accepts typed commands."""

from __future__ import annotations

import argparse
from dataclasses import dataclass
from typing import Any, Optional, Sequence

try:  # pragma: no cover - imported only when demo is run
    from rich.text import Text
    from textual.app import App, ComposeResult
    from textual.containers import VerticalScroll
    from textual.widgets import Footer, Header, Input, Static
except ModuleNotFoundError as exc:  # pragma: no cover - friendly error for missing dep
    raise RuntimeError(
        "Install the 'textual' package to use paper_engine.adapters.textual.app"
    ) from exc

from paper_engine.buffer import Paper
from paper_engine.runtime import telemetry

from .controller import PaperView, TextualPaperAdapter, TextualUIHooks

_ROW_STYLES = {
    "plain": "",
    "new": "bold black on green",
    "ghost": "strike red",
}


def render_view(view: PaperView) -> Text:
    text = Text()
    for row in view.rows:
        gutter = f"{row.line_no:>4} " if row.line_no is not None else "   - "
        text.append(gutter, style="dim")
        text.append(row.text.ljust(view.columns), style=_ROW_STYLES.get(row.kind, ""))
        text.append("\n")
    return text


@dataclass
class UIState:
    status_text: str = ""
    revision: int = 0


class PaperApp(App[None]):
    """Minimal Textual UI around one ``Paper``."""

    CSS = """
	Screen {
		layout: vertical;
	}

	#paper-area {
		height: 1fr;
		border: round $accent;
		padding: 0 1;
	}

	#status-line {
		height: 1;
		background: $surface-darken-1;
		padding: 0 1;
	}
	"""

    BINDINGS = [
        ("ctrl+c", "quit", "Quit"),
        ("ctrl+q", "quit", "Quit"),
    ]

    def __init__(self, *, columns: Optional[int] = None, seed_text: str = "") -> None:
        super().__init__()
        self._state = UIState()
        self.paper = Paper(columns=columns, name="demo")
        if seed_text:
            self.paper.seed(seed_text)
        self.adapter: TextualPaperAdapter | None = None
        self._paper_widget: Static | None = None
        self._status_widget: Static | None = None

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        with VerticalScroll(id="paper-area"):
            self._paper_widget = Static("", id="paper-view")
            yield self._paper_widget
        self._status_widget = Static("", id="status-line")
        yield self._status_widget
        yield Input(placeholder="append <text> | replace <n> <text> | clear <n> [m]")
        yield Footer()

    def on_mount(self) -> None:
        hooks = TextualUIHooks(
            update_paper=self._update_paper,
            update_status=self._update_status,
            handle_event=self._handle_event,
            log=self._log_line,
        )
        self.adapter = TextualPaperAdapter(self.paper, hooks)

    def on_input_submitted(self, event: Input.Submitted) -> None:
        if self.adapter is None:
            return
        # A new command starts a new interaction; the previous diff goes away.
        self.paper.clear_diff()
        self.adapter.submit_command(event.value)
        event.input.value = ""

    def _update_paper(self, view: PaperView) -> None:
        self._state.revision = view.revision
        if self._paper_widget:
            self._paper_widget.update(render_view(view))

    def _update_status(self, status: str) -> None:
        self._state.status_text = f"rev {self._state.revision} | {status}"
        if self._status_widget:
            self._status_widget.update(self._state.status_text)

    def _handle_event(self, name: str, payload: Any | None) -> None:
        if name == "paper.applied" and isinstance(payload, dict):
            self._log_line(f"{name} {payload.get('op')}")

    def _log_line(self, line: str) -> None:
        telemetry.logger.debug(line)


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run the paper engine Textual demo.")
    parser.add_argument(
        "--columns",
        type=int,
        default=None,
        help="Wrap width between 10 and 120 (default: PAPER_ENGINE_COLUMNS or 26)",
    )
    parser.add_argument(
        "--seed",
        default="",
        help="Initial buffer text; '\\n' starts a new paragraph",
    )
    parser.add_argument(
        "--log-preset",
        choices=("development", "production", "performance"),
        default=None,
        help="Telemetry preset to apply before starting",
    )
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = _parse_args(argv)
    if args.log_preset:
        telemetry.configure(preset=args.log_preset)
    app = PaperApp(columns=args.columns, seed_text=args.seed.replace("\\n", "\n"))
    app.run()


if __name__ == "__main__":  # pragma: no cover - manual demo
    main()
