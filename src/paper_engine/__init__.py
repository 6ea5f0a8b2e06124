"""Single-buffer paper engine: offset-tracked word wrap, edit actions and diffs."""

from paper_engine.buffer import Paper, PaperState

__all__ = [
    "Paper",
    "PaperState",
    "actions",
    "adapters",
    "buffer",
    "diff",
    "layout",
    "runtime",
]

__version__ = "0.1.0"
