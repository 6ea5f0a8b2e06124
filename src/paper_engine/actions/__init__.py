"""Edit and query actions over a ``Paper``, plus structured step dispatch."""

from .base import (
    ActionResult,
    PaperBus,
    ReadLine,
    ReadResult,
    SearchHit,
    SearchResult,
    coerce_line,
)
from .dispatch import (
    SUPPORTED_OPS,
    JournalEntry,
    StepJournal,
    StepValidationError,
    apply_step,
    run_steps,
)
from .edit import (
    clear_all,
    clear_line,
    clear_range,
    normalize_inline,
    write_append,
    write_replace,
)
from .namespace import PaperActions
from .query import read, search

__all__ = [
    "ActionResult",
    "JournalEntry",
    "PaperActions",
    "PaperBus",
    "ReadLine",
    "ReadResult",
    "SUPPORTED_OPS",
    "SearchHit",
    "SearchResult",
    "StepJournal",
    "StepValidationError",
    "apply_step",
    "clear_all",
    "clear_line",
    "clear_range",
    "coerce_line",
    "normalize_inline",
    "read",
    "run_steps",
    "search",
    "write_append",
    "write_replace",
]
