"""Buffer state and the ``Paper`` façade."""

from .paper import Paper, PaperTransaction
from .state import BufferState, PaperState

__all__ = ["BufferState", "Paper", "PaperState", "PaperTransaction"]
