"""Line-wrap engine mapping buffer text to numbered visual lines."""

from .wrap import VisualLine, head_listing, wrap

__all__ = ["VisualLine", "head_listing", "wrap"]
