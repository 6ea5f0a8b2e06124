"""Engine defaults, overridable through ``PAPER_ENGINE_*`` environment variables."""

from __future__ import annotations

import math
import os
from dataclasses import dataclass
from typing import Mapping, Optional

ENV_PREFIX = "PAPER_ENGINE_"

MIN_COLUMNS = 10
MAX_COLUMNS = 120
DEFAULT_COLUMNS = 26
PREVIEW_WINDOW = 45
PREVIEW_LEAD = 2
HEAD_LINES = 12
SEARCH_TOP_K = 8
MAX_STEPS = 6


def clamp_columns(value: object, fallback: int) -> int:
    """Return ``value`` floored when it is a finite number in range, else ``fallback``."""

    if isinstance(value, bool):
        return fallback
    try:
        number = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError, OverflowError):
        return fallback
    if not math.isfinite(number) or number < MIN_COLUMNS or number > MAX_COLUMNS:
        return fallback
    return int(math.floor(number))


@dataclass(frozen=True, slots=True)
class EngineConfig:
    columns: int = DEFAULT_COLUMNS
    preview_window: int = PREVIEW_WINDOW
    preview_lead: int = PREVIEW_LEAD
    head_lines: int = HEAD_LINES
    search_top_k: int = SEARCH_TOP_K
    max_steps: int = MAX_STEPS


def _env_int(env: Mapping[str, str], name: str, fallback: int) -> int:
    raw = env.get(f"{ENV_PREFIX}{name}")
    if raw is None:
        return fallback
    try:
        value = int(raw)
    except ValueError:
        return fallback
    return value if value > 0 else fallback


def load_config(env: Optional[Mapping[str, str]] = None) -> EngineConfig:
    """Build an ``EngineConfig`` from the environment.

    Unparsable or non-positive values fall back to the defaults; the column
    width additionally goes through the same clamp as ``Paper.set_columns``.
    """

    source = os.environ if env is None else env
    raw_columns = source.get(f"{ENV_PREFIX}COLUMNS")
    columns = (
        DEFAULT_COLUMNS
        if raw_columns is None
        else clamp_columns(raw_columns, DEFAULT_COLUMNS)
    )
    return EngineConfig(
        columns=columns,
        preview_window=_env_int(source, "PREVIEW_WINDOW", PREVIEW_WINDOW),
        preview_lead=_env_int(source, "PREVIEW_LEAD", PREVIEW_LEAD),
        head_lines=_env_int(source, "HEAD_LINES", HEAD_LINES),
        search_top_k=_env_int(source, "SEARCH_TOP_K", SEARCH_TOP_K),
        max_steps=_env_int(source, "MAX_STEPS", MAX_STEPS),
    )


__all__ = [
    "DEFAULT_COLUMNS",
    "EngineConfig",
    "MAX_COLUMNS",
    "MIN_COLUMNS",
    "clamp_columns",
    "load_config",
]
