from __future__ import annotations

import math

import pytest

from paper_engine.buffer import Paper
from paper_engine.runtime.config import EngineConfig, load_config


def test_default_columns() -> None:
    assert Paper(config=EngineConfig()).columns == 26


@pytest.mark.parametrize("columns", [5, 121, -1])
def test_out_of_range_construction_keeps_default(columns: int) -> None:
    assert Paper(columns=columns, config=EngineConfig()).columns == 26


@pytest.mark.parametrize(
    "value", [9, 121, math.inf, math.nan, "wide", None, True, 10**400]
)
def test_set_columns_ignores_invalid_values(value: object) -> None:
    paper = Paper(columns=40)

    assert paper.set_columns(value) is False
    assert paper.columns == 40


@pytest.mark.parametrize(("value", "expected"), [(10, 10), (120, 120), (30.7, 30), ("45", 45)])
def test_set_columns_accepts_in_range_values(value: object, expected: int) -> None:
    paper = Paper()

    assert paper.set_columns(value) is True
    assert paper.columns == expected


def test_seed_bumps_revision_and_drops_diff() -> None:
    paper = Paper()
    paper.actions.write_append("draft")

    paper.seed("fresh")

    assert paper.text == "fresh"
    assert paper.revision == 2
    assert paper.diff is None


def test_clear_buffer_bumps_revision() -> None:
    paper = Paper()
    paper.seed("something")

    paper.clear_buffer()

    assert paper.text == ""
    assert paper.revision == 2


def test_clear_diff_leaves_buffer_alone() -> None:
    paper = Paper()
    paper.actions.write_append("draft")

    paper.clear_diff()

    assert paper.diff is None
    assert paper.text == "draft"
    assert paper.revision == 1


def test_get_state_reports_layout() -> None:
    paper = Paper(columns=10)
    paper.seed("hello world this is")

    state = paper.get_state()
    slim = paper.get_state(include_visual=False)

    assert state.revision == 1
    assert state.columns == 10
    assert state.full_text == "hello world this is"
    assert state.line_count == 3
    assert state.head == "1| hello\n2| world this\n3| is"
    assert state.visual_lines is not None
    assert [line.text for line in state.visual_lines] == ["hello", "world this", "is"]
    assert slim.visual_lines is None
    assert "visual_lines" not in slim.as_dict()


def test_get_state_exposes_active_diff() -> None:
    paper = Paper()
    paper.seed("abc")
    paper.actions.write_append("note")

    payload = paper.get_state().as_dict()

    assert payload["active_diff"]["highlight_lines"] == [2]
    assert payload["visual_lines"] == [
        {"line_no": 1, "text": "abc"},
        {"line_no": 2, "text": "note"},
    ]


def test_instances_are_independent() -> None:
    first = Paper()
    second = Paper()

    first.seed("one")
    first.actions.write_append("two")

    assert second.text == ""
    assert second.revision == 0
    assert second.diff is None


def test_load_config_reads_environment() -> None:
    config = load_config(
        {
            "PAPER_ENGINE_COLUMNS": "40",
            "PAPER_ENGINE_MAX_STEPS": "3",
            "PAPER_ENGINE_SEARCH_TOP_K": "oops",
        }
    )

    assert config.columns == 40
    assert config.max_steps == 3
    assert config.search_top_k == 8


@pytest.mark.parametrize("raw", ["500", "abc", "9"])
def test_load_config_rejects_bad_columns(raw: str) -> None:
    assert load_config({"PAPER_ENGINE_COLUMNS": raw}).columns == 26


def test_config_columns_become_paper_default() -> None:
    assert Paper(config=EngineConfig(columns=50)).columns == 50
