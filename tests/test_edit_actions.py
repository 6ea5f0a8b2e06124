from __future__ import annotations

import math

import pytest

from paper_engine.buffer import Paper


def make_paper(text: str = "hello world this is", *, columns: int = 10) -> Paper:
    paper = Paper(columns=columns)
    paper.seed(text)
    return paper


def test_replace_with_empty_text_reports_ghost_line() -> None:
    paper = make_paper()

    result = paper.actions.write_replace(2, "")

    assert result.ok is True
    assert result.changed is True
    assert result.removed_lines == ("world this",)
    assert result.removed_text is None
    assert result.highlight_lines == ()
    assert result.revision == 2
    assert paper.text == "hello  is"


def test_replace_normalizes_text_and_highlights_by_offset() -> None:
    paper = make_paper()

    result = paper.actions.write_replace(2, "  brave   new \n world ")

    assert paper.text == "hello brave new world is"
    assert result.anchor_line == 2
    assert result.removed_text == "world this"
    assert result.removed_lines is None
    assert result.highlight_lines == (2, 3)
    assert paper.diff is not None
    assert paper.diff.annotation.html_lines == (
        "hello",
        '<span class="newLineFull">brave new</span>',
        '<span class="newLineFull">world is</span>',
    )


def test_replace_with_identical_text_keeps_revision() -> None:
    paper = make_paper()

    result = paper.actions.write_replace(1, "hello")

    assert result.changed is False
    assert result.revision == 1
    assert paper.revision == 1


@pytest.mark.parametrize(
    ("line", "expected"),
    [
        (99, 3),
        (-4, 1),
        (0, 1),
        (math.nan, 1),
        (math.inf, 3),
        (10**400, 3),
        (-(10**400), 1),
        ("abc", 1),
        (None, 1),
        ("2", 2),
    ],
)
def test_replace_clamps_line_numbers(line: object, expected: int) -> None:
    paper = make_paper()

    result = paper.actions.write_replace(line, "x")

    assert result.anchor_line == expected


def test_clear_line_is_single_ghost() -> None:
    paper = make_paper()

    result = paper.actions.clear_line(1)

    assert result.op == "clear_line"
    assert result.details["cleared_line"] == 1
    assert result.removed_lines == ("hello",)
    assert result.removed_text is None


def test_append_starts_new_paragraph() -> None:
    paper = make_paper("abc", columns=26)

    result = paper.actions.write_append("note")

    assert paper.text == "abc\nnote"
    assert result.highlight_lines == (2,)
    assert result.anchor_line == 1
    assert result.removed_text is None
    assert result.removed_lines is None
    assert result.revision == 2


def test_append_without_new_paragraph_joins_text() -> None:
    paper = make_paper("abc", columns=26)

    result = paper.actions.write_append("def", ensure_new_paragraph=False)

    assert paper.text == "abcdef"
    assert result.highlight_lines == (1,)


def test_append_does_not_double_newline() -> None:
    paper = make_paper("abc\n", columns=26)

    paper.actions.write_append("note")

    assert paper.text == "abc\nnote"


def test_append_to_empty_buffer_has_no_separator() -> None:
    paper = Paper()

    result = paper.actions.write_append("  first  ")

    assert paper.text == "first"
    assert result.anchor_line == 1
    assert result.highlight_lines == (1,)


def test_append_keeps_interior_whitespace() -> None:
    paper = make_paper("x", columns=26)

    paper.actions.write_append("  a  \n  b  ")

    assert paper.text == "x\na  \n  b"


def test_append_rejects_blank_text() -> None:
    paper = make_paper()

    result = paper.actions.write_append("  \n\t ")

    assert result.ok is False
    assert result.reason == "empty_text"
    assert result.changed is False
    assert paper.revision == 1
    assert paper.diff is None


def test_append_anchor_is_previous_last_line() -> None:
    paper = make_paper("one\ntwo\nthree", columns=26)

    result = paper.actions.write_append("four")

    assert result.anchor_line == 3
    assert result.highlight_lines == (4,)
    assert paper.diff is not None
    assert paper.diff.annotation.start_line == 1
    assert paper.diff.annotation.html_lines[-1] == '<span class="newLineFull">four</span>'


def test_append_highlights_every_wrapped_row() -> None:
    paper = make_paper("abc")

    result = paper.actions.write_append("one two three four")

    assert result.highlight_lines == (2, 3)


def test_clear_range_removes_lines_top_down() -> None:
    paper = make_paper("alpha\nbeta\ngamma\ndelta", columns=26)

    result = paper.actions.clear_range(2, 3)

    assert paper.text == "alpha\n\n\ndelta"
    assert result.removed_lines == ("beta", "gamma")
    assert result.highlight_lines == ()
    assert result.anchor_line == 2
    assert result.details["applied_count"] == 2
    assert result.revision == 2


def test_clear_range_reversed_bounds_match_forward() -> None:
    forward = make_paper()
    backward = make_paper()

    a = forward.actions.clear_range(1, 2)
    b = backward.actions.clear_range(2, 1)

    assert forward.text == backward.text
    assert a.removed_lines == b.removed_lines
    assert a.revision == b.revision == 2
    assert (a.details["start_line"], a.details["end_line"]) == (1, 2)
    assert (b.details["start_line"], b.details["end_line"]) == (1, 2)


def test_clear_range_rewraps_between_steps() -> None:
    paper = make_paper()

    result = paper.actions.clear_range(1, 2)

    # Clearing row 2 lets "is" rejoin row 1, so the second step clears both.
    assert result.removed_lines == ("hello is", "world this")
    assert paper.text == ""


def test_clear_range_clamps_bounds() -> None:
    paper = make_paper("alpha\nbeta\ngamma\ndelta", columns=26)

    result = paper.actions.clear_range(-5, 99)

    assert paper.text == "\n\n\n"
    assert result.removed_lines == ("alpha", "beta", "gamma", "delta")


def test_clear_all_captures_every_line() -> None:
    paper = make_paper()

    result = paper.actions.clear_all()

    assert paper.text == ""
    assert result.removed_lines == ("hello", "world this", "is")
    assert result.highlight_lines == ()
    assert result.anchor_line == 1
    assert result.changed is True


def test_clear_all_on_empty_buffer_is_unchanged() -> None:
    paper = Paper()

    result = paper.actions.clear_all()

    assert result.changed is False
    assert paper.revision == 0
    assert result.removed_lines == ("",)


def test_revision_moves_by_one_per_changing_action() -> None:
    paper = make_paper("alpha\nbeta\ngamma", columns=26)
    results = [
        paper.actions.write_replace(1, "ALPHA"),
        paper.actions.write_replace(1, "ALPHA"),
        paper.actions.write_append(""),
        paper.actions.write_append("delta"),
        paper.actions.clear_range(2, 3),
        paper.actions.clear_line(2),
        paper.actions.clear_all(),
    ]

    revision = 1
    for result in results:
        if result.ok and result.changed:
            revision += 1
        assert result.revision == revision
    assert paper.revision == revision


def test_failed_transaction_restores_text() -> None:
    paper = make_paper()

    with pytest.raises(RuntimeError):
        with paper.transaction("broken") as tx:
            tx.stage("scribbled")
            raise RuntimeError("boom")

    assert paper.text == "hello world this is"
    assert paper.revision == 1
