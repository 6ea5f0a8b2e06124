from __future__ import annotations

from paper_engine.layout import VisualLine, head_listing, wrap


def spans(text: str, columns: int) -> list[tuple[str, int, int]]:
    return [(line.text, line.start, line.end) for line in wrap(text, columns)]


def test_empty_buffer_yields_single_empty_line() -> None:
    assert wrap("", 26) == [VisualLine(1, "", 0, 0)]


def test_greedy_wrap_keeps_words_in_order() -> None:
    text = "hello world this is a test line"

    lines = wrap(text, 10)

    assert [line.text for line in lines] == ["hello", "world this", "is a test", "line"]
    assert all(len(line.text) <= 10 for line in lines)
    assert " ".join(line.text for line in lines).split() == text.split()
    assert [line.line_no for line in lines] == [1, 2, 3, 4]


def test_offsets_point_into_source() -> None:
    text = "hello world this is a test line"

    for line in wrap(text, 10):
        assert text[line.start : line.end] == line.text


def test_oversized_word_is_cut_and_remainder_flows_on() -> None:
    assert spans("abcdefghijklmno", 10) == [("abcdefghij", 0, 10), ("klmno", 10, 15)]
    assert spans("abcdefghijklmno pq", 10) == [
        ("abcdefghij", 0, 10),
        ("klmno pq", 10, 18),
    ]


def test_word_longer_than_two_rows() -> None:
    assert [line.text for line in wrap("x" * 25, 10)] == ["x" * 10, "x" * 10, "x" * 5]


def test_space_runs_collapse_but_offsets_keep_source_width() -> None:
    (line,) = wrap("ab   cd", 26)

    assert line.text == "ab cd"
    assert (line.start, line.end) == (0, 7)


def test_leading_spaces_are_skipped() -> None:
    assert spans("  hi", 26) == [("hi", 2, 4)]


def test_numbering_runs_across_paragraphs() -> None:
    lines = wrap("one\n\ntwo", 26)

    assert [(line.line_no, line.text, line.start, line.end) for line in lines] == [
        (1, "one", 0, 3),
        (2, "", 4, 4),
        (3, "two", 5, 8),
    ]


def test_trailing_newline_adds_addressable_empty_line() -> None:
    assert spans("abc\n", 26) == [("abc", 0, 3), ("", 4, 4)]


def test_blank_paragraph_is_one_empty_line() -> None:
    assert spans("a\n   \nb", 26) == [("a", 0, 1), ("", 2, 2), ("b", 6, 7)]


def test_wrap_is_deterministic() -> None:
    text = "The quick brown fox\njumps over   the lazy dog\n\nand keeps running"

    assert wrap(text, 12) == wrap(text, 12)


def test_adjacent_lines_in_paragraph_do_not_overlap() -> None:
    text = "lorem ipsum dolor sit amet consectetur adipiscing elit sed do eiusmod"

    lines = wrap(text, 11)

    for current, following in zip(lines, lines[1:]):
        assert current.start <= current.end
        assert current.end <= following.start


def test_head_listing_numbers_rows() -> None:
    lines = wrap("hello world this is", 10)

    assert head_listing(lines, 12) == "1| hello\n2| world this\n3| is"
    assert head_listing(lines, 2) == "1| hello\n2| world this"
