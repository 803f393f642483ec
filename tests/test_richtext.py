from __future__ import annotations

import pytest

from makehelp.richtext import (
    MAX_INPUT_BYTES,
    MAX_SEGMENT_BYTES,
    RichText,
    Segment,
    SegmentKind,
    parse,
)


def _kinds(text: RichText) -> list[tuple[SegmentKind, str]]:
    return [(segment.kind, segment.content) for segment in text]


def test_parse_plain_text_is_single_segment() -> None:
    assert _kinds(parse("Build the project")) == [(SegmentKind.PLAIN, "Build the project")]


def test_parse_empty_text() -> None:
    result = parse("")
    assert len(result) == 0
    assert not result
    assert result.plain_text() == ""


def test_parse_mixed_markup() -> None:
    result = parse("Run **all** tests with `make test` and *care*")
    assert _kinds(result) == [
        (SegmentKind.PLAIN, "Run "),
        (SegmentKind.BOLD, "all"),
        (SegmentKind.PLAIN, " tests with "),
        (SegmentKind.CODE, "make test"),
        (SegmentKind.PLAIN, " and "),
        (SegmentKind.ITALIC, "care"),
    ]
    assert result.plain_text() == "Run all tests with make test and care"


def test_parse_link_keeps_url() -> None:
    result = parse("See [the docs](https://example.com/docs) first")
    link = result.segments[1]
    assert link.kind is SegmentKind.LINK
    assert link.content == "the docs"
    assert link.url == "https://example.com/docs"
    assert result.markdown() == "See [the docs](https://example.com/docs) first"


def test_parse_underscore_variants() -> None:
    result = parse("__strong__ and _soft_")
    assert _kinds(result) == [
        (SegmentKind.BOLD, "strong"),
        (SegmentKind.PLAIN, " and "),
        (SegmentKind.ITALIC, "soft"),
    ]


def test_code_wins_over_inner_emphasis() -> None:
    result = parse("Use `**not bold**` here")
    assert _kinds(result) == [
        (SegmentKind.PLAIN, "Use "),
        (SegmentKind.CODE, "**not bold**"),
        (SegmentKind.PLAIN, " here"),
    ]


def test_link_wins_over_code_inside_text() -> None:
    result = parse("[`cmd`](http://x)")
    assert _kinds(result) == [(SegmentKind.LINK, "`cmd`")]


def test_unclosed_markers_stay_plain() -> None:
    result = parse("a * b and `open")
    assert _kinds(result) == [(SegmentKind.PLAIN, "a * b and `open")]


def test_italic_needs_content() -> None:
    assert _kinds(parse("**")) == [(SegmentKind.PLAIN, "**")]


def test_ansi_sequences_are_stripped() -> None:
    result = parse("\x1b[1mBuild\x1b[0m it")
    assert result.plain_text() == "Build it"


def test_oversized_input_is_truncated_plain() -> None:
    text = "**x** " * 3000
    result = parse(text)
    assert len(result) == 1
    assert result.segments[0].kind is SegmentKind.PLAIN
    assert len(result.segments[0].content.encode("utf-8")) == MAX_INPUT_BYTES


def test_oversized_segment_is_left_as_plain() -> None:
    inner = "y" * (MAX_SEGMENT_BYTES + 1)
    result = parse(f"`{inner}`")
    assert _kinds(result) == [(SegmentKind.PLAIN, f"`{inner}`")]


def test_segment_at_limit_is_kept() -> None:
    inner = "y" * MAX_SEGMENT_BYTES
    assert _kinds(parse(f"`{inner}`")) == [(SegmentKind.CODE, inner)]


def test_segment_markdown_rendering() -> None:
    assert Segment(SegmentKind.ITALIC, "x").markdown() == "*x*"
    assert Segment(SegmentKind.BOLD, "x").markdown() == "**x**"
    assert str(RichText((Segment(SegmentKind.CODE, "ls"),))) == "`ls`"


def test_markdown_keeps_original_delimiters() -> None:
    assert parse("__a**b__").markdown() == "__a**b__"
    assert parse("_a*b_").markdown() == "_a*b_"
    assert parse("__bold__ and _soft_").segments[0].marker == "__"


@pytest.mark.parametrize(
    "text",
    [
        "__a**b__",
        "_a*b_",
        "**a__b**",
        "*a_b*",
        "Run **all** tests with `make *x*` and see [docs](http://x/_y_)",
        "a * b and _open",
        "\x1b[1m__loud__\x1b[0m _quiet_",
    ],
)
def test_markdown_round_trip(text: str) -> None:
    parsed = parse(text)
    assert parse(parsed.markdown()) == parsed
