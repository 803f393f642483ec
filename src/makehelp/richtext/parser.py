"""Inline markup parser for documentation strings.

Recognises, from highest to lowest precedence, links ``[text](url)``, inline
code, bold (``**x**`` / ``__x__``) and italic (``*x*`` / ``_x_``). A lower
precedence candidate that overlaps an accepted span is dropped and its
markers stay in the surrounding plain text.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List

from makehelp.richtext.types import RichText, Segment, SegmentKind

MAX_INPUT_BYTES = 10 * 1024
MAX_SEGMENT_BYTES = 2000

_ANSI_ESCAPE_RE = re.compile(r"\x1b\[[0-9;]*m")


@dataclass(frozen=True)
class _Span:
    start: int
    end: int
    segment: Segment


def _byte_len(text: str) -> int:
    return len(text.encode("utf-8"))


def _truncate_bytes(text: str, limit: int) -> str:
    return text.encode("utf-8")[:limit].decode("utf-8", errors="ignore")


def _overlaps(spans: List[_Span], start: int, end: int) -> bool:
    for span in spans:
        if span.start <= start < span.end:
            return True
        if span.start < end <= span.end:
            return True
        if start <= span.start and end >= span.end:
            return True
    return False


def _inside(spans: List[_Span], pos: int) -> bool:
    return any(span.start <= pos < span.end for span in spans)


class RichTextParser:
    def __init__(self) -> None:
        self._link_re = re.compile(r"\[([^\]]+?)\]\(([^)]+?)\)")
        self._code_re = re.compile(r"`([^`]+)`")
        self._bold_res = (
            ("**", re.compile(r"\*\*(.+?)\*\*")),
            ("__", re.compile(r"__(.+?)__")),
        )

    def parse(self, text: str) -> RichText:
        text = _ANSI_ESCAPE_RE.sub("", text)
        if _byte_len(text) > MAX_INPUT_BYTES:
            return RichText(
                (Segment(SegmentKind.PLAIN, _truncate_bytes(text, MAX_INPUT_BYTES)),)
            )
        if not text:
            return RichText()
        spans = self._find_spans(text)
        if not spans:
            return RichText((Segment(SegmentKind.PLAIN, text),))
        return _build(text, spans)

    def _find_spans(self, text: str) -> List[_Span]:
        spans: List[_Span] = []
        for match in self._link_re.finditer(text):
            content = match.group(1)
            if _byte_len(content) > MAX_SEGMENT_BYTES:
                continue
            spans.append(
                _Span(
                    match.start(),
                    match.end(),
                    Segment(SegmentKind.LINK, content, match.group(2)),
                )
            )
        self._add_regex_spans(text, spans, self._code_re, SegmentKind.CODE)
        for marker, pattern in self._bold_res:
            self._add_regex_spans(text, spans, pattern, SegmentKind.BOLD, marker)
        self._add_italic_spans(text, spans, "*")
        self._add_italic_spans(text, spans, "_")
        return spans

    @staticmethod
    def _add_regex_spans(
        text: str,
        spans: List[_Span],
        pattern: re.Pattern[str],
        kind: SegmentKind,
        marker: str = "",
    ) -> None:
        for match in pattern.finditer(text):
            content = match.group(1)
            if _byte_len(content) > MAX_SEGMENT_BYTES:
                continue
            if _overlaps(spans, match.start(), match.end()):
                continue
            spans.append(
                _Span(match.start(), match.end(), Segment(kind, content, marker=marker))
            )

    @staticmethod
    def _add_italic_spans(text: str, spans: List[_Span], delim: str) -> None:
        # Scanned by hand so a lone delimiter next to a doubled one (the
        # opening of a bold marker) is never taken as an italic opener.
        size = len(text)
        pos = 0
        while pos < size:
            start = -1
            for index in range(pos, size):
                if text[index] != delim:
                    continue
                if index + 1 < size and text[index + 1] == delim:
                    continue
                if _inside(spans, index):
                    continue
                start = index
                break
            if start == -1:
                break
            end = -1
            for index in range(start + 2, size):
                if text[index] != delim:
                    continue
                if index + 1 < size and text[index + 1] == delim:
                    continue
                end = index + 1
                break
            if end == -1:
                pos = start + 1
                continue
            if not _overlaps(spans, start, end):
                content = text[start + 1 : end - 1]
                if _byte_len(content) <= MAX_SEGMENT_BYTES:
                    spans.append(
                        _Span(start, end, Segment(SegmentKind.ITALIC, content, marker=delim))
                    )
            pos = end


def _build(text: str, spans: List[_Span]) -> RichText:
    segments: List[Segment] = []
    pos = 0
    for span in sorted(spans, key=lambda span: span.start):
        if span.start > pos:
            segments.append(Segment(SegmentKind.PLAIN, text[pos : span.start]))
        segments.append(span.segment)
        pos = span.end
    if pos < len(text):
        segments.append(Segment(SegmentKind.PLAIN, text[pos:]))
    return RichText(tuple(segments))


_DEFAULT_PARSER = RichTextParser()


def parse(text: str) -> RichText:
    return _DEFAULT_PARSER.parse(text)
