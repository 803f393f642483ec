from __future__ import annotations

import re
from typing import Sequence

from makehelp.richtext import RichText, RichTextParser

_SENTENCE_END_RE = re.compile(r"[.!?](?=\s|$)")


class SummaryExtractor:
    """Reduce a documentation block to its first sentence."""

    def __init__(self, parser: RichTextParser | None = None) -> None:
        self._parser = parser or RichTextParser()

    def first_sentence(self, documentation: Sequence[str]) -> str:
        text = " ".join(documentation).strip()
        match = _SENTENCE_END_RE.search(text)
        if match is None:
            return text
        return text[: match.end()]

    def extract(self, documentation: Sequence[str]) -> RichText:
        if not documentation:
            return RichText()
        return self._parser.parse(self.first_sentence(documentation))


_DEFAULT_EXTRACTOR = SummaryExtractor()


def extract_summary(documentation: Sequence[str]) -> RichText:
    return _DEFAULT_EXTRACTOR.extract(documentation)
