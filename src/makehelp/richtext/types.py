from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Tuple


class SegmentKind(str, Enum):
    PLAIN = "plain"
    BOLD = "bold"
    ITALIC = "italic"
    CODE = "code"
    LINK = "link"


@dataclass(frozen=True)
class Segment:
    kind: SegmentKind
    content: str
    url: str = ""
    # Delimiter the span was written with ("**" or "__", "*" or "_").
    marker: str = ""

    def markdown(self) -> str:
        if self.kind is SegmentKind.BOLD:
            marker = self.marker or "**"
            return f"{marker}{self.content}{marker}"
        if self.kind is SegmentKind.ITALIC:
            marker = self.marker or "*"
            return f"{marker}{self.content}{marker}"
        if self.kind is SegmentKind.CODE:
            return f"`{self.content}`"
        if self.kind is SegmentKind.LINK:
            return f"[{self.content}]({self.url})"
        return self.content


@dataclass(frozen=True)
class RichText:
    """Inline-formatted text as an ordered run of segments."""

    segments: Tuple[Segment, ...] = ()

    def plain_text(self) -> str:
        return "".join(segment.content for segment in self.segments)

    def markdown(self) -> str:
        return "".join(segment.markdown() for segment in self.segments)

    def __str__(self) -> str:
        return self.markdown()

    def __iter__(self) -> Iterator[Segment]:
        return iter(self.segments)

    def __len__(self) -> int:
        return len(self.segments)

    def __bool__(self) -> bool:
        return bool(self.segments)
