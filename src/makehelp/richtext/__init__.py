from makehelp.richtext.parser import (
    MAX_INPUT_BYTES,
    MAX_SEGMENT_BYTES,
    RichTextParser,
    parse,
)
from makehelp.richtext.types import RichText, Segment, SegmentKind

__all__ = [
    "MAX_INPUT_BYTES",
    "MAX_SEGMENT_BYTES",
    "RichText",
    "RichTextParser",
    "Segment",
    "SegmentKind",
    "parse",
]
