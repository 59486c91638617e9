"""Split mixed text/LaTeX messages into plain, inline-math and block-math pieces.

Block math `\\[ ... \\]` is cut out first and may span lines. The text left
around it is then scanned for inline math `\\( ... \\)`, which stays on one
line. Inline delimiters inside a block are part of the block's value.
An opener without a matching closer is left as plain text.
"""

import re
from typing import List

from .models import SegmentKind, TextSegment

BLOCK_MATH = re.compile(r"\\\[(.*?)\\\]", re.DOTALL)
INLINE_MATH = re.compile(r"\\\((.*?)\\\)")


def _split(text: str, pattern: "re.Pattern[str]", kind: SegmentKind) -> List[TextSegment]:
    parts: List[TextSegment] = []
    last = 0
    for match in pattern.finditer(text):
        if match.start() > last:
            parts.append(TextSegment("plain", text[last : match.start()]))
        parts.append(TextSegment(kind, match.group(1)))
        last = match.end()
    if last < len(text):
        parts.append(TextSegment("plain", text[last:]))
    return parts


def segment(content: str) -> List[TextSegment]:
    """Return the segments of `content` in source order."""
    segments: List[TextSegment] = []
    for part in _split(content, BLOCK_MATH, "blockMath"):
        if part.kind == "plain":
            segments.extend(_split(part.value, INLINE_MATH, "inlineMath"))
        else:
            segments.append(part)
    return segments
