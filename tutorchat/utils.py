"""Utility functions for the chat app."""

import json
from typing import Iterable, List

from .models import ChatMessage, ChatTurn, SegmentDict
from .segmenter import segment


def to_segment_dicts(content: str) -> List[SegmentDict]:
    """Segment `content` for the browser's math renderer."""
    return [{"kind": s.kind, "value": s.value} for s in segment(content)]


def to_chat_message(turn: ChatTurn) -> ChatMessage:
    """Convert a ChatTurn to a ChatMessage for the frontend."""
    return {
        "role": turn.role,
        "timestamp": turn.timestamp.isoformat(),
        "content": turn.content,
        "segments": to_segment_dicts(turn.content),
    }


def to_ndjson(turns: Iterable[ChatTurn]) -> bytes:
    """Encode turns as newline delimited JSON `ChatMessage`s."""
    return b"\n".join(
        json.dumps(to_chat_message(t), ensure_ascii=False).encode("utf-8") for t in turns
    )
