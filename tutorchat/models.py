"""Data models for the tutor chat app."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Literal, Optional

from pydantic import BaseModel, field_validator
from typing_extensions import TypedDict

Subject = Literal["math", "chem", "bio"]
Role = Literal["user", "bot"]
SegmentKind = Literal["plain", "inlineMath", "blockMath"]


@dataclass(frozen=True)
class ChatTurn:
    """One message of a transcript, immutable once appended."""

    role: Role
    content: str
    timestamp: datetime = field(default_factory=lambda: datetime.now(tz=timezone.utc))


@dataclass(frozen=True)
class TextSegment:
    """A classified piece of a message, used to pick a renderer."""

    kind: SegmentKind
    value: str


class SegmentDict(TypedDict):
    kind: SegmentKind
    value: str


class ChatMessage(TypedDict):
    """Format of messages sent to the browser."""

    role: Role
    timestamp: str
    content: str
    segments: List[SegmentDict]


class SubjectInfo(TypedDict):
    key: Subject
    label: str
    placeholder: str


class SolveRequest(BaseModel):
    """Body of `POST /api/solve`."""

    subject: str = "math"
    question: str = ""
    image: Optional[str] = None

    @field_validator("image")
    @classmethod
    def blank_image_is_none(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not value.strip():
            return None
        return value


class SolveResponse(BaseModel):
    answer: str
