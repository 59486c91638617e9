"""Per-session chat state: the transcript, the subject and the in-flight flag."""

from __future__ import annotations as _annotations

from typing import Awaitable, Callable, List, Optional, Tuple

import logfire

from .models import ChatTurn, Subject
from .prompts import (
    DEFAULT_SUBJECT,
    ERROR_TEXT,
    IMAGE_ONLY_PLACEHOLDER,
    NO_RESPONSE_TEXT,
    is_subject,
)
from .relay import solve

Relay = Callable[[str, Optional[str], Optional[str]], Awaitable[str]]


class TranscriptController:
    """Holds one user's transcript and sends their questions to the relay.

    Each `submit` appends a user turn straight away and a bot turn once the
    relay answers or fails, so every user turn is followed by exactly one bot
    turn. The controller only exposes `pending`; callers must not submit again
    while it is set.
    """

    def __init__(self, relay: Relay = solve, subject: Subject = DEFAULT_SUBJECT):
        self._relay = relay
        self._turns: List[ChatTurn] = []
        self._subject: Subject = DEFAULT_SUBJECT
        self.subject = subject
        self.pending = False
        self.question = ""
        self.image: Optional[str] = None

    @property
    def transcript(self) -> Tuple[ChatTurn, ...]:
        return tuple(self._turns)

    @property
    def subject(self) -> Subject:
        return self._subject

    @subject.setter
    def subject(self, value: Subject) -> None:
        if not is_subject(value):
            raise ValueError(f"unknown subject: {value!r}")
        self._subject = value

    async def submit(self, question: Optional[str] = None, image: Optional[str] = None) -> Optional[ChatTurn]:
        """Send the question (and image) to the relay and record both turns.

        Falls back to the current drafts when called without arguments.
        Returns the bot turn, or None when there was nothing to send.
        """
        if question is None:
            question = self.question
        if image is None:
            image = self.image

        if not question.strip() and not image:
            logfire.info("empty submission ignored")
            return None

        self.pending = True
        self._turns.append(ChatTurn("user", question or IMAGE_ONLY_PLACEHOLDER))
        try:
            answer = await self._relay(self._subject, question, image)
        except Exception as exc:
            logfire.warn("relay failed, recording error turn: {error}", error=repr(exc))
            reply = ChatTurn("bot", ERROR_TEXT)
        else:
            reply = ChatTurn("bot", answer if answer and answer.strip() else NO_RESPONSE_TEXT)
        finally:
            self.pending = False
            self.question = ""
            self.image = None

        self._turns.append(reply)
        return reply

    def reset(self) -> None:
        """Start over with an empty transcript; not allowed mid-request."""
        if self.pending:
            raise RuntimeError("cannot reset while a request is pending")
        self._turns.clear()
