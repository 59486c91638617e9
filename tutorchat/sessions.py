"""In-memory registry of transcript controllers, one per browser session."""

import uuid
from collections import OrderedDict
from typing import Optional, Tuple

from . import settings
from .transcript import Relay, TranscriptController


class SessionStore:
    """Keeps at most `max_sessions` controllers; the least recently used go first."""

    def __init__(self, relay: Optional[Relay] = None, max_sessions: int = settings.MAX_SESSIONS):
        if max_sessions < 1:
            raise ValueError("max_sessions must be at least 1")
        self._relay = relay
        self._max_sessions = max_sessions
        self._sessions: "OrderedDict[str, TranscriptController]" = OrderedDict()

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._sessions

    def get_or_create(self, session_id: Optional[str]) -> Tuple[str, TranscriptController]:
        """Return the controller for `session_id`, starting a new session if unknown."""
        if session_id and session_id in self._sessions:
            self._sessions.move_to_end(session_id)
            return session_id, self._sessions[session_id]

        session_id = uuid.uuid4().hex
        if self._relay is None:
            controller = TranscriptController()
        else:
            controller = TranscriptController(relay=self._relay)
        self._sessions[session_id] = controller
        while len(self._sessions) > self._max_sessions:
            self._sessions.popitem(last=False)
        return session_id, controller
