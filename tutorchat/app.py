"""Exam tutor chat app built with FastAPI.

Run with:
    python -m tutorchat.app
"""

from __future__ import annotations as _annotations

from contextlib import asynccontextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Annotated, List, Optional

import fastapi
import logfire
from fastapi import Depends, Request
from fastapi.responses import FileResponse, JSONResponse, Response

from . import settings
from .models import SolveRequest, SolveResponse, SubjectInfo
from .prompts import DEFAULT_SUBJECT, SUBJECTS
from .relay import InvalidImageError, RelayError, solve
from .sessions import SessionStore
from .transcript import TranscriptController
from .utils import to_ndjson

# Configure logging
logfire.configure(send_to_logfire="if-token-present")
logfire.instrument_pydantic_ai()

THIS_DIR = Path(__file__).parent


@asynccontextmanager
async def lifespan(_app: fastapi.FastAPI):
    """Keep one session store for the lifetime of the process."""
    yield {"sessions": SessionStore()}


app = fastapi.FastAPI(lifespan=lifespan)
logfire.instrument_fastapi(app)


@dataclass
class ChatSession:
    session_id: str
    controller: TranscriptController


async def get_sessions(request: Request) -> SessionStore:
    """Dependency to get the session store."""
    return request.state.sessions


async def get_chat_session(
    request: Request, sessions: SessionStore = Depends(get_sessions)
) -> ChatSession:
    """Dependency to get (or start) the caller's chat session."""
    session_id, controller = sessions.get_or_create(
        request.cookies.get(settings.SESSION_COOKIE)
    )
    return ChatSession(session_id, controller)


def with_session_cookie(response: Response, session: ChatSession) -> Response:
    response.set_cookie(
        settings.SESSION_COOKIE, session.session_id, httponly=True, samesite="lax"
    )
    return response


def error_response(status_code: int, message: str, session: Optional[ChatSession] = None) -> Response:
    response = JSONResponse({"error": message}, status_code=status_code)
    if session is not None:
        with_session_cookie(response, session)
    return response


@app.get("/")
async def index() -> FileResponse:
    """Serve the main chat interface."""
    return FileResponse((THIS_DIR / "chat_app.html"), media_type="text/html")


@app.get("/chat_app.ts")
async def main_ts() -> FileResponse:
    """Get the raw typescript code, it's compiled in the browser."""
    return FileResponse((THIS_DIR / "chat_app.ts"), media_type="text/plain")


@app.get("/api/subjects")
async def get_subjects() -> List[SubjectInfo]:
    """Subject tabs shown above the chat."""
    return SUBJECTS


@app.post("/api/solve", response_model=SolveResponse)
async def post_solve(payload: SolveRequest):
    """Relay one question to the model and return its answer verbatim."""
    try:
        answer = await solve(payload.subject, payload.question, payload.image)
    except InvalidImageError as exc:
        return error_response(422, str(exc))
    except RelayError as exc:
        return error_response(502, str(exc))
    return SolveResponse(answer=answer)


@app.get("/chat/")
async def get_chat(session: ChatSession = Depends(get_chat_session)) -> Response:
    """Get all chat messages of this session."""
    response = Response(to_ndjson(session.controller.transcript), media_type="text/plain")
    return with_session_cookie(response, session)


@app.post("/chat/")
async def post_chat(
    question: Annotated[str, fastapi.Form()] = "",
    subject: Annotated[str, fastapi.Form()] = DEFAULT_SUBJECT,
    image: Annotated[Optional[str], fastapi.Form()] = None,
    session: ChatSession = Depends(get_chat_session),
) -> Response:
    """Submit a question and return the user and bot turns it produced."""
    controller = session.controller
    if controller.pending:
        return error_response(409, "a question is already being answered", session)

    try:
        controller.subject = subject
    except ValueError as exc:
        return error_response(422, str(exc), session)

    before = len(controller.transcript)
    reply = await controller.submit(question, image or None)
    if reply is None:
        return with_session_cookie(Response(status_code=204), session)

    new_turns = controller.transcript[before:]
    response = Response(to_ndjson(new_turns), media_type="text/plain")
    return with_session_cookie(response, session)


@app.post("/api/reset")
async def reset_chat(session: ChatSession = Depends(get_chat_session)) -> Response:
    """Clear this session's transcript."""
    if session.controller.pending:
        return error_response(409, "a question is already being answered", session)
    session.controller.reset()
    return with_session_cookie(JSONResponse({"ok": True}), session)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "tutorchat.app:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=True,
        reload_dirs=[str(THIS_DIR)],
    )
