"""Runtime configuration, read from the environment (and `.env` if present)."""

import os

from dotenv import load_dotenv

load_dotenv()

# pydantic-ai model identifier; needs OPENAI_API_KEY for the openai: provider
MODEL_NAME = os.getenv("TUTORCHAT_MODEL", "openai:gpt-4o")

# Low temperature keeps derivations reproducible between runs.
TEMPERATURE = 0.2

HOST = os.getenv("TUTORCHAT_HOST", "127.0.0.1")
PORT = int(os.getenv("TUTORCHAT_PORT", "8000"))

SESSION_COOKIE = "tutorchat_session"

# Sessions beyond this are dropped, least recently used first.
MAX_SESSIONS = int(os.getenv("TUTORCHAT_MAX_SESSIONS", "1000"))
