"""Compose the tutoring prompt and relay a single question to the model."""

import base64
import binascii
from typing import List, Optional, Union

import logfire
from pydantic_ai import Agent, RunContext
from pydantic_ai.messages import BinaryContent, ImageUrl, UserContent
from pydantic_ai.settings import ModelSettings

from . import settings
from .prompts import EMPTY_QUESTION_TEXT, IMAGE_ONLY_QUESTION_TEXT, build_system_prompt


class RelayError(Exception):
    """The model service could not produce an answer."""


class InvalidImageError(RelayError):
    """The attached image is not a usable data URL."""


# The subject tag travels as the run's deps so the system prompt is built per call.
solver_agent = Agent(
    settings.MODEL_NAME,
    deps_type=str,
    model_settings=ModelSettings(temperature=settings.TEMPERATURE),
    defer_model_check=True,
)


@solver_agent.system_prompt
def subject_instruction(ctx: RunContext[str]) -> str:
    return build_system_prompt(ctx.deps)


def image_content(image: str) -> Union[BinaryContent, ImageUrl]:
    """Turn a `data:` URL into binary image content; remote URLs pass through."""
    if image.startswith(("http://", "https://")):
        return ImageUrl(url=image)

    header, sep, payload = image.partition(",")
    if not sep or not header.startswith("data:"):
        raise InvalidImageError("image must be a data URL")

    params = header[len("data:") :].split(";")
    media_type = params[0].strip().lower()
    if not media_type.startswith("image/"):
        raise InvalidImageError(f"unsupported image type: {media_type or 'unknown'}")
    if "base64" not in params[1:]:
        raise InvalidImageError("image data URL must be base64 encoded")

    try:
        data = base64.b64decode(payload, validate=True)
    except binascii.Error as exc:
        raise InvalidImageError("image payload is not valid base64") from exc
    return BinaryContent(data=data, media_type=media_type)


def build_user_prompt(question: str, image: Optional[str] = None) -> Union[str, List[UserContent]]:
    """Build the user turn: the question alone, or question and image together."""
    if image:
        return [question or IMAGE_ONLY_QUESTION_TEXT, image_content(image)]
    return question or EMPTY_QUESTION_TEXT


async def solve(subject: str, question: Optional[str] = None, image: Optional[str] = None) -> str:
    """Ask the model one question and return its answer text unchanged.

    Unknown subjects get the base instruction only. A bad image raises
    `InvalidImageError` before the call; any failure of the call itself is
    raised as `RelayError`. Nothing is retried.
    """
    prompt = build_user_prompt(question or "", image)

    with logfire.span("solve {subject}", subject=subject, has_image=bool(image)):
        try:
            result = await solver_agent.run(prompt, deps=subject)
        except Exception as exc:
            logfire.exception("model call failed: {error}", error=str(exc))
            raise RelayError(str(exc) or exc.__class__.__name__) from exc

    return result.output
