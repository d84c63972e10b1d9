"""Shared helpers for the content-generation endpoint modules.

It is internal to automind and may change at any time.
"""

from __future__ import annotations

from typing import TypeVar

from google.genai import types
from pydantic import BaseModel, ValidationError

from automind.exceptions import AiResponseError

TModel = TypeVar("TModel", bound=BaseModel)

QUOTA_UNAVAILABLE_HTML = (
    "<p><b>AI Analysis is temporarily unavailable due to exceeded API quota.</b> Please try again later.</p>"
)


def user_contents(prompt: str) -> list[types.Content]:
    """A single user turn carrying *prompt*."""
    return [types.Content(role="user", parts=[types.Part(text=prompt)])]


def string_schema(description: str | None = None, *, enum: list[str] | None = None) -> types.Schema:
    return types.Schema(type=types.Type.STRING, description=description, enum=enum)


def parse_reply(text: str, model_cls: type[TModel], *, operation: str) -> TModel:
    """Validate a JSON reply against *model_cls*.

    Raises :class:`AiResponseError` when the reply is not JSON or does
    not match the expected structure.
    """
    try:
        return model_cls.model_validate_json(text)
    except ValidationError as exc:
        raise AiResponseError(
            f"Invalid response structure for {operation}: {exc.error_count()} error(s)",
            operation=operation,
        ) from exc
