"""Chat and voice transcript models."""

from __future__ import annotations

from enum import StrEnum

from pydantic import Field

from automind.models._base import AutoMindModel


class Sender(StrEnum):
    USER = "user"
    AI = "ai"


class ChatMessage(AutoMindModel):
    sender: Sender
    text: str
    suggestions: list[str] | None = None

    @property
    def api_role(self) -> str:
        """Role name the Gemini API expects for this message."""
        return "model" if self.sender == Sender.AI else "user"


class CopilotReply(AutoMindModel):
    """Copilot answer: HTML ``text`` plus follow-up question suggestions."""

    text: str
    suggestions: list[str] = Field(default_factory=list)


class TranscriptEntry(AutoMindModel):
    speaker: Sender
    text: str
