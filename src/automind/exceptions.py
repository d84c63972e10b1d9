"""Custom exception hierarchy for automind."""

from __future__ import annotations


class AutoMindError(Exception):
    """Base exception for all automind errors."""


class AutoMindConfigError(AutoMindError):
    """Invalid or missing configuration."""


class AiServiceError(AutoMindError):
    """Failure talking to the hosted language model."""

    def __init__(
        self,
        message: str,
        *,
        operation: str = "",
        status_code: int | None = None,
    ) -> None:
        self.operation = operation
        self.status_code = status_code
        super().__init__(message)

    @property
    def code(self) -> int | None:
        """HTTP status reported by the API, if any."""
        return self.status_code


class QuotaExhaustedError(AiServiceError):
    """API quota is exhausted; AI features are paused until the reset window passes."""


class AiResponseError(AiServiceError):
    """The model answered, but the payload is missing or malformed."""


class LocationError(AutoMindError):
    """Current location could not be determined.

    ``reason`` is one of ``"permission_denied"``, ``"position_unavailable"``
    or ``"timeout"``; the message is suitable for display.
    """

    def __init__(self, message: str, *, reason: str = "position_unavailable") -> None:
        self.reason = reason
        super().__init__(message)


class LiveSessionError(AutoMindError):
    """Live voice session failure."""


class MicrophoneUnavailableError(LiveSessionError):
    """Audio input device could not be opened.

    ``denied`` is ``True`` when the host refused access rather than the
    device being absent or busy.
    """

    def __init__(self, message: str, *, denied: bool = False) -> None:
        self.denied = denied
        super().__init__(message)


class AudioFormatError(AutoMindError):
    """PCM payload has an invalid length or encoding."""
