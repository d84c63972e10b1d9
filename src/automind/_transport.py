"""Request/response transport over the Gemini SDK."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Protocol

from google import genai
from google.genai import errors as genai_errors
from google.genai import types

from automind._redact import redact_for_log
from automind.config import AutoMindConfig
from automind.exceptions import AiResponseError, AiServiceError, AutoMindConfigError

_logger = logging.getLogger(__name__)


class Transport(Protocol):
    """Structural transport interface used by :class:`~automind.client.AutoMindClient`.

    Having a protocol here makes it easy to pass test doubles while
    keeping the production implementation (`GeminiTransport`) concrete.
    """

    async def generate(
        self,
        contents: Sequence[types.Content],
        *,
        system_instruction: str | None = None,
        response_schema: types.Schema | None = None,
        operation: str = "",
    ) -> str:
        ...


class GeminiTransport:
    """Generate content with ``google-genai`` and return the reply text.

    The SDK client is created on first use so a missing API key only
    surfaces when an AI feature is actually requested.
    """

    def __init__(self, config: AutoMindConfig, client: genai.Client | None = None) -> None:
        self._config = config
        self._client = client

    def _require_client(self) -> genai.Client:
        if self._client is None:
            if not self._config.has_api_key:
                raise AutoMindConfigError("No Gemini API key configured (set GEMINI_API_KEY)")
            self._client = genai.Client(api_key=self._config.api_key)
        return self._client

    async def generate(
        self,
        contents: Sequence[types.Content],
        *,
        system_instruction: str | None = None,
        response_schema: types.Schema | None = None,
        operation: str = "",
    ) -> str:
        """Send *contents* and return the stripped reply text.

        When *response_schema* is given the model is asked for JSON
        matching it.

        Raises
        ------
        AiServiceError
            The API rejected the request (``status_code`` carries the HTTP code).
        AiResponseError
            The reply carried no text.
        """
        client = self._require_client()
        config = types.GenerateContentConfig(
            system_instruction=system_instruction,
            response_mime_type="application/json" if response_schema is not None else None,
            response_schema=response_schema,
        )

        if self._config.api_trace_enabled:
            _logger.debug(
                "generate %s model=%s contents=%s",
                operation,
                self._config.model,
                redact_for_log(list(contents)),
            )

        try:
            response = await client.aio.models.generate_content(
                model=self._config.model,
                contents=list(contents),
                config=config,
            )
        except genai_errors.APIError as exc:
            raise AiServiceError(
                f"{operation or 'generate'} failed: {exc}",
                operation=operation,
                status_code=exc.code,
            ) from exc

        text = (response.text or "").strip()
        if self._config.api_trace_enabled:
            _logger.debug("generate %s reply=%s", operation, redact_for_log(text))
        if not text:
            raise AiResponseError(f"Empty reply for {operation or 'generate'}", operation=operation)
        return text
