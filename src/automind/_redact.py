"""Log-safe rendering of Gemini requests and replies.

With ``api_trace_enabled`` the transport logs prompts and replies at
DEBUG level. SDK option dicts can carry the API key and live payloads
carry raw audio, so keys are masked and inline blobs are reduced to
their MIME type and size.
"""

from __future__ import annotations

import re
from collections.abc import Mapping, Sequence
from typing import Any

from pydantic import BaseModel

_MAX_DEPTH = 20

# Compared after lower-casing and dropping separators, so ``api_key``,
# ``apiKey`` and ``x-goog-api-key`` all match.
_SECRET_KEYS: frozenset[str] = frozenset({"apikey", "key", "authorization", "xgoogapikey", "token"})
_BLOB_KEYS: frozenset[str] = frozenset({"inlinedata", "data"})

_SEPARATORS = re.compile(r"[^a-z0-9]")


def _normalize_key(key: Any) -> str:
    return _SEPARATORS.sub("", str(key).lower())


def _payload_size(data: Any) -> int:
    if isinstance(data, (bytes, bytearray)):
        return len(data)
    if isinstance(data, str):
        # Base64 text: four characters per three bytes.
        return len(data.rstrip("=")) * 3 // 4
    return 0


def _describe_blob(value: Any) -> str:
    if isinstance(value, BaseModel):
        value = value.model_dump(exclude_none=True)
    if isinstance(value, Mapping):
        mime = value.get("mime_type") or value.get("mimeType") or "unknown"
        return f"<blob {mime} {_payload_size(value.get('data'))}b>"
    return f"<blob {_payload_size(value)}b>"


def redact_for_log(value: Any, *, max_string: int = 512) -> Any:
    """Return a copy of *value* that is safe to put in a debug log.

    pydantic models (SDK ``Content``/``Part`` objects included) are
    dumped first; long strings are cut at *max_string* characters.
    """

    def walk(item: Any, depth: int) -> Any:
        if depth > _MAX_DEPTH:
            return "<max-depth>"
        if isinstance(item, BaseModel):
            item = item.model_dump(exclude_none=True)
        if item is None or isinstance(item, (bool, int, float)):
            return item
        if isinstance(item, str):
            return item if len(item) <= max_string else f"{item[:max_string]}…<truncated>"
        if isinstance(item, (bytes, bytearray)):
            return f"<{len(item)} bytes>"
        if isinstance(item, Mapping):
            result: dict[str, Any] = {}
            for key, child in item.items():
                name = _normalize_key(key)
                if name in _SECRET_KEYS:
                    result[str(key)] = "<redacted>"
                elif name in _BLOB_KEYS:
                    result[str(key)] = _describe_blob(child)
                else:
                    result[str(key)] = walk(child, depth + 1)
            return result
        if isinstance(item, Sequence):
            return [walk(child, depth + 1) for child in item]
        return repr(item)

    return walk(value, 0)
