from __future__ import annotations

from google.genai import types

from automind._redact import redact_for_log


def test_redact_for_log_masks_keys_and_summarizes_audio() -> None:
    payload = {
        "role": "user",
        "apiKey": "AIza-secret",
        "parts": [{"text": "hello", "inlineData": {"data": "AAAA", "mimeType": "audio/pcm"}}],
        "headers": {"x-goog-api-key": "AIza-secret"},
    }

    redacted = redact_for_log(payload)
    assert redacted["role"] == "user"
    assert redacted["apiKey"] == "<redacted>"
    assert redacted["parts"][0]["text"] == "hello"
    assert redacted["parts"][0]["inlineData"] == "<blob audio/pcm 3b>"
    assert redacted["headers"]["x-goog-api-key"] == "<redacted>"


def test_redact_for_log_dumps_sdk_content() -> None:
    content = types.Content(
        role="user",
        parts=[types.Part(inline_data=types.Blob(data=b"\x00" * 8192, mime_type="audio/pcm;rate=16000"))],
    )

    redacted = redact_for_log([content])

    assert redacted[0]["role"] == "user"
    assert redacted[0]["parts"][0]["inline_data"] == "<blob audio/pcm;rate=16000 8192b>"


def test_redact_for_log_truncates_long_strings() -> None:
    long_value = "x" * 600
    redacted = redact_for_log({"value": long_value}, max_string=10)
    assert redacted["value"].startswith("x" * 10)
    assert "<truncated>" in redacted["value"]


def test_redact_for_log_summarizes_bytes() -> None:
    assert redact_for_log([b"\x00\x01\x02"]) == ["<3 bytes>"]
