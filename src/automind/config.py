"""Client configuration for automind."""

from __future__ import annotations

import dataclasses
import os
from pathlib import Path
from typing import Any

from automind._constants import (
    DEFAULT_GEOLOCATION_URL,
    DEFAULT_LIVE_MODEL,
    DEFAULT_MODEL,
    DEFAULT_VOICE,
    QUOTA_RESET_HOURS,
)
from automind.exceptions import AutoMindConfigError


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


def _default_state_dir() -> Path:
    return Path.home() / ".automind"


@dataclasses.dataclass(frozen=True)
class AutoMindConfig:
    """Client configuration.

    Parameters
    ----------
    api_key : str
        Gemini API key. May be empty; AI calls then fail and fall back
        to static content, and live sessions report a missing key.
    model : str
        Model used for request/response content generation.
    live_model : str
        Native-audio model used by the live voice session.
    voice_name : str
        Prebuilt voice for live audio replies.
    quota_reset_hours : float
        Hours AI features stay paused after a quota error.
    state_dir : Path
        Directory holding the persisted quota record.
    geolocation_url : str
        IP geolocation endpoint used to approximate the current location.
    request_timeout : float
        Timeout in seconds for geolocation requests.
    api_trace_enabled : bool
        Log redacted prompts and responses at DEBUG level.
    """

    api_key: str = ""
    model: str = DEFAULT_MODEL
    live_model: str = DEFAULT_LIVE_MODEL
    voice_name: str = DEFAULT_VOICE
    quota_reset_hours: float = QUOTA_RESET_HOURS
    state_dir: Path = dataclasses.field(default_factory=_default_state_dir)
    geolocation_url: str = DEFAULT_GEOLOCATION_URL
    request_timeout: float = 10.0
    api_trace_enabled: bool = False

    @property
    def quota_file(self) -> Path:
        return self.state_dir / "quota.json"

    @property
    def has_api_key(self) -> bool:
        return bool(self.api_key.strip())

    @classmethod
    def from_env(cls, **overrides: Any) -> AutoMindConfig:
        """Create configuration from environment variables.

        Reads ``GEMINI_API_KEY`` (falling back to ``API_KEY``) and optional
        ``AUTOMIND_*`` variables. Explicit keyword arguments override
        environment values.

        Raises
        ------
        AutoMindConfigError
            When a numeric variable cannot be parsed.
        """
        env = os.environ
        config_kwargs: dict[str, Any] = {}

        api_key = env.get("GEMINI_API_KEY") or env.get("API_KEY")
        if api_key is not None:
            config_kwargs["api_key"] = api_key

        _ENV_CONFIG_MAP = {
            "AUTOMIND_MODEL": "model",
            "AUTOMIND_LIVE_MODEL": "live_model",
            "AUTOMIND_VOICE": "voice_name",
            "AUTOMIND_GEOLOCATION_URL": "geolocation_url",
        }
        for env_key, field_name in _ENV_CONFIG_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val

        state_dir = env.get("AUTOMIND_STATE_DIR")
        if state_dir is not None and "state_dir" not in overrides:
            config_kwargs["state_dir"] = Path(state_dir).expanduser()

        for env_key, field_name in (
            ("AUTOMIND_QUOTA_RESET_HOURS", "quota_reset_hours"),
            ("AUTOMIND_REQUEST_TIMEOUT", "request_timeout"),
        ):
            raw = env.get(env_key)
            if raw is None or field_name in overrides:
                continue
            try:
                config_kwargs[field_name] = float(raw)
            except ValueError as exc:
                raise AutoMindConfigError(f"{env_key} must be a number, got {raw!r}") from exc

        if "api_trace_enabled" not in overrides:
            config_kwargs["api_trace_enabled"] = _env_bool(env.get("AUTOMIND_API_TRACE_ENABLED"), False)

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
