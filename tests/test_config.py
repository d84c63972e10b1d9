from __future__ import annotations

from pathlib import Path

import pytest

from automind.config import AutoMindConfig
from automind.exceptions import AutoMindConfigError

_ENV_KEYS = (
    "GEMINI_API_KEY",
    "API_KEY",
    "AUTOMIND_MODEL",
    "AUTOMIND_LIVE_MODEL",
    "AUTOMIND_VOICE",
    "AUTOMIND_GEOLOCATION_URL",
    "AUTOMIND_STATE_DIR",
    "AUTOMIND_QUOTA_RESET_HOURS",
    "AUTOMIND_REQUEST_TIMEOUT",
    "AUTOMIND_API_TRACE_ENABLED",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


def test_defaults_without_environment() -> None:
    config = AutoMindConfig.from_env()

    assert config.api_key == ""
    assert not config.has_api_key
    assert config.model == "gemini-2.5-flash"
    assert config.voice_name == "Zephyr"
    assert config.quota_reset_hours == 12
    assert config.api_trace_enabled is False
    assert config.quota_file.name == "quota.json"


def test_gemini_key_preferred_over_generic_key(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("API_KEY", "generic")
    assert AutoMindConfig.from_env().api_key == "generic"

    monkeypatch.setenv("GEMINI_API_KEY", "gemini")
    assert AutoMindConfig.from_env().api_key == "gemini"


def test_environment_values_are_parsed(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("AUTOMIND_MODEL", "gemini-test")
    monkeypatch.setenv("AUTOMIND_STATE_DIR", str(tmp_path))
    monkeypatch.setenv("AUTOMIND_QUOTA_RESET_HOURS", "1.5")
    monkeypatch.setenv("AUTOMIND_API_TRACE_ENABLED", "yes")

    config = AutoMindConfig.from_env()

    assert config.model == "gemini-test"
    assert config.state_dir == tmp_path
    assert config.quota_file == tmp_path / "quota.json"
    assert config.quota_reset_hours == 1.5
    assert config.api_trace_enabled is True


def test_overrides_win_over_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("AUTOMIND_VOICE", "Puck")
    monkeypatch.setenv("AUTOMIND_REQUEST_TIMEOUT", "not-a-number")

    config = AutoMindConfig.from_env(voice_name="Kore", request_timeout=3.0, state_dir=tmp_path)

    assert config.voice_name == "Kore"
    assert config.request_timeout == 3.0
    assert config.state_dir == tmp_path


def test_invalid_number_raises_config_error(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("AUTOMIND_QUOTA_RESET_HOURS", "soon")

    with pytest.raises(AutoMindConfigError):
        AutoMindConfig.from_env()
