from __future__ import annotations

import json
from pathlib import Path

from automind.exceptions import AiServiceError
from automind.quota import QuotaGuard, is_quota_error

_HOUR_MS = 60 * 60 * 1000


class _Clock:
    def __init__(self, now: float = 1_700_000_000_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


def _guard(tmp_path: Path, clock: _Clock) -> QuotaGuard:
    return QuotaGuard(tmp_path / "state" / "quota.json", reset_hours=12, clock=clock)


def test_is_quota_error_matches_status_and_markers() -> None:
    assert is_quota_error(AiServiceError("denied", status_code=429))
    assert is_quota_error(RuntimeError("429 RESOURCE_EXHAUSTED: quota exceeded"))
    assert is_quota_error(RuntimeError("RESOURCE_EXHAUSTED"))
    assert not is_quota_error(AiServiceError("bad request", status_code=400))
    assert not is_quota_error(RuntimeError("socket closed"))


def test_fresh_guard_is_not_exhausted(tmp_path: Path) -> None:
    assert not _guard(tmp_path, _Clock()).is_exhausted()


def test_mark_exhausted_persists_record(tmp_path: Path) -> None:
    clock = _Clock()
    guard = _guard(tmp_path, clock)

    guard.mark_exhausted()

    stored = json.loads(guard.path.read_text(encoding="utf-8"))
    assert stored == {"geminiQuotaExhausted": {"exhausted": True, "timestamp": clock.now}}
    assert guard.is_exhausted()
    # A second guard over the same file sees the record.
    assert _guard(tmp_path, clock).is_exhausted()


def test_record_expires_after_reset_window(tmp_path: Path) -> None:
    clock = _Clock()
    guard = _guard(tmp_path, clock)
    guard.mark_exhausted()

    clock.now += 11.9 * _HOUR_MS
    assert guard.is_exhausted()

    clock.now += 0.1 * _HOUR_MS
    assert not guard.is_exhausted()
    assert not guard.path.exists()


def test_unreadable_record_is_discarded(tmp_path: Path) -> None:
    guard = _guard(tmp_path, _Clock())
    guard.path.parent.mkdir(parents=True)
    guard.path.write_text("{not json", encoding="utf-8")

    assert not guard.is_exhausted()
    assert not guard.path.exists()


def test_handle_api_error_only_marks_quota_errors(tmp_path: Path) -> None:
    guard = _guard(tmp_path, _Clock())

    assert guard.handle_api_error(RuntimeError("timeout")) is False
    assert not guard.is_exhausted()

    assert guard.handle_api_error(AiServiceError("quota", status_code=429)) is True
    assert guard.is_exhausted()


def test_clear_removes_record(tmp_path: Path) -> None:
    guard = _guard(tmp_path, _Clock())
    guard.mark_exhausted()

    guard.clear()

    assert not guard.is_exhausted()
