"""Quota backoff for the hosted language model.

When the API reports quota exhaustion (``RESOURCE_EXHAUSTED`` / HTTP 429)
the guard persists a timestamped record. Until ``reset_hours`` have
passed every AI operation short-circuits to its static fallback instead
of calling the API again.
"""

from __future__ import annotations

import json
import logging
import time
from collections.abc import Callable
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationError

from automind._constants import QUOTA_ERROR_MARKERS, QUOTA_KEY, QUOTA_RESET_HOURS

_logger = logging.getLogger(__name__)

_MS_PER_HOUR = 1000 * 60 * 60


class QuotaStatus(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    exhausted: bool
    timestamp: float
    """Epoch milliseconds when exhaustion was recorded."""


def is_quota_error(error: BaseException) -> bool:
    """Return ``True`` when *error* signals an exhausted API quota."""
    if getattr(error, "code", None) == 429:
        return True
    text = str(error)
    return any(marker in text for marker in QUOTA_ERROR_MARKERS)


def _now_ms() -> float:
    return time.time() * 1000


class QuotaGuard:
    """Persisted quota-exhaustion flag with a fixed reset window.

    Parameters
    ----------
    path
        JSON file holding the record under the ``geminiQuotaExhausted`` key.
    reset_hours
        Hours after which API calls are attempted again.
    clock
        Returns the current time in epoch milliseconds.
    """

    def __init__(
        self,
        path: Path,
        *,
        reset_hours: float = QUOTA_RESET_HOURS,
        clock: Callable[[], float] = _now_ms,
    ) -> None:
        self._path = path
        self._reset_hours = reset_hours
        self._clock = clock
        # Used when the state file cannot be written.
        self._unpersisted: QuotaStatus | None = None

    @property
    def path(self) -> Path:
        return self._path

    @property
    def reset_hours(self) -> float:
        return self._reset_hours

    def _read(self) -> QuotaStatus | None:
        if self._unpersisted is not None:
            return self._unpersisted
        try:
            text = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError:
            _logger.debug("Could not read quota state %s", self._path, exc_info=True)
            return None

        try:
            store: Any = json.loads(text)
            record = store[QUOTA_KEY] if isinstance(store, dict) else None
            if record is None:
                return None
            return QuotaStatus.model_validate(record)
        except (json.JSONDecodeError, ValidationError, KeyError):
            _logger.debug("Discarding unreadable quota state %s", self._path)
            self.clear()
            return None

    def clear(self) -> None:
        """Forget any recorded exhaustion."""
        self._unpersisted = None
        try:
            self._path.unlink(missing_ok=True)
        except OSError:
            _logger.debug("Could not remove quota state %s", self._path, exc_info=True)

    def is_exhausted(self) -> bool:
        """Whether AI calls should be skipped right now.

        A record older than the reset window is removed, re-enabling calls.
        """
        status = self._read()
        if status is None or not status.exhausted:
            return False
        hours_since = (self._clock() - status.timestamp) / _MS_PER_HOUR
        if hours_since >= self._reset_hours:
            self.clear()
            return False
        return True

    def mark_exhausted(self) -> None:
        """Record exhaustion at the current time."""
        status = QuotaStatus(exhausted=True, timestamp=self._clock())
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.write_text(json.dumps({QUOTA_KEY: status.model_dump()}), encoding="utf-8")
            self._unpersisted = None
        except OSError:
            _logger.debug("Could not persist quota state %s", self._path, exc_info=True)
            self._unpersisted = status
        _logger.warning(
            "API quota exhausted. AI features will be paused for %s hours.",
            f"{self._reset_hours:g}",
        )

    def handle_api_error(self, error: BaseException) -> bool:
        """Record exhaustion if *error* is a quota error.

        Returns ``True`` when it was one.
        """
        if is_quota_error(error):
            self.mark_exhausted()
            return True
        return False
