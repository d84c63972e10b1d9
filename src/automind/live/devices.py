"""Microphone and speaker streams backed by sounddevice.

PortAudio invokes the stream callbacks on its own thread. Captured
frames are handed to the event loop with ``call_soon_threadsafe``;
reply chunks are queued under a lock and drained by the output callback.
"""

from __future__ import annotations

import asyncio
import collections
import logging
import threading
from collections.abc import AsyncIterator
from typing import Any

import numpy as np
import sounddevice as sd

from automind._constants import CAPTURE_FRAME_SIZE, INPUT_SAMPLE_RATE, OUTPUT_SAMPLE_RATE
from automind.exceptions import LiveSessionError, MicrophoneUnavailableError
from automind.live.audio import PlaybackScheduler, ScheduledChunk

_logger = logging.getLogger(__name__)


class MicrophoneStream:
    """Mono float32 capture delivering ``frame_size`` samples per frame."""

    def __init__(
        self,
        loop: asyncio.AbstractEventLoop,
        *,
        sample_rate: int = INPUT_SAMPLE_RATE,
        frame_size: int = CAPTURE_FRAME_SIZE,
        device: int | str | None = None,
    ) -> None:
        self._loop = loop
        self._queue: asyncio.Queue[np.ndarray | None] = asyncio.Queue()
        try:
            self._stream = sd.InputStream(
                samplerate=sample_rate,
                blocksize=frame_size,
                channels=1,
                dtype="float32",
                device=device,
                callback=self._callback,
            )
            self._stream.start()
        except sd.PortAudioError as exc:
            message = str(exc)
            raise MicrophoneUnavailableError(message, denied="denied" in message.lower()) from exc

    def _callback(self, indata: np.ndarray, frames: int, time_info: Any, status: sd.CallbackFlags) -> None:
        if status:
            _logger.debug("Input stream status: %s", status)
        self._loop.call_soon_threadsafe(self._queue.put_nowait, indata[:, 0].copy())

    async def frames(self) -> AsyncIterator[np.ndarray]:
        while True:
            frame = await self._queue.get()
            if frame is None:
                return
            yield frame

    def close(self) -> None:
        self._stream.stop()
        self._stream.close()
        self._loop.call_soon_threadsafe(self._queue.put_nowait, None)


class SpeakerStream:
    """Gapless playback of reply chunks on the default output device."""

    def __init__(self, *, sample_rate: int = OUTPUT_SAMPLE_RATE, device: int | str | None = None) -> None:
        self._scheduler = PlaybackScheduler(sample_rate)
        self._lock = threading.Lock()
        self._queue: collections.deque[ScheduledChunk] = collections.deque()
        self._offset = 0
        try:
            self._stream = sd.OutputStream(
                samplerate=sample_rate,
                channels=1,
                dtype="float32",
                device=device,
                callback=self._callback,
            )
            self._stream.start()
        except sd.PortAudioError as exc:
            raise LiveSessionError(f"Could not open audio output: {exc}") from exc

    @property
    def scheduler(self) -> PlaybackScheduler:
        return self._scheduler

    def play(self, samples: np.ndarray) -> None:
        mono = np.asarray(samples, dtype=np.float32).reshape(samples.shape[0], -1)[:, 0]
        with self._lock:
            self._scheduler.prune(self._stream.time)
            self._queue.append(self._scheduler.schedule(mono, now=self._stream.time))

    def _callback(self, outdata: np.ndarray, frames: int, time_info: Any, status: sd.CallbackFlags) -> None:
        if status:
            _logger.debug("Output stream status: %s", status)
        written = 0
        with self._lock:
            while written < frames and self._queue:
                chunk = self._queue[0]
                take = min(frames - written, len(chunk.samples) - self._offset)
                outdata[written : written + take, 0] = chunk.samples[self._offset : self._offset + take]
                written += take
                self._offset += take
                if self._offset >= len(chunk.samples):
                    self._queue.popleft()
                    self._scheduler.finish(chunk.id)
                    self._offset = 0
        outdata[written:] = 0

    def stop_all(self) -> None:
        with self._lock:
            self._queue.clear()
            self._offset = 0
            self._scheduler.interrupt()

    def close(self) -> None:
        self.stop_all()
        self._stream.stop()
        self._stream.close()
