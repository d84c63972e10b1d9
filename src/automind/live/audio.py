"""PCM framing, encoding and playback scheduling for live voice sessions.

Microphone audio is captured as float32 samples in ``[-1.0, 1.0]`` at
16 kHz, converted to signed 16-bit little-endian PCM and streamed in
frames of 4096 samples. Replies arrive as 24 kHz PCM16, optionally
Base64-encoded, and are queued back to back for playback.
"""

from __future__ import annotations

import base64
import binascii
import dataclasses
import itertools
from collections.abc import Iterator

import numpy as np
from google.genai import types

from automind._constants import CAPTURE_FRAME_SIZE, INPUT_MIME_TYPE, OUTPUT_SAMPLE_RATE, PCM_SCALE
from automind.exceptions import AudioFormatError

_PCM16 = np.dtype("<i2")


def float_to_pcm16(samples: np.ndarray) -> bytes:
    """Scale float samples by 32768 into little-endian int16 PCM.

    Values beyond full scale are clipped instead of wrapping around.
    """
    scaled = np.asarray(samples, dtype=np.float32).reshape(-1) * PCM_SCALE
    return np.clip(scaled, -PCM_SCALE, PCM_SCALE - 1).astype(_PCM16).tobytes()


def pcm16_to_float(data: bytes, num_channels: int = 1) -> np.ndarray:
    """Decode interleaved PCM16 into a ``(frames, channels)`` float32 array."""
    if num_channels < 1:
        raise AudioFormatError(f"num_channels must be positive, got {num_channels}")
    if len(data) % (_PCM16.itemsize * num_channels):
        raise AudioFormatError(f"{len(data)} bytes is not a whole number of {num_channels}-channel PCM16 frames")
    pcm = np.frombuffer(data, dtype=_PCM16)
    return (pcm.astype(np.float32) / PCM_SCALE).reshape(-1, num_channels)


def encode_base64(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


def decode_base64(data: str) -> bytes:
    try:
        return base64.b64decode(data, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise AudioFormatError("Audio payload is not valid Base64") from exc


def audio_bytes(data: bytes | str) -> bytes:
    """Raw PCM bytes from an inline payload that may still be Base64 text."""
    if isinstance(data, str):
        return decode_base64(data)
    return bytes(data)


def create_blob(samples: np.ndarray) -> types.Blob:
    """Wrap one captured frame for ``send_realtime_input``."""
    return types.Blob(data=float_to_pcm16(samples), mime_type=INPUT_MIME_TYPE)


def iter_frames(samples: np.ndarray, frame_size: int = CAPTURE_FRAME_SIZE) -> Iterator[np.ndarray]:
    """Split a mono sample buffer into consecutive frames; the last one may be short."""
    flat = np.asarray(samples, dtype=np.float32).reshape(-1)
    for start in range(0, len(flat), frame_size):
        yield flat[start : start + frame_size]


def duration_seconds(num_frames: int, sample_rate: int = OUTPUT_SAMPLE_RATE) -> float:
    return num_frames / sample_rate


@dataclasses.dataclass(frozen=True)
class ScheduledChunk:
    """A decoded reply chunk placed on the playback timeline."""

    id: int
    samples: np.ndarray
    start_time: float
    duration: float

    @property
    def end_time(self) -> float:
        return self.start_time + self.duration


class PlaybackScheduler:
    """Gapless playback timeline for reply audio.

    Each chunk starts at ``max(next_start_time, now)`` and pushes
    ``next_start_time`` forward by its duration, so chunks play back to
    back even when they arrive faster than real time. ``interrupt()``
    drops everything pending and resets the timeline.
    """

    def __init__(self, sample_rate: int = OUTPUT_SAMPLE_RATE) -> None:
        self._sample_rate = sample_rate
        self._ids = itertools.count(1)
        self._sources: dict[int, ScheduledChunk] = {}
        self.next_start_time = 0.0

    @property
    def sample_rate(self) -> int:
        return self._sample_rate

    @property
    def pending(self) -> list[ScheduledChunk]:
        return sorted(self._sources.values(), key=lambda chunk: chunk.start_time)

    def schedule(self, samples: np.ndarray, now: float) -> ScheduledChunk:
        self.next_start_time = max(self.next_start_time, now)
        frames = samples.shape[0] if samples.ndim else 0
        chunk = ScheduledChunk(
            id=next(self._ids),
            samples=samples,
            start_time=self.next_start_time,
            duration=duration_seconds(frames, self._sample_rate),
        )
        self.next_start_time = chunk.end_time
        self._sources[chunk.id] = chunk
        return chunk

    def finish(self, chunk_id: int) -> None:
        self._sources.pop(chunk_id, None)

    def prune(self, now: float) -> list[ScheduledChunk]:
        """Forget chunks that have finished playing by *now* and return them."""
        done = [chunk for chunk in self._sources.values() if chunk.end_time <= now]
        for chunk in done:
            del self._sources[chunk.id]
        return done

    def interrupt(self) -> list[ScheduledChunk]:
        """Stop everything pending and reset the timeline."""
        stopped = self.pending
        self._sources.clear()
        self.next_start_time = 0.0
        return stopped
