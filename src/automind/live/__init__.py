"""Live voice interaction.

Audio device streams live in :mod:`automind.live.devices`, which needs
the PortAudio shared library; import it explicitly where audio hardware
is used.
"""

from automind.live.audio import (
    PlaybackScheduler,
    ScheduledChunk,
    create_blob,
    decode_base64,
    encode_base64,
    float_to_pcm16,
    iter_frames,
    pcm16_to_float,
)
from automind.live.session import AudioPlayer, AudioSource, LiveConversation

__all__ = [
    "AudioPlayer",
    "AudioSource",
    "LiveConversation",
    "PlaybackScheduler",
    "ScheduledChunk",
    "create_blob",
    "decode_base64",
    "encode_base64",
    "float_to_pcm16",
    "iter_frames",
    "pcm16_to_float",
]
