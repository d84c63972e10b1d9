"""Real-time voice conversation over the Gemini Live API.

The session streams microphone frames up the socket while a receive
loop handles transcription fragments, reply audio and interruptions.
All user-visible state (recording flag, transcript, error messages)
lives on :class:`LiveConversation` so a front end can poll it.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import AsyncIterator, Callable
from typing import Any, Protocol

import numpy as np
from google import genai
from google.genai import errors as genai_errors
from google.genai import types
from websockets.exceptions import ConnectionClosed

from automind._constants import ABNORMAL_CLOSE_CODE, CLOSE_CODE_RANGE, NORMAL_CLOSE_CODE, OUTPUT_SAMPLE_RATE
from automind.config import AutoMindConfig
from automind.exceptions import AudioFormatError, LiveSessionError, MicrophoneUnavailableError
from automind.live.audio import audio_bytes, create_blob, pcm16_to_float
from automind.models.chat import Sender, TranscriptEntry
from automind.quota import is_quota_error

_logger = logging.getLogger(__name__)

VOICE_SYSTEM_INSTRUCTION = (
    "You are AutoMind AI, a friendly, conversational, and super-knowledgeable car enthusiast and expert "
    "mechanic. You are designed for real-time voice conversations. Keep responses concise and engaging."
)

GENERIC_ERROR_MESSAGE = "An error occurred with the AI conversation. Please try again."
QUOTA_ERROR_MESSAGE = "AI quota exhausted. Please check your billing."
API_KEY_ERROR_MESSAGE = "API key issue detected. Please select or update your API key."
ABNORMAL_CLOSE_MESSAGE = "Connection unexpectedly closed. Please try again or check API key."
MICROPHONE_DENIED_MESSAGE = (
    "Microphone access denied. Please enable it in your system settings to use live voice features."
)

_ENTITY_NOT_FOUND = "Requested entity was not found."


def _close_frame(error: BaseException) -> tuple[int, str] | None:
    """Close code and reason when *error* reports a WebSocket close."""
    if isinstance(error, genai_errors.APIError):
        # The SDK re-raises socket closes as APIError carrying the close code.
        if error.code in CLOSE_CODE_RANGE:
            return error.code, error.message or ""
        return None
    if isinstance(error, ConnectionClosed):
        if error.rcvd is None:
            # No close frame received means the socket dropped.
            return ABNORMAL_CLOSE_CODE, ""
        return error.rcvd.code, error.rcvd.reason
    return None


class AudioSource(Protocol):
    """Captured microphone frames (float32 mono)."""

    def frames(self) -> AsyncIterator[np.ndarray]:
        ...

    def close(self) -> None:
        ...


class AudioPlayer(Protocol):
    """Reply audio sink."""

    def play(self, samples: np.ndarray) -> None:
        ...

    def stop_all(self) -> None:
        ...

    def close(self) -> None:
        ...


class LiveConversation:
    """One live voice conversation and its display state.

    Usage::

        conversation = LiveConversation(config)
        await conversation.run(open_microphone, open_speaker)
    """

    def __init__(self, config: AutoMindConfig, *, client: genai.Client | None = None) -> None:
        self._config = config
        self._client = client
        self._session: Any = None
        self._microphone: AudioSource | None = None
        self._player: AudioPlayer | None = None
        self._input_buffer = ""
        self._output_buffer = ""

        self.is_recording = False
        self.is_loading_response = False
        self.transcript: list[TranscriptEntry] = []
        self.microphone_error: str | None = None
        self.api_error: str | None = None
        self.is_api_key_missing = False

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    def connect_config(self) -> types.LiveConnectConfig:
        return types.LiveConnectConfig(
            response_modalities=[types.Modality.AUDIO],
            speech_config=types.SpeechConfig(
                voice_config=types.VoiceConfig(
                    prebuilt_voice_config=types.PrebuiltVoiceConfig(voice_name=self._config.voice_name),
                ),
            ),
            system_instruction=VOICE_SYSTEM_INSTRUCTION,
            output_audio_transcription=types.AudioTranscriptionConfig(),
            input_audio_transcription=types.AudioTranscriptionConfig(),
        )

    def _require_client(self) -> genai.Client:
        if self._client is None:
            self._client = genai.Client(api_key=self._config.api_key)
        return self._client

    # ------------------------------------------------------------------
    # Server events
    # ------------------------------------------------------------------

    def handle_message(self, message: types.LiveServerMessage) -> None:
        """Apply one server message to the conversation state."""
        self.is_loading_response = True
        content = message.server_content
        if content is None:
            return

        if content.output_transcription is not None and content.output_transcription.text:
            self._output_buffer += content.output_transcription.text
        if content.input_transcription is not None and content.input_transcription.text:
            self._input_buffer += content.input_transcription.text

        if content.turn_complete:
            user_text = self._input_buffer.strip()
            ai_text = self._output_buffer.strip()
            if user_text:
                self.transcript.append(TranscriptEntry(speaker=Sender.USER, text=user_text))
            if ai_text:
                self.transcript.append(TranscriptEntry(speaker=Sender.AI, text=ai_text))
            self._input_buffer = ""
            self._output_buffer = ""
            self.is_loading_response = False

        parts = content.model_turn.parts if content.model_turn is not None else None
        inline = parts[0].inline_data if parts else None
        if inline is not None and inline.data and self._player is not None:
            try:
                samples = pcm16_to_float(audio_bytes(inline.data), num_channels=1)
            except AudioFormatError:
                _logger.error("Error decoding audio data", exc_info=True)
            else:
                self._player.play(samples)

        if content.interrupted and self._player is not None:
            self._player.stop_all()

    def handle_error(self, error: BaseException) -> None:
        """Turn a session failure into a display message and release audio."""
        _logger.error("Live API error: %s", error)
        if is_quota_error(error):
            self.api_error = QUOTA_ERROR_MESSAGE
        elif _ENTITY_NOT_FOUND in str(error):
            self.api_error = API_KEY_ERROR_MESSAGE
            self.is_api_key_missing = True
        else:
            self.api_error = GENERIC_ERROR_MESSAGE
        self.is_loading_response = False
        self.is_recording = False
        self._release_audio()

    def handle_close(self, code: int, reason: str = "") -> None:
        _logger.debug("Live session closed: %s %s", code, reason)
        self.is_recording = False
        self.is_loading_response = False
        self._release_audio()
        if code == ABNORMAL_CLOSE_CODE:
            self.api_error = ABNORMAL_CLOSE_MESSAGE

    def handle_session_end(self, error: Exception) -> None:
        """Classify the exception that ended the receive loop.

        Anything after :meth:`stop` is a normal close. Otherwise socket
        closes go to :meth:`handle_close` and the rest to :meth:`handle_error`.
        """
        if not self.is_recording:
            _logger.debug("Live session ended after stop: %s", error)
            self.handle_close(NORMAL_CLOSE_CODE)
            return
        close = _close_frame(error)
        if close is None or is_quota_error(error):
            self.handle_error(error)
        else:
            self.handle_close(*close)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def _reset(self) -> None:
        self.microphone_error = None
        self.api_error = None
        self.is_loading_response = False
        self.is_api_key_missing = False
        self._input_buffer = ""
        self._output_buffer = ""
        self.transcript = []

    def _release_audio(self) -> None:
        microphone, self._microphone = self._microphone, None
        player, self._player = self._player, None
        if microphone is not None:
            microphone.close()
        if player is not None:
            player.stop_all()
            player.close()

    async def _stream_microphone(self, session: Any, microphone: AudioSource) -> None:
        async for frame in microphone.frames():
            await session.send_realtime_input(audio=create_blob(frame))

    async def _receive(self, session: Any) -> None:
        while self.is_recording:
            async for message in session.receive():
                self.handle_message(message)

    async def run(
        self,
        open_microphone: Callable[[], AudioSource],
        open_player: Callable[[], AudioPlayer],
    ) -> None:
        """Hold a conversation until :meth:`stop` is called or the session ends."""
        self._reset()
        if not self._config.has_api_key:
            self.is_api_key_missing = True
            return

        try:
            self._microphone = open_microphone()
            self._player = open_player()
        except LiveSessionError as exc:
            denied = isinstance(exc, MicrophoneUnavailableError) and exc.denied
            self.microphone_error = MICROPHONE_DENIED_MESSAGE if denied else f"Could not access microphone: {exc}"
            self.is_recording = False
            self.is_loading_response = False
            self._release_audio()
            return

        microphone = self._microphone
        self.is_recording = True
        self.is_loading_response = True
        sender: asyncio.Task[None] | None = None
        try:
            client = self._require_client()
            async with client.aio.live.connect(model=self._config.live_model, config=self.connect_config()) as session:
                _logger.debug("Live session opened (sample rate out=%d)", OUTPUT_SAMPLE_RATE)
                self._session = session
                self.api_error = None
                self.is_api_key_missing = False
                sender = asyncio.create_task(self._stream_microphone(session, microphone))
                await self._receive(session)
        except Exception as exc:
            self.handle_session_end(exc)
        finally:
            self._session = None
            if sender is not None:
                sender.cancel()
                try:
                    await sender
                except asyncio.CancelledError:
                    pass
                except Exception:
                    _logger.debug("Microphone streaming stopped with an error", exc_info=True)
            self.is_recording = False
            self.is_loading_response = False
            self._release_audio()

    async def stop(self) -> None:
        """End the conversation and release the audio devices."""
        self.is_recording = False
        self.is_loading_response = False
        session = self._session
        if session is not None:
            with contextlib.suppress(ConnectionClosed):
                await session.close()
        self._release_audio()
