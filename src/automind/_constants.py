"""Internal constants shared across the library."""

DEFAULT_MODEL = "gemini-2.5-flash"
DEFAULT_LIVE_MODEL = "gemini-2.5-flash-native-audio-preview-09-2025"
DEFAULT_VOICE = "Zephyr"
DEFAULT_GEOLOCATION_URL = "https://ipapi.co/json/"

QUOTA_KEY = "geminiQuotaExhausted"
QUOTA_RESET_HOURS: float = 12
QUOTA_ERROR_MARKERS: tuple[str, ...] = ("RESOURCE_EXHAUSTED", "429")

# ------------------------------------------------------------------
# Live audio
# ------------------------------------------------------------------

INPUT_SAMPLE_RATE = 16000
OUTPUT_SAMPLE_RATE = 24000
CAPTURE_FRAME_SIZE = 4096
PCM_SCALE = 32768.0
INPUT_MIME_TYPE = f"audio/pcm;rate={INPUT_SAMPLE_RATE}"

# WebSocket close codes (RFC 6455).
NORMAL_CLOSE_CODE = 1000
ABNORMAL_CLOSE_CODE = 1006
CLOSE_CODE_RANGE = range(1000, 1016)

BILLING_DOC_URL = "https://ai.google.dev/gemini-api/docs/billing"
