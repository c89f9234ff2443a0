"""All magic values live here — no inline literals anywhere else."""

# HTTP routes
ROUTE_GENERATE = "/api/generate"
ROUTE_CREDITS = "/api/credits"
ROUTE_HEALTH = "/health"

# Request parsing
MULTIPART_CONTENT_TYPE = "multipart/form-data"
JSON_CONTENT_TYPE = "application/json"
WILDCARD_ORIGIN = "*"
AUDIO_FIELD = "audio"
PROMPT_FIELD = "prompt"
BEARER_PREFIX = "bearer "
ACCESS_TOKEN_COOKIE = "sb-access-token"

# Server-Sent Events
SSE_MEDIA_TYPE = "text/event-stream"
SSE_DATA_PREFIX = "data: "
SSE_EVENT_SEPARATOR = "\n\n"
SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
}

# Stream event types
EVENT_CHUNK = "chunk"
EVENT_COMPLETE = "complete"
EVENT_ERROR = "error"
EVENT_TRANSCRIPTION_COMPLETE = "transcription_complete"

# Voice transcription
WHISPER_MODEL = "whisper-1"
DEFAULT_AUDIO_FILENAME = "recording.webm"
DEFAULT_AUDIO_MIME_TYPE = "audio/webm"

# Text generation
DEFAULT_GENERATION_MODEL = "claude-sonnet-4-20250514"
DEFAULT_GENERATION_MAX_TOKENS = 2500
DEFAULT_GENERATION_TEMPERATURE = 0.1
ANTHROPIC_TEXT_DELTA_EVENT = "content_block_delta"
ANTHROPIC_TEXT_DELTA = "text_delta"
SYSTEM_PROMPT = (
    "You are an AI assistant specialized in improving user prompts for other AI systems.\n"
    "Your goal is to take the user's original prompt and rewrite it to make it clearer, "
    "more detailed, and more likely to get high-quality results.\n"
    "- Do not change the meaning or intention of the original prompt.\n"
    "- Do not comment on what you improved, just write the improved prompt with no other comment.\n"
    "- Add hex codes for colors if the user does not specify them.\n"
    "- Try to not exceed 800 tokens."
)

# Identity
DEFAULT_JWT_AUDIENCE = "authenticated"
JWT_ALGORITHMS = ("HS256",)

# Credit ledger
DEFAULT_DATABASE_URL = "sqlite+aiosqlite:///./credits.db"
USERS_TABLE = "users"

# Server
DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 8000

# Client-facing error messages
MSG_ERR_PROMPT_REQUIRED = "Prompt is required"
MSG_ERR_AUDIO_REQUIRED = "Audio file is required"
MSG_ERR_NO_SPEECH = "No speech detected in audio"
MSG_ERR_UNAUTHORIZED = "Unauthorized"
MSG_ERR_INSUFFICIENT_CREDITS = "Insufficient credits"
MSG_ERR_CHECK_CREDITS = "Failed to check credits"
MSG_ERR_PROCESS_REQUEST = "Failed to process request"
MSG_ERR_TRANSCRIPTION = "Failed to transcribe audio"
MSG_ERR_GENERATION = "Failed to generate response"
MSG_ERR_INTERNAL = "Internal server error"

# Log messages
MSG_SERVER_STARTING = "Starting prompt enhancer on %s:%s…"
MSG_TRANSCRIPTION_DISABLED = "OPENAI_API_KEY not set — voice transcription disabled"
MSG_LOG_VALIDATION_FAILED = "Rejected request at %s: %s"
MSG_LOG_UNAUTHORIZED = "Unauthorized request at %s"
MSG_LOG_TRANSCRIBED = "Transcribed %d bytes (%s) for user %s"
MSG_LOG_TRANSCRIPTION_FAILED = "Transcription failed for user %s: %s"
MSG_LOG_BALANCE_FAILED = "Error fetching credits for user %s: %s"
MSG_LOG_INSUFFICIENT = "User %s has no credits left (balance=%d)"
MSG_LOG_DECREMENT_FAILED = "Error decrementing credits for user %s: %s"
MSG_LOG_CREDIT_SPENT = "Spent 1 credit for user %s, %d remaining"
MSG_LOG_STREAM_DONE = "✓ Streamed %d chunks for user %s (%.1fs)"
MSG_LOG_STREAM_FAILED = "✗ Streaming failed for user %s after %d chunks: %s"
MSG_LOG_UNEXPECTED = "Unexpected error handling %s"
MSG_LOG_TOKEN_REJECTED = "Access token rejected: %s"
