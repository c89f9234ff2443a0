"""Exception taxonomy for the prompt enhancer."""

from prompt_enhancer.constants import (
    MSG_ERR_INSUFFICIENT_CREDITS,
    MSG_ERR_INTERNAL,
    MSG_ERR_PROMPT_REQUIRED,
    MSG_ERR_UNAUTHORIZED,
)


class PromptEnhancerError(Exception):
    """Base exception for the prompt enhancer."""


class ConfigurationError(PromptEnhancerError, ValueError):
    """Raised when required configuration is missing or invalid."""


class PipelineError(PromptEnhancerError):
    """A pre-stream failure reported to the caller with an HTTP status."""

    status_code: int = 500
    default_message: str = MSG_ERR_INTERNAL

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(PipelineError):
    status_code = 400
    default_message = MSG_ERR_PROMPT_REQUIRED


class AuthError(PipelineError):
    status_code = 401
    default_message = MSG_ERR_UNAUTHORIZED


class InsufficientCreditsError(PipelineError):
    status_code = 402
    default_message = MSG_ERR_INSUFFICIENT_CREDITS


class InternalError(PipelineError):
    status_code = 500


class TranscriptionError(PromptEnhancerError):
    """Raised when the speech-to-text backend is unreachable or rejects the audio."""


class LedgerError(PromptEnhancerError):
    """Raised when the credit store cannot be read or written."""


class StreamingError(PromptEnhancerError):
    """Raised when generation fails after the response stream has started."""
