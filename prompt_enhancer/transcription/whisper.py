"""WhisperTranscriptionClient — OpenAI Whisper speech-to-text backend."""
from openai import AsyncOpenAI, OpenAIError

from prompt_enhancer.constants import (
    DEFAULT_AUDIO_FILENAME,
    DEFAULT_AUDIO_MIME_TYPE,
    WHISPER_MODEL,
)
from prompt_enhancer.errors import TranscriptionError
from prompt_enhancer.transcription.client import TranscriptionClient


class WhisperTranscriptionClient(TranscriptionClient):

    def __init__(self, api_key: str) -> None:
        self._client = AsyncOpenAI(api_key=api_key)

    async def transcribe(self, audio: bytes, mime_type: str, filename: str) -> str:
        upload = (
            filename or DEFAULT_AUDIO_FILENAME,
            audio,
            mime_type or DEFAULT_AUDIO_MIME_TYPE,
        )
        try:
            response = await self._client.audio.transcriptions.create(
                model=WHISPER_MODEL,
                file=upload,
            )
        except OpenAIError as exc:
            raise TranscriptionError(str(exc)) from exc
        return response.text.strip()
