"""GeneratePipeline — prompt generation request handling, transport-agnostic."""
import logging
import time
from collections.abc import AsyncIterator
from contextlib import aclosing
from dataclasses import dataclass
from typing import Any, Optional, Union

from prompt_enhancer.constants import (
    MSG_ERR_AUDIO_REQUIRED,
    MSG_ERR_CHECK_CREDITS,
    MSG_ERR_GENERATION,
    MSG_ERR_NO_SPEECH,
    MSG_ERR_PROCESS_REQUEST,
    MSG_ERR_PROMPT_REQUIRED,
    MSG_ERR_TRANSCRIPTION,
    MSG_LOG_BALANCE_FAILED,
    MSG_LOG_CREDIT_SPENT,
    MSG_LOG_DECREMENT_FAILED,
    MSG_LOG_INSUFFICIENT,
    MSG_LOG_STREAM_DONE,
    MSG_LOG_STREAM_FAILED,
    MSG_LOG_TRANSCRIBED,
    MSG_LOG_TRANSCRIPTION_FAILED,
    MSG_LOG_UNAUTHORIZED,
    MSG_LOG_VALIDATION_FAILED,
    SYSTEM_PROMPT,
)
from prompt_enhancer.credits.ledger import CreditLedger
from prompt_enhancer.errors import (
    AuthError,
    InsufficientCreditsError,
    InternalError,
    LedgerError,
    TranscriptionError,
    ValidationError,
)
from prompt_enhancer.generation.client import GenerationClient
from prompt_enhancer.identity.resolver import Identity, IdentityResolver
from prompt_enhancer.streaming import (
    ChunkEvent,
    CompleteEvent,
    ErrorEvent,
    StreamEvent,
    TranscriptionCompleteEvent,
)
from prompt_enhancer.transcription.client import TranscriptionClient

logger = logging.getLogger(__name__)


# ── request / result types ────────────────────────────────────────────────────


@dataclass(frozen=True)
class TextPrompt:
    # Raw JSON value; validated by the pipeline.
    content: Any


@dataclass(frozen=True)
class AudioPrompt:
    audio: Optional[bytes]
    mime_type: str = ""
    filename: str = ""


PromptRequest = Union[TextPrompt, AudioPrompt]


@dataclass(frozen=True)
class ImmediateResult:
    body: dict


@dataclass(frozen=True)
class StreamedResult:
    events: AsyncIterator[StreamEvent]
    credits_remaining: int


# ── pure helpers ──────────────────────────────────────────────────────────────


def resolve_prompt_text(content: Any) -> str:
    """Return the trimmed prompt or raise ValidationError."""
    match content:
        case str() as text if text.strip():
            return text.strip()
        case _:
            raise ValidationError(MSG_ERR_PROMPT_REQUIRED)


def transcription_body(transcription: str) -> dict:
    event = TranscriptionCompleteEvent(transcription).to_dict()
    action = event.pop("type")
    return {"success": True, **event, "action": action}


# ── pipeline ──────────────────────────────────────────────────────────────────


class GeneratePipeline:
    """Validates, authenticates, charges one credit and streams the rewritten prompt.

    Adapters are injected once at startup; the pipeline holds no per-request state.
    """

    def __init__(
        self,
        identity_resolver: IdentityResolver,
        ledger: CreditLedger,
        generator: GenerationClient,
        transcriber: Optional[TranscriptionClient] = None,
        system_prompt: str = SYSTEM_PROMPT,
    ) -> None:
        self._identity = identity_resolver
        self._ledger = ledger
        self._generator = generator
        self._transcriber = transcriber
        self._system_prompt = system_prompt

    async def handle_generate(
        self, request: PromptRequest, access_token: Optional[str]
    ) -> Union[ImmediateResult, StreamedResult]:
        match request:
            case AudioPrompt(audio=None) | AudioPrompt(audio=b""):
                logger.info(MSG_LOG_VALIDATION_FAILED, "audio", MSG_ERR_AUDIO_REQUIRED)
                raise ValidationError(MSG_ERR_AUDIO_REQUIRED)
            case AudioPrompt():
                identity = await self.authenticate(access_token, stage="transcribe")
                return await self._transcribe(identity, request)
            case TextPrompt(content=content):
                try:
                    prompt = resolve_prompt_text(content)
                except ValidationError as exc:
                    logger.info(MSG_LOG_VALIDATION_FAILED, "prompt", exc.message)
                    raise
                identity = await self.authenticate(access_token, stage="generate")
                remaining = await self._spend_credit(identity)
                return StreamedResult(
                    events=self._stream(identity, prompt, remaining),
                    credits_remaining=remaining,
                )
            case _:
                raise ValidationError(MSG_ERR_PROMPT_REQUIRED)

    async def authenticate(self, access_token: Optional[str], stage: str) -> Identity:
        identity = await self._identity.resolve(access_token)
        match identity:
            case None:
                logger.info(MSG_LOG_UNAUTHORIZED, stage)
                raise AuthError()
            case _:
                return identity

    async def balance(self, identity: Identity) -> int:
        try:
            return await self._ledger.get_balance(identity)
        except LedgerError as exc:
            logger.error(MSG_LOG_BALANCE_FAILED, identity.user_id, exc)
            raise InternalError(MSG_ERR_CHECK_CREDITS) from exc

    # ── stages ────────────────────────────────────────────────────────────────

    async def _transcribe(self, identity: Identity, request: AudioPrompt) -> ImmediateResult:
        if self._transcriber is None:
            logger.error(MSG_LOG_TRANSCRIPTION_FAILED, identity.user_id, "not configured")
            raise InternalError(MSG_ERR_TRANSCRIPTION)
        try:
            text = await self._transcriber.transcribe(
                request.audio, request.mime_type, request.filename
            )
        except TranscriptionError as exc:
            logger.error(MSG_LOG_TRANSCRIPTION_FAILED, identity.user_id, exc)
            raise InternalError(MSG_ERR_TRANSCRIPTION) from exc

        logger.info(MSG_LOG_TRANSCRIBED, len(request.audio), request.mime_type, identity.user_id)
        match text.strip():
            case "":
                raise ValidationError(MSG_ERR_NO_SPEECH)
            case transcription:
                return ImmediateResult(transcription_body(transcription))

    async def _spend_credit(self, identity: Identity) -> int:
        """Check the balance, then atomically take one credit. Returns the remaining figure."""
        balance = await self.balance(identity)
        if balance <= 0:
            logger.info(MSG_LOG_INSUFFICIENT, identity.user_id, balance)
            raise InsufficientCreditsError()

        try:
            spent = await self._ledger.decrement_one(identity)
        except LedgerError as exc:
            logger.error(MSG_LOG_DECREMENT_FAILED, identity.user_id, exc)
            raise InternalError(MSG_ERR_PROCESS_REQUEST) from exc
        if not spent:
            logger.error(MSG_LOG_DECREMENT_FAILED, identity.user_id, "no credit was spent")
            raise InternalError(MSG_ERR_PROCESS_REQUEST)

        # Pre-decrement read minus one; not re-read after the update.
        remaining = balance - 1
        logger.info(MSG_LOG_CREDIT_SPENT, identity.user_id, remaining)
        return remaining

    async def _stream(
        self, identity: Identity, prompt: str, credits_remaining: int
    ) -> AsyncIterator[StreamEvent]:
        started = time.monotonic()
        chunks = 0
        try:
            async with aclosing(
                self._generator.generate_stream(prompt, self._system_prompt)
            ) as fragments:
                async for fragment in fragments:
                    chunks += 1
                    yield ChunkEvent(fragment)
        except Exception as exc:
            logger.error(MSG_LOG_STREAM_FAILED, identity.user_id, chunks, exc)
            yield ErrorEvent(MSG_ERR_GENERATION)
            return

        logger.info(MSG_LOG_STREAM_DONE, chunks, identity.user_id, time.monotonic() - started)
        yield CompleteEvent(credits_remaining)
