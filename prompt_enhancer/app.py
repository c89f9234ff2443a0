"""FastAPI transport — maps HTTP requests onto GeneratePipeline and back."""
import logging
from collections.abc import AsyncIterator
from contextlib import aclosing
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, StreamingResponse
from starlette.datastructures import UploadFile
from starlette.types import Lifespan

from prompt_enhancer.constants import (
    ACCESS_TOKEN_COOKIE,
    AUDIO_FIELD,
    BEARER_PREFIX,
    JSON_CONTENT_TYPE,
    MSG_ERR_INTERNAL,
    MSG_LOG_UNEXPECTED,
    MULTIPART_CONTENT_TYPE,
    PROMPT_FIELD,
    ROUTE_CREDITS,
    ROUTE_GENERATE,
    ROUTE_HEALTH,
    SSE_HEADERS,
    SSE_MEDIA_TYPE,
    WILDCARD_ORIGIN,
)
from prompt_enhancer.errors import PipelineError
from prompt_enhancer.pipeline import (
    AudioPrompt,
    GeneratePipeline,
    ImmediateResult,
    PromptRequest,
    StreamedResult,
    TextPrompt,
)
from prompt_enhancer.streaming import StreamEvent, encode_event

logger = logging.getLogger(__name__)


# ── request parsing (module-level so tests can import them directly) ──────────


def extract_access_token(request: Request) -> Optional[str]:
    """Bearer token from the Authorization header, else the session cookie."""
    header = request.headers.get("authorization", "")
    match header[: len(BEARER_PREFIX)].lower() == BEARER_PREFIX:
        case True:
            return header[len(BEARER_PREFIX):].strip() or None
        case False:
            return request.cookies.get(ACCESS_TOKEN_COOKIE) or None


async def parse_prompt_request(request: Request) -> PromptRequest:
    content_type = request.headers.get("content-type", "")
    media_type = content_type.split(";", 1)[0].strip().lower()
    if media_type == MULTIPART_CONTENT_TYPE:
        async with request.form() as form:
            upload = form.get(AUDIO_FIELD)
            match upload:
                case UploadFile():
                    return AudioPrompt(
                        audio=await upload.read(),
                        mime_type=upload.content_type or "",
                        filename=upload.filename or "",
                    )
                case _:
                    return AudioPrompt(audio=None)

    # Only JSON bodies carry a prompt.
    if media_type != JSON_CONTENT_TYPE:
        return TextPrompt(content=None)
    try:
        body = await request.json()
    except ValueError:
        return TextPrompt(content=None)
    match body:
        case dict():
            return TextPrompt(content=body.get(PROMPT_FIELD))
        case _:
            return TextPrompt(content=None)


async def sse_body(events: AsyncIterator[StreamEvent]) -> AsyncIterator[str]:
    async with aclosing(events):
        async for event in events:
            yield encode_event(event)


# ── app factory ───────────────────────────────────────────────────────────────


def create_app(
    pipeline: GeneratePipeline,
    cors_origins: tuple[str, ...] = (),
    lifespan: Optional[Lifespan] = None,
) -> FastAPI:
    app = FastAPI(title="Prompt Enhancer", lifespan=lifespan)
    # No origins configured means same-origin only.
    if cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=list(cors_origins),
            # Credentials only with an explicit origin allowlist.
            allow_credentials=WILDCARD_ORIGIN not in cors_origins,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    @app.exception_handler(PipelineError)
    async def _pipeline_error(_: Request, exc: PipelineError) -> JSONResponse:
        return JSONResponse({"error": exc.message}, status_code=exc.status_code)

    @app.exception_handler(Exception)
    async def _unexpected_error(request: Request, exc: Exception) -> JSONResponse:
        logger.exception(MSG_LOG_UNEXPECTED, request.url.path)
        return JSONResponse({"error": MSG_ERR_INTERNAL}, status_code=500)

    @app.post(ROUTE_GENERATE)
    async def generate(request: Request):
        prompt_request = await parse_prompt_request(request)
        result = await pipeline.handle_generate(prompt_request, extract_access_token(request))
        match result:
            case ImmediateResult(body=body):
                return JSONResponse(body)
            case StreamedResult(events=events):
                return StreamingResponse(
                    sse_body(events),
                    media_type=SSE_MEDIA_TYPE,
                    headers=SSE_HEADERS,
                )

    @app.get(ROUTE_CREDITS)
    async def credits(request: Request):
        identity = await pipeline.authenticate(extract_access_token(request), stage="credits")
        return {"credits": await pipeline.balance(identity)}

    @app.get(ROUTE_HEALTH)
    async def health():
        return {"status": "ok"}

    return app
