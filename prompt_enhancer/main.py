"""Entry point — wires Config → adapters → GeneratePipeline → FastAPI app."""
import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from rich.logging import RichHandler

from prompt_enhancer.app import create_app
from prompt_enhancer.config import Config
from prompt_enhancer.constants import MSG_SERVER_STARTING, MSG_TRANSCRIPTION_DISABLED
from prompt_enhancer.credits.sql import SqlCreditLedger
from prompt_enhancer.generation.claude import ClaudeGenerationClient
from prompt_enhancer.identity.access_token import JwtIdentityResolver
from prompt_enhancer.pipeline import GeneratePipeline
from prompt_enhancer.transcription.whisper import WhisperTranscriptionClient


def _setup_logging(level: str) -> None:
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    list(map(root.removeHandler, root.handlers[:]))
    root.addHandler(RichHandler(rich_tracebacks=True))


def _ledger_lifespan(ledger: SqlCreditLedger, auto_create: bool):
    @asynccontextmanager
    async def lifespan(_: FastAPI):
        if auto_create:
            await ledger.init_schema()
        yield
        await ledger.dispose()

    return lifespan


def build_app(config: Config) -> FastAPI:
    logger = logging.getLogger(__name__)

    ledger = SqlCreditLedger.from_url(config.database_url)
    transcriber = (
        WhisperTranscriptionClient(config.openai_api_key)
        if config.openai_api_key
        else None
    )
    if transcriber is None:
        logger.warning(MSG_TRANSCRIPTION_DISABLED)

    pipeline = GeneratePipeline(
        identity_resolver=JwtIdentityResolver(
            config.auth_jwt_secret, audience=config.auth_jwt_audience
        ),
        ledger=ledger,
        generator=ClaudeGenerationClient(
            config.anthropic_api_key,
            model=config.generation_model,
            max_tokens=config.generation_max_tokens,
            temperature=config.generation_temperature,
        ),
        transcriber=transcriber,
    )
    return create_app(
        pipeline,
        cors_origins=config.cors_origins,
        lifespan=_ledger_lifespan(ledger, config.database_auto_create),
    )


def main() -> None:
    config = Config.from_env()
    _setup_logging(config.log_level)

    logger = logging.getLogger(__name__)
    logger.info(MSG_SERVER_STARTING, config.host, config.port)

    app = build_app(config)
    uvicorn.run(app, host=config.host, port=config.port, log_config=None)


if __name__ == "__main__":
    main()
