from dataclasses import dataclass
from typing import Optional
import os
from dotenv import load_dotenv

from prompt_enhancer.constants import (
    DEFAULT_DATABASE_URL,
    DEFAULT_GENERATION_MAX_TOKENS,
    DEFAULT_GENERATION_MODEL,
    DEFAULT_GENERATION_TEMPERATURE,
    DEFAULT_HOST,
    DEFAULT_JWT_AUDIENCE,
    DEFAULT_PORT,
)
from prompt_enhancer.errors import ConfigurationError


def _parse_bool(raw: str) -> bool:
    return raw.strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Config:
    anthropic_api_key: str
    auth_jwt_secret: str
    auth_jwt_audience: str
    openai_api_key: Optional[str]
    database_url: str
    database_auto_create: bool
    generation_model: str
    generation_max_tokens: int
    generation_temperature: float
    log_level: str
    host: str
    port: int
    cors_origins: tuple[str, ...]

    @classmethod
    def from_env(cls) -> "Config":
        load_dotenv()

        anthropic_api_key = os.getenv("ANTHROPIC_API_KEY")
        jwt_secret = os.getenv("AUTH_JWT_SECRET")
        jwt_audience = os.getenv("AUTH_JWT_AUDIENCE", DEFAULT_JWT_AUDIENCE)
        openai_api_key = os.getenv("OPENAI_API_KEY") or None
        database_url = os.getenv("DATABASE_URL", DEFAULT_DATABASE_URL)
        auto_create = os.getenv("DATABASE_AUTO_CREATE", "false")
        model = os.getenv("GENERATION_MODEL", DEFAULT_GENERATION_MODEL)
        max_tokens = os.getenv("GENERATION_MAX_TOKENS", str(DEFAULT_GENERATION_MAX_TOKENS))
        temperature = os.getenv("GENERATION_TEMPERATURE", str(DEFAULT_GENERATION_TEMPERATURE))
        log_level = os.getenv("LOG_LEVEL", "INFO")
        host = os.getenv("HOST", DEFAULT_HOST)
        port = os.getenv("PORT", str(DEFAULT_PORT))
        raw_origins = os.getenv("CORS_ORIGINS", "")

        origins = tuple(o.strip() for o in raw_origins.split(",") if o.strip())

        try:
            max_tokens_value = int(max_tokens)
            temperature_value = float(temperature)
            port_value = int(port)
        except ValueError as exc:
            raise ConfigurationError(f"Invalid numeric setting in .env: {exc}") from exc

        return cls._validate(
            anthropic_api_key=anthropic_api_key,
            auth_jwt_secret=jwt_secret,
            auth_jwt_audience=jwt_audience,
            openai_api_key=openai_api_key,
            database_url=database_url,
            database_auto_create=_parse_bool(auto_create),
            generation_model=model,
            generation_max_tokens=max_tokens_value,
            generation_temperature=temperature_value,
            log_level=log_level,
            host=host,
            port=port_value,
            cors_origins=origins,
        )

    @staticmethod
    def _validate(
        anthropic_api_key: Optional[str],
        auth_jwt_secret: Optional[str],
        auth_jwt_audience: str,
        openai_api_key: Optional[str],
        database_url: str,
        database_auto_create: bool,
        generation_model: str,
        generation_max_tokens: int,
        generation_temperature: float,
        log_level: str,
        host: str,
        port: int,
        cors_origins: tuple[str, ...],
    ) -> "Config":
        match anthropic_api_key:
            case None | "":
                raise ConfigurationError("ANTHROPIC_API_KEY must be set in .env")
            case _:
                pass

        match auth_jwt_secret:
            case None | "":
                raise ConfigurationError("AUTH_JWT_SECRET must be set in .env")
            case _:
                pass

        match generation_max_tokens:
            case n if n <= 0:
                raise ConfigurationError("GENERATION_MAX_TOKENS must be positive")
            case _:
                pass

        return Config(
            anthropic_api_key=anthropic_api_key,
            auth_jwt_secret=auth_jwt_secret,
            auth_jwt_audience=auth_jwt_audience,
            openai_api_key=openai_api_key,
            database_url=database_url,
            database_auto_create=database_auto_create,
            generation_model=generation_model,
            generation_max_tokens=generation_max_tokens,
            generation_temperature=generation_temperature,
            log_level=log_level,
            host=host,
            port=port,
            cors_origins=cors_origins,
        )
