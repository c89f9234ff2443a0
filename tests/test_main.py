import logging

from fastapi import FastAPI

from prompt_enhancer.config import Config
from prompt_enhancer.main import _setup_logging, build_app


def make_config(tmp_path, **overrides) -> Config:
    values = dict(
        anthropic_api_key="sk-ant-test",
        auth_jwt_secret="secret",
        auth_jwt_audience="authenticated",
        openai_api_key="sk-test",
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'credits.db'}",
        database_auto_create=True,
        generation_model="claude-sonnet-4-20250514",
        generation_max_tokens=2500,
        generation_temperature=0.1,
        log_level="INFO",
        host="127.0.0.1",
        port=8000,
        cors_origins=("*",),
    )
    values.update(overrides)
    return Config(**values)


def test_build_app_registers_routes(tmp_path):
    app = build_app(make_config(tmp_path))

    paths = {route.path for route in app.routes}
    assert isinstance(app, FastAPI)
    assert {"/api/generate", "/api/credits", "/health"} <= paths


def test_build_app_without_openai_key_warns(tmp_path, caplog):
    with caplog.at_level(logging.WARNING):
        build_app(make_config(tmp_path, openai_api_key=None))

    assert "voice transcription disabled" in caplog.text


def test_setup_logging_installs_single_rich_handler():
    from rich.logging import RichHandler

    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    try:
        _setup_logging("debug")
        _setup_logging("debug")

        assert root.level == logging.DEBUG
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0], RichHandler)
    finally:
        list(map(root.removeHandler, root.handlers[:]))
        list(map(root.addHandler, saved_handlers))
        root.setLevel(saved_level)
