"""Tests for structlog configuration."""

import logging

import structlog

from rignum.config.settings import get_settings
from rignum.observability.logging import (
    _processors,
    bind_context,
    clear_context,
    setup_logging,
)
from rignum.observability.tracing import add_trace_context


def _configure(monkeypatch, environment: str) -> list:
    monkeypatch.setenv("ENVIRONMENT", environment)
    get_settings.cache_clear()
    try:
        setup_logging()
    finally:
        get_settings.cache_clear()
    return structlog.get_config()["processors"]


class TestSetupLogging:
    """Renderer selection follows the environment."""

    def test_production_renders_json(self, monkeypatch):
        processors = _configure(monkeypatch, "production")

        assert isinstance(processors[-1], structlog.processors.JSONRenderer)
        assert add_trace_context in processors

    def test_development_renders_console(self, monkeypatch):
        processors = _configure(monkeypatch, "development")

        assert isinstance(processors[-1], structlog.dev.ConsoleRenderer)


class TestContext:
    """Bound context helpers."""

    def test_bind_and_clear(self):
        clear_context()
        bind_context(request_id="req-1")
        assert structlog.contextvars.get_contextvars() == {"request_id": "req-1"}

        clear_context()
        assert structlog.contextvars.get_contextvars() == {}


class TestProcessors:
    """Processor chain built from explicit settings."""

    def test_request_and_trace_context_before_renderer(self, test_settings):
        processors = _processors(test_settings)

        assert processors[0] is structlog.contextvars.merge_contextvars
        assert processors.index(add_trace_context) < len(processors) - 1

    def test_noisy_libraries_quieted(self, monkeypatch):
        _configure(monkeypatch, "development")

        assert logging.getLogger("asyncpg").level == logging.WARNING
        assert logging.getLogger("uvicorn.access").level == logging.WARNING
