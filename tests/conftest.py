"""Shared pytest fixtures and configuration for chainlog tests."""

import pytest

from chainlog import Logger
from chainlog.config.settings import LoggingSettings, reset_settings
from chainlog.infrastructure.logging.context import request_context
from chainlog.infrastructure.logging.sinks import MemorySink


@pytest.fixture(autouse=True)
def clean_state():
    """Clear process-wide settings and the active request context around each test."""
    reset_settings()
    token = request_context.set(None)
    yield
    request_context.reset(token)
    reset_settings()


@pytest.fixture
def settings():
    """Default settings, independent of the environment."""
    return LoggingSettings(_env_file=None)


@pytest.fixture
def memory_sink():
    """Sink recording every (severity, fields, message) triple."""
    return MemorySink()


@pytest.fixture
def make_logger(memory_sink, settings):
    """Factory for loggers writing to the memory sink."""
    def _make(name="TestLogger", **config):
        config.setdefault("streams", [memory_sink])
        return Logger(name, config, settings=settings)
    return _make
