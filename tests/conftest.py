"""Pytest configuration for all tests."""

import logging

import pytest
import structlog

from nestrule.core.config import get_settings
from nestrule.core.logging import LOGGER_NAME


@pytest.fixture(autouse=True)
def _fresh_settings():
    """Reload settings for every test so environment overrides apply."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def reset_logging():
    """Restore structlog defaults and the package logger after a test configures logging."""
    yield
    structlog.reset_defaults()
    structlog.contextvars.clear_contextvars()

    package_logger = logging.getLogger(LOGGER_NAME)
    for handler in list(package_logger.handlers):
        if not isinstance(handler, logging.NullHandler):
            package_logger.removeHandler(handler)
    package_logger.setLevel(logging.NOTSET)
    package_logger.propagate = True


@pytest.fixture
def context():
    """Context used throughout the rule examples."""
    return {"a": 1, "world": "hello"}
