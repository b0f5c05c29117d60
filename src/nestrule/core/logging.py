"""Structured logging.

nestrule never configures logging on import. Its loggers are structlog
loggers wrapping standard library loggers under the `nestrule` namespace,
which carries a NullHandler, so nothing is written until the host either
calls `configure_logging()` or attaches its own logging handlers.
"""

import logging
import sys
from typing import Any

import structlog
from structlog.types import EventDict, Processor

from nestrule.core.config import Settings, get_settings

LOGGER_NAME = "nestrule"

logging.getLogger(LOGGER_NAME).addHandler(logging.NullHandler())

_handler: logging.Handler | None = None


def add_logger_name(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """Add logger name to log entry.

    Args:
        logger: Logger instance.
        method_name: Method name (unused).
        event_dict: Event dictionary to modify.

    Returns:
        EventDict: Modified event dictionary with logger name.
    """
    event_dict["logger"] = logger.name if hasattr(logger, "name") else LOGGER_NAME
    return event_dict


def rename_message_field(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """Rename 'event' field to 'message' for compatibility."""
    if "event" in event_dict:
        event_dict["message"] = event_dict.pop("event")
    return event_dict


def configure_logging(settings: Settings | None = None) -> None:
    """Configure structured logging.

    Sets up structlog with console output for development and JSON output
    otherwise, written to stderr through a handler on the `nestrule` logger.
    Calling it again replaces the previous handler. Records do not propagate
    to the root logger, so host handlers do not print them a second time.

    Args:
        settings: Optional settings instance. If not provided, will load from environment.
    """
    global _handler

    if settings is None:
        settings = get_settings()

    log_level = getattr(logging, settings.log_level)
    package_logger = logging.getLogger(LOGGER_NAME)
    if _handler is not None:
        package_logger.removeHandler(_handler)
    _handler = logging.StreamHandler(sys.stderr)
    _handler.setFormatter(logging.Formatter("%(message)s"))
    package_logger.addHandler(_handler)
    package_logger.setLevel(log_level)
    package_logger.propagate = False

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if settings.is_development or settings.log_format == "console":
        renderer: Processor = structlog.dev.ConsoleRenderer(
            colors=True,
            exception_formatter=structlog.dev.plain_traceback,
        )
    else:
        shared_processors.append(rename_message_field)
        renderer = structlog.processors.JSONRenderer()

    structlog.configure(
        processors=shared_processors + [renderer],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=not settings.is_development,
    )


def get_logger(name: str | None = None) -> Any:
    """Get a structured logger instance.

    The logger always wraps the standard library logger of the same name,
    even before structlog is configured, so unconfigured hosts only see
    what their own logging setup lets through.

    Args:
        name: Optional logger name. If not provided, uses 'nestrule'.

    Returns:
        BoundLogger: Structured logger instance.
    """
    return structlog.wrap_logger(logging.getLogger(name or LOGGER_NAME))


class LoggingContext:
    """Context manager for adding logging context.

    Example:
        with LoggingContext(rule_id="discount-eligibility"):
            rule.evaluate(context)  # debug events carry rule_id
    """

    def __init__(self, **kwargs: Any) -> None:
        self.context = kwargs
        self.token: Any = None

    def __enter__(self) -> "LoggingContext":
        """Enter the context and add context variables."""
        self.token = structlog.contextvars.bind_contextvars(**self.context)
        return self

    def __exit__(self, *args: Any) -> None:
        """Exit the context and restore previous context variables."""
        if self.token is not None:
            structlog.contextvars.reset_contextvars(**self.token)
            self.token = None
