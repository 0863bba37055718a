"""Structured logging configuration and the structlog logger adapter."""

import logging
import sys
from typing import TYPE_CHECKING, Any, Mapping, Optional

import structlog
from structlog.types import EventDict, Processor

from mailer_logger.levels import LogLevel

if TYPE_CHECKING:
    from mailer_logger.config import Settings


def add_log_level(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """Add log level to event dict."""
    if method_name == "warn":
        method_name = "warning"
    event_dict["level"] = method_name.upper()
    return event_dict


def setup_logging(log_level: str = "INFO", log_format: str = "json") -> None:
    """Configure structured logging with structlog.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: Log format (json or console)
    """
    numeric_level = getattr(logging, log_level.upper(), logging.INFO)

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=numeric_level,
    )

    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if log_format == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def setup_logging_from_settings(settings: Optional["Settings"] = None) -> None:
    """Configure structured logging from Settings.

    Args:
        settings: Settings instance (uses get_settings() if None)
    """
    if settings is None:
        from mailer_logger.config import get_settings

        settings = get_settings()

    setup_logging(log_level=settings.log_level, log_format=settings.log_format)


class StructlogLogger:
    """Leveled logger backed by a structlog bound logger.

    The context mapping is bound as key/value pairs on the log entry.
    """

    def __init__(self, name: str = "mailer", bound: Optional[Any] = None) -> None:
        """Initialize the adapter.

        Args:
            name: Logger name used when no bound logger is given
            bound: Existing structlog logger to write through
        """
        self._bound = bound if bound is not None else structlog.get_logger(name)

    def log(
        self,
        level: LogLevel,
        message: str,
        context: Optional[Mapping[str, Any]] = None,
    ) -> None:
        self._bound.log(int(level), message, **dict(context or {}))
