"""Mailer listener plugin that logs mailer activity."""

from typing import Any, Mapping, Optional, Protocol

import structlog

from mailer_logger.errors import TransportError
from mailer_logger.events import (
    CommandEvent,
    ResponseEvent,
    SendEvent,
    SendResult,
    TransportChangeEvent,
    TransportExceptionEvent,
)
from mailer_logger.levels import (
    LevelSpec,
    LogLevel,
    MailerEvent,
    ResolvedLevel,
    build_level_map,
)
from mailer_logger.metrics import (
    mailer_events_logged_total,
    mailer_events_suppressed_total,
    mailer_transport_exceptions_total,
)


DEFAULT_PREFIX = "[MAILER] "


class LevelLogger(Protocol):
    """Anything that can write a message at a level with context."""

    def log(self, level: LogLevel, message: str, context: Mapping[str, Any]) -> None: ...


class MailerLoggerPlugin:
    """Logs mailer activity with a leveled logger.

    Implements the send, command, response, transport change and transport
    exception listener interfaces, so a single instance can be bound to an
    EventDispatcher to observe a whole transport.

    Send success is logged at INFO and send failure at ERROR. Transport
    exceptions are logged at ERROR and then re-raised as TransportError.
    Commands, responses and transport start/stop are logged at DEBUG.

    The logger must not send mail through the mailer it observes, or every
    logged event will trigger another send.
    """

    def __init__(
        self,
        logger: LevelLogger,
        levels: Optional[Mapping[Any, LevelSpec]] = None,
        prefix: str = DEFAULT_PREFIX,
    ) -> None:
        """Initialize the plugin.

        Args:
            logger: Object exposing log(level, message, context)
            levels: Optional per-event level overrides; None disables an event
            prefix: Text prepended to every logged message
        """
        self._logger = logger
        self._levels = build_level_map(levels)
        self._prefix = prefix

    @classmethod
    def from_settings(
        cls,
        logger: Optional[LevelLogger] = None,
        settings: Optional[Any] = None,
    ) -> "MailerLoggerPlugin":
        """Create a plugin configured from Settings.

        Without a logger, structlog is configured from the settings'
        log_level and log_format and the plugin writes through it.

        Args:
            logger: Object exposing log(level, message, context)
            settings: Settings instance (uses get_settings() if None)

        Returns:
            Configured plugin
        """
        if settings is None:
            from mailer_logger.config import get_settings

            settings = get_settings()

        if logger is None:
            from mailer_logger.logging import StructlogLogger, setup_logging_from_settings

            setup_logging_from_settings(settings)
            logger = StructlogLogger()

        plugin = cls(logger, levels=settings.levels, prefix=settings.prefix)

        structlog.get_logger().debug(
            "Mailer logger plugin configured",
            logger=type(logger).__name__,
            overrides=sorted(settings.levels),
        )
        return plugin

    @property
    def prefix(self) -> str:
        return self._prefix

    @property
    def levels(self) -> Mapping[MailerEvent, ResolvedLevel]:
        return self._levels

    def level_for(self, event: MailerEvent) -> ResolvedLevel:
        """Return the resolved level for an event."""
        return self._levels[MailerEvent(event)]

    def _log(
        self,
        level: ResolvedLevel,
        message: str,
        context: Optional[Mapping[str, Any]] = None,
    ) -> None:
        # A level of None disables logging
        if level is None:
            return
        self._logger.log(level, self._prefix + message, dict(context or {}))

    def _emit(
        self,
        event: MailerEvent,
        message: str,
        context: Optional[Mapping[str, Any]] = None,
    ) -> None:
        level = self._levels[event]
        if level is None:
            mailer_events_suppressed_total.labels(event=event.value).inc()
            return
        self._log(level, message, context)
        mailer_events_logged_total.labels(event=event.value).inc()

    def before_send_performed(self, evt: SendEvent) -> None:
        """Invoked immediately before the message is sent."""
        self._emit(
            MailerEvent.BEFORE_SEND,
            "MESSAGE (beforeSend): ",
            {"message": evt.message.as_string()},
        )

    def send_performed(self, evt: SendEvent) -> None:
        """Invoked immediately after the message is sent.

        Uses the send_success level when the result is SUCCESS and the
        send_failure level for every other result code.
        """
        if evt.result == SendResult.SUCCESS:
            event = MailerEvent.SEND_SUCCESS
        else:
            event = MailerEvent.SEND_FAILURE

        self._emit(
            event,
            "MESSAGE (sendPerformed): ",
            {
                "result": int(evt.result),
                "failed_recipients": list(evt.failed_recipients),
                "message": evt.message.as_string(),
            },
        )

    def command_sent(self, evt: CommandEvent) -> None:
        """Invoked immediately following a command being sent."""
        self._emit(MailerEvent.COMMAND_SENT, f">> {evt.command}")

    def response_received(self, evt: ResponseEvent) -> None:
        """Invoked immediately following a response coming back."""
        self._emit(MailerEvent.RESPONSE_RECEIVED, f"<< {evt.response}")

    def before_transport_started(self, evt: TransportChangeEvent) -> None:
        self._emit(MailerEvent.BEFORE_TRANSPORT_START, f"++ Starting {evt.transport_name}")

    def transport_started(self, evt: TransportChangeEvent) -> None:
        self._emit(MailerEvent.TRANSPORT_STARTED, f"++ {evt.transport_name} started")

    def before_transport_stopped(self, evt: TransportChangeEvent) -> None:
        self._emit(MailerEvent.BEFORE_TRANSPORT_STOP, f"++ Stopping {evt.transport_name}")

    def transport_stopped(self, evt: TransportChangeEvent) -> None:
        self._emit(MailerEvent.TRANSPORT_STOPPED, f"++ {evt.transport_name} stopped")

    def exception_thrown(self, evt: TransportExceptionEvent) -> None:
        """Invoked as an exception is raised in the transport.

        Logs the exception message, stops the event reaching the remaining
        listeners and re-raises it to the caller of the send.

        Raises:
            TransportError: Always, carrying the original exception message
        """
        message = str(evt.exception)

        self._emit(MailerEvent.EXCEPTION_THROWN, f"!! {message}")
        mailer_transport_exceptions_total.inc()

        evt.cancel_bubble()
        raise TransportError(message) from evt.exception
