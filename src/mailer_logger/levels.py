"""Event names, severity levels and the event-to-level map."""

import logging
from enum import Enum, IntEnum
from types import MappingProxyType
from typing import Any, Mapping, Optional, Union

import structlog


class LogLevel(IntEnum):
    """Ordered log severity, valued like the stdlib logging levels."""

    DEBUG = logging.DEBUG
    INFO = logging.INFO
    WARNING = logging.WARNING
    ERROR = logging.ERROR
    CRITICAL = logging.CRITICAL


# A level of None drops the event without calling the logger
DISABLED = None

_DISABLED_NAMES = frozenset({"", "none", "null", "disabled", "off", "false"})

ResolvedLevel = Optional[LogLevel]
LevelSpec = Union[LogLevel, str, int, None]


class MailerEvent(str, Enum):
    """The fixed set of mailer events the plugin can log."""

    BEFORE_SEND = "before_send"
    SEND_SUCCESS = "send_success"
    SEND_FAILURE = "send_failure"
    EXCEPTION_THROWN = "exception_thrown"
    COMMAND_SENT = "command_sent"
    RESPONSE_RECEIVED = "response_received"
    BEFORE_TRANSPORT_START = "before_transport_start"
    TRANSPORT_STARTED = "transport_started"
    BEFORE_TRANSPORT_STOP = "before_transport_stop"
    TRANSPORT_STOPPED = "transport_stopped"


DEFAULT_LEVELS: Mapping[MailerEvent, ResolvedLevel] = MappingProxyType(
    {
        MailerEvent.BEFORE_SEND: LogLevel.DEBUG,
        MailerEvent.SEND_SUCCESS: LogLevel.INFO,
        MailerEvent.SEND_FAILURE: LogLevel.ERROR,
        MailerEvent.EXCEPTION_THROWN: LogLevel.ERROR,
        MailerEvent.COMMAND_SENT: LogLevel.DEBUG,
        MailerEvent.RESPONSE_RECEIVED: LogLevel.DEBUG,
        MailerEvent.BEFORE_TRANSPORT_START: LogLevel.DEBUG,
        MailerEvent.TRANSPORT_STARTED: LogLevel.DEBUG,
        MailerEvent.BEFORE_TRANSPORT_STOP: LogLevel.DEBUG,
        MailerEvent.TRANSPORT_STOPPED: LogLevel.DEBUG,
    }
)


def parse_level(value: LevelSpec) -> ResolvedLevel:
    """Convert a level given as enum, name or number to a LogLevel.

    Args:
        value: LogLevel, level name (case-insensitive), stdlib level number,
            or None / "disabled" to turn the event off

    Returns:
        Resolved LogLevel, or None when disabled

    Raises:
        ValueError: If the value does not name a known level
    """
    if value is None:
        return DISABLED
    if isinstance(value, LogLevel):
        return value
    # bool is an int subclass; False is the only falsy flag we accept
    if isinstance(value, bool):
        if value:
            raise ValueError(f"Invalid log level: {value!r}")
        return DISABLED
    if isinstance(value, int):
        try:
            return LogLevel(value)
        except ValueError:
            raise ValueError(f"Invalid log level: {value!r}") from None
    if isinstance(value, str):
        name = value.strip().lower()
        if name in _DISABLED_NAMES:
            return DISABLED
        if name == "warn":
            name = "warning"
        try:
            return LogLevel[name.upper()]
        except KeyError:
            raise ValueError(f"Invalid log level: {value!r}") from None
    raise ValueError(f"Invalid log level: {value!r}")


def _event_key(key: Any) -> Optional[MailerEvent]:
    if isinstance(key, MailerEvent):
        return key
    try:
        return MailerEvent(key)
    except ValueError:
        return None


def build_level_map(
    overrides: Optional[Mapping[Any, LevelSpec]] = None,
) -> Mapping[MailerEvent, ResolvedLevel]:
    """Merge level overrides on top of the defaults.

    Unknown event names are accepted and ignored; they are reported in a
    debug log entry.

    Args:
        overrides: Mapping of event (MailerEvent or its value) to level

    Returns:
        Read-only mapping holding a level for every MailerEvent
    """
    levels = dict(DEFAULT_LEVELS)
    ignored = []
    for key, value in (overrides or {}).items():
        event = _event_key(key)
        if event is None:
            ignored.append(str(key))
            continue
        levels[event] = parse_level(value)
    if ignored:
        structlog.get_logger().debug(
            "Ignoring level overrides for unknown events",
            ignored=sorted(ignored),
            known=[event.value for event in MailerEvent],
        )
    return MappingProxyType(levels)
