"""Mailer events, listener interfaces and the event dispatcher.

Transports create an event for each lifecycle point and hand it to an
EventDispatcher, which notifies every bound listener that implements the
matching listener interface. A listener may cancel the bubble to stop the
remaining listeners from seeing the event.
"""

from dataclasses import dataclass, field
from email.message import Message
from enum import IntEnum
from typing import Any, Protocol, runtime_checkable

import structlog


logger = structlog.get_logger()


class SendResult(IntEnum):
    """Outcome codes of a send operation."""

    PENDING = 0x0001
    SPOOLED = 0x0011
    SUCCESS = 0x0010
    TENTATIVE = 0x0100
    FAILED = 0x1000


@dataclass
class Event:
    """Base event carrying the object that emitted it."""

    source: Any
    _bubble_cancelled: bool = field(default=False, init=False, repr=False)

    def cancel_bubble(self, cancel: bool = True) -> None:
        """Stop (or resume) notification of the remaining listeners."""
        self._bubble_cancelled = cancel

    @property
    def bubble_cancelled(self) -> bool:
        return self._bubble_cancelled


@dataclass
class SendEvent(Event):
    """Emitted before and after a message is sent."""

    message: Message
    result: SendResult = SendResult.PENDING
    failed_recipients: list[str] = field(default_factory=list)


@dataclass
class CommandEvent(Event):
    """Emitted after a protocol command is written to the server."""

    command: str = ""
    success_codes: list[int] = field(default_factory=list)


@dataclass
class ResponseEvent(Event):
    """Emitted after a server response is read."""

    response: str = ""
    valid: bool = False


@dataclass
class TransportChangeEvent(Event):
    """Emitted around transport start and stop."""

    @property
    def transport_name(self) -> str:
        return type(self.source).__name__


@dataclass
class TransportExceptionEvent(Event):
    """Emitted when the transport raises."""

    exception: BaseException


@runtime_checkable
class SendListener(Protocol):
    def before_send_performed(self, evt: SendEvent) -> None: ...

    def send_performed(self, evt: SendEvent) -> None: ...


@runtime_checkable
class CommandListener(Protocol):
    def command_sent(self, evt: CommandEvent) -> None: ...


@runtime_checkable
class ResponseListener(Protocol):
    def response_received(self, evt: ResponseEvent) -> None: ...


@runtime_checkable
class TransportChangeListener(Protocol):
    def before_transport_started(self, evt: TransportChangeEvent) -> None: ...

    def transport_started(self, evt: TransportChangeEvent) -> None: ...

    def before_transport_stopped(self, evt: TransportChangeEvent) -> None: ...

    def transport_stopped(self, evt: TransportChangeEvent) -> None: ...


@runtime_checkable
class TransportExceptionListener(Protocol):
    def exception_thrown(self, evt: TransportExceptionEvent) -> None: ...


# Event type -> listener interface that receives it
LISTENER_TYPES: dict[type, type] = {
    SendEvent: SendListener,
    CommandEvent: CommandListener,
    ResponseEvent: ResponseListener,
    TransportChangeEvent: TransportChangeListener,
    TransportExceptionEvent: TransportExceptionListener,
}

# Listener interface -> handler names it declares
HANDLER_NAMES: dict[type, frozenset[str]] = {
    SendListener: frozenset({"before_send_performed", "send_performed"}),
    CommandListener: frozenset({"command_sent"}),
    ResponseListener: frozenset({"response_received"}),
    TransportChangeListener: frozenset(
        {
            "before_transport_started",
            "transport_started",
            "before_transport_stopped",
            "transport_stopped",
        }
    ),
    TransportExceptionListener: frozenset({"exception_thrown"}),
}


class EventDispatcher:
    """Synchronous event bus for mailer listeners.

    Listeners are notified in the order they were bound. Exceptions raised
    by a listener propagate to the caller of dispatch().
    """

    def __init__(self) -> None:
        """Initialize an empty dispatcher."""
        self._listeners: list[Any] = []

    @property
    def listeners(self) -> tuple[Any, ...]:
        return tuple(self._listeners)

    def bind(self, listener: Any) -> None:
        """Register a listener.

        Args:
            listener: Object implementing one or more listener interfaces
        """
        if any(bound is listener for bound in self._listeners):
            return
        self._listeners.append(listener)
        logger.debug("Listener bound", listener=type(listener).__name__)

    def unbind(self, listener: Any) -> None:
        """Remove a previously bound listener, if present."""
        self._listeners = [bound for bound in self._listeners if bound is not listener]

    def dispatch(self, evt: Event, handler_name: str) -> None:
        """Deliver an event to every listener that handles its type.

        Args:
            evt: Event to deliver
            handler_name: Listener method to invoke, e.g. "send_performed"

        Raises:
            TypeError: If the event type has no listener interface, or the
                handler is not declared by that interface
        """
        listener_type = _listener_type_for(evt)
        if handler_name not in HANDLER_NAMES[listener_type]:
            raise TypeError(
                f"{type(evt).__name__} is not handled by {handler_name}()"
            )
        for listener in list(self._listeners):
            if evt.bubble_cancelled:
                break
            if isinstance(listener, listener_type):
                getattr(listener, handler_name)(evt)


def _listener_type_for(evt: Event) -> type:
    for event_type, listener_type in LISTENER_TYPES.items():
        if isinstance(evt, event_type):
            return listener_type
    raise TypeError(f"No listener interface for event type: {type(evt).__name__}")
