"""Session event observers.

A session reports "error", "end" and "close" events through a SessionEvents
registry. Observers are always attached through attach_listeners, which
detaches everything first so each event has at most one observer, however
often a caller retries.
"""

import logging
from collections.abc import Callable
from typing import Any

from .error_formatter import format_error
from .exceptions import NormalizedError

logger = logging.getLogger(__name__)

ERROR = "error"
END = "end"
CLOSE = "close"


class SessionEvents:
    """Observer registry for session lifecycle events."""

    def __init__(self):
        self._listeners: dict[str, list[Callable[..., Any]]] = {}

    def on(self, event: str, listener: Callable[..., Any]) -> None:
        """Register a listener for an event."""
        self._listeners.setdefault(event, []).append(listener)

    def remove_all_listeners(self, event: str | None = None) -> None:
        """Remove the listeners of one event, or of all events."""
        if event is None:
            self._listeners.clear()
        else:
            self._listeners.pop(event, None)

    def event_names(self) -> list[str]:
        """Get the events that have at least one listener."""
        return [name for name, listeners in self._listeners.items() if listeners]

    def listener_count(self, event: str) -> int:
        return len(self._listeners.get(event, []))

    def emit(self, event: str, *args: Any) -> bool:
        """Call the listeners of an event.

        Returns:
            True if the event had listeners
        """
        listeners = list(self._listeners.get(event, []))
        for listener in listeners:
            listener(*args)
        return bool(listeners)


def remove_listeners(emitter: SessionEvents) -> None:
    """Remove every listener from an emitter."""
    for name in emitter.event_names():
        emitter.remove_all_listeners(name)


def make_error_listener(reject: Callable[[NormalizedError], object], owner: Any) -> Callable:
    """Build an error listener that rejects with a normalized error.

    Args:
        reject: Continuation receiving the normalized error
        owner: Object whose error_handled flag is set once the error is passed on
    """

    def listener(err: BaseException | None = None) -> None:
        reject(format_error(err))
        owner.error_handled = True

    return listener


def make_end_listener(client: Any) -> Callable:
    """Build an end listener that reports ends the client did not ask for."""

    def listener() -> None:
        if not client.end_called:
            logger.error(f"{client.client_name} Connection ended unexpectedly")

    return listener


def make_close_listener(client: Any) -> Callable:
    """Build a close listener that drops the client's session handle."""

    def listener() -> None:
        if not client.end_called:
            logger.error(f"{client.client_name}: Connection closed unexpectedly")
        client.sftp = None

    return listener


def attach_listeners(client: Any, reject: Callable[[NormalizedError], object]) -> None:
    """Attach one error, end and close listener to a client's events.

    Existing listeners are removed first.
    """
    remove_listeners(client.events)
    client.events.on(ERROR, make_error_listener(reject, client))
    client.events.on(END, make_end_listener(client))
    client.events.on(CLOSE, make_close_listener(client))
