"""Event registry and dispatcher.

The registry holds at most one callback per event name: registering again
for the same name replaces the previous callback. The dispatcher takes raw
transport payloads, drops anything malformed or not sent by the peer, and
invokes the matching callback synchronously.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from .messages import EventName, Message, Source

logger = logging.getLogger(__name__)

EventCallback = Callable[[Any], Any]


def _event_key(event: str | EventName) -> str:
    return event.value if isinstance(event, EventName) else event


class EventRegistry:
    """Single-subscriber mapping from event name to callback."""

    def __init__(self) -> None:
        self._callbacks: dict[str, EventCallback] = {}

    def register(self, event: str | EventName, callback: EventCallback) -> bool:
        """Store `callback` for `event`, replacing any previous one.

        Returns:
            False (and stores nothing) if `callback` is not callable
        """
        name = _event_key(event)
        if not callable(callback):
            logger.warning(
                f"Callback for event {name!r} must be callable, got {type(callback).__name__}"
            )
            return False
        if name in self._callbacks:
            logger.debug(f"Replacing callback for event {name!r}")
        self._callbacks[name] = callback
        return True

    def unregister(self, event: str | EventName, callback: EventCallback | None = None) -> bool:
        """Remove the callback for `event`.

        If `callback` is given, only remove it when it is still the one
        registered, so a newer registration is never dropped by mistake.
        """
        name = _event_key(event)
        current = self._callbacks.get(name)
        if current is None:
            return False
        if callback is not None and current != callback:
            return False
        del self._callbacks[name]
        return True

    def get(self, event: str | EventName) -> EventCallback | None:
        return self._callbacks.get(_event_key(event))

    def __contains__(self, event: object) -> bool:
        if not isinstance(event, str):
            return False
        return _event_key(event) in self._callbacks

    def __len__(self) -> int:
        return len(self._callbacks)

    def clear(self) -> None:
        self._callbacks.clear()


class Dispatcher:
    """Routes inbound transport payloads to registry callbacks.

    Only messages whose `source` is the peer of `identity` are dispatched.
    Everything inbound is untrusted: malformed payloads are dropped, and a
    callback that raises is logged rather than propagated to the transport.
    """

    def __init__(self, identity: Source, registry: EventRegistry) -> None:
        self.identity = identity
        self.registry = registry

    def dispatch(self, payload: Any) -> bool:
        """Handle one inbound delivery.

        Returns:
            True if a callback was invoked
        """
        message = Message.parse(payload)
        if message is None:
            logger.debug(f"Dropping malformed message: {payload!r}")
            return False

        if message.source != self.identity.peer:
            # Echo of our own message (shared channel / broadcast delivery)
            logger.debug(f"Dropping {message.event!r} from {message.source.value} (self)")
            return False

        callback = self.registry.get(message.event)
        if callback is None:
            return False

        try:
            callback(message.data)
        except Exception:
            logger.exception(f"Error in callback for event {message.event!r}")
        return True
