"""Common endpoint machinery shared by Host and Child.

An endpoint owns an event registry, a dispatcher bound to its identity, a
local data store and a transport attachment. It attaches to the transport
on construction and detaches on close():

    with Child(transport) as child:
        child.game_loaded({"title": "Snake"})
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any, ClassVar, Self

from pydantic import ValidationError

from .config import EndpointConfig
from .errors import TransportUnavailableError
from .protocol.messages import EventName, Message, Source
from .protocol.registry import Dispatcher, EventCallback, EventRegistry
from .transport.base import PeerTransport
from .version import VERSION

logger = logging.getLogger(__name__)


class Endpoint:
    """One side of the host/child channel."""

    VERSION: ClassVar[str] = VERSION
    identity: ClassVar[Source]

    def __init__(self, transport: PeerTransport, config: EndpointConfig | None = None) -> None:
        self.transport = transport
        self.config = config or EndpointConfig()
        self._registry = EventRegistry()
        self._dispatcher = Dispatcher(self.identity, self._registry)
        self._data: dict[str, Any] = {}
        self._closed = False
        self._detach: Callable[[], None] | None = transport.on_message_from_peer(
            self._dispatcher.dispatch
        )

    @property
    def registry(self) -> EventRegistry:
        return self._registry

    @property
    def is_closed(self) -> bool:
        return self._closed

    # ==================== Messaging ====================

    def on(self, event: str | EventName, callback: EventCallback) -> bool:
        """Register `callback` for `event`, replacing any previous callback.

        Returns:
            False if `callback` is not callable (nothing is registered)
        """
        return self._registry.register(event, callback)

    def off(self, event: str | EventName) -> bool:
        """Remove the callback registered for `event`."""
        return self._registry.unregister(event)

    def send(self, event: str | EventName, data: Any = None) -> bool:
        """Send a one-way message to the peer.

        Never raises: if the event name is invalid or the peer context is
        not available, the message is dropped and a warning is logged.

        Returns:
            True if the message was handed to the transport
        """
        name = event.value if isinstance(event, EventName) else event
        if self._closed:
            logger.warning(f"Cannot send {name!r}: endpoint is closed")
            return False
        try:
            message = Message.create(name, data, self.identity)
        except ValidationError as e:
            logger.warning(f"Cannot send {name!r}: invalid message: {e}")
            return False
        try:
            self.transport.send_to_peer(message.to_wire())
        except TransportUnavailableError as e:
            logger.warning(f"Cannot send {message.event!r}: {e}")
            return False
        return True

    # ==================== Data ====================

    def set_data(self, key: str, value: Any) -> None:
        """Store `value` locally and sync it to the peer."""
        self._data[key] = value
        self.send(EventName.SET_DATA, {"key": key, "value": value})

    def get_data(self, key: str, default: Any = None) -> Any:
        """Read the last known local value for `key`."""
        return self._data.get(key, default)

    @property
    def data(self) -> dict[str, Any]:
        """Snapshot of the local data store."""
        return dict(self._data)

    # ==================== Lifecycle ====================

    def close(self) -> None:
        """Detach from the transport and drop all registrations."""
        if self._closed:
            return
        self._closed = True
        if self._detach is not None:
            self._detach()
            self._detach = None
        self._on_close()
        self._registry.clear()
        logger.debug(f"{self.__class__.__name__} endpoint closed")

    def _on_close(self) -> None:
        """Hook for subclasses to release pending state."""
        pass

    def __enter__(self) -> Self:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()
