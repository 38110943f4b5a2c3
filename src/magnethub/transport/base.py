"""Transport contract consumed by endpoints.

A transport moves opaque structured payloads (dicts) to the peer context and
hands payloads arriving from the peer to registered handlers. It knows
nothing about events, sources or correlation.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any, Protocol, runtime_checkable

logger = logging.getLogger(__name__)

MessageHandler = Callable[[Any], None]


@runtime_checkable
class PeerTransport(Protocol):
    """Protocol for endpoint transports.

    All transports must implement:
    - send_to_peer: Deliver one payload, raising TransportUnavailableError
      when the peer context is not attached
    - on_message_from_peer: Register a handler for inbound payloads and
      return a function that detaches it
    """

    def send_to_peer(self, payload: dict[str, Any]) -> None: ...

    def on_message_from_peer(self, handler: MessageHandler) -> Callable[[], None]: ...


class HandlerSet:
    """Inbound handler bookkeeping shared by the transport implementations."""

    def __init__(self) -> None:
        self._handlers: list[MessageHandler] = []

    def add(self, handler: MessageHandler) -> Callable[[], None]:
        self._handlers.append(handler)

        def detach() -> None:
            if handler in self._handlers:
                self._handlers.remove(handler)

        return detach

    def deliver(self, payload: Any) -> None:
        # Copy: a handler may detach itself (endpoint close) while we iterate
        for handler in list(self._handlers):
            try:
                handler(payload)
            except Exception:
                logger.exception("Error in transport message handler")

    def clear(self) -> None:
        self._handlers.clear()

    def __len__(self) -> int:
        return len(self._handlers)
