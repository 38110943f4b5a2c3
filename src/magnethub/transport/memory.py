"""In-process transport.

Connects two endpoints living in the same process, e.g. in tests or when a
game is hosted in an embedded Python runtime. Payloads are deep-copied on
send, like a browser's structured clone, so neither side can mutate the
other's objects.

Usage:
    host_transport, child_transport = MemoryTransport.pair()
    host = Host(host_transport)
    child = Child(child_transport)
"""

from __future__ import annotations

import asyncio
import copy
from collections.abc import Callable
from typing import Any

from ..errors import TransportUnavailableError
from .base import HandlerSet, MessageHandler


class MemoryTransport:
    """One side of an in-memory duplex channel.

    Args:
        deferred: Deliver on the next loop iteration (loop.call_soon) instead
            of synchronously inside send_to_peer, like window.postMessage
        echo: Also deliver every sent payload to this side's own handlers,
            simulating a shared broadcast channel
    """

    def __init__(self, *, deferred: bool = False, echo: bool = False) -> None:
        self.deferred = deferred
        self.echo = echo
        self._peer: MemoryTransport | None = None
        self._handlers = HandlerSet()
        self._closed = False
        self._sent: list[dict[str, Any]] = []

    @classmethod
    def pair(
        cls, *, deferred: bool = False, echo: bool = False
    ) -> tuple[MemoryTransport, MemoryTransport]:
        """Create two connected transports."""
        first = cls(deferred=deferred, echo=echo)
        second = cls(deferred=deferred, echo=echo)
        first.connect(second)
        return first, second

    def connect(self, peer: MemoryTransport) -> None:
        """Attach `peer` as the other side of this channel (both directions)."""
        self._peer = peer
        peer._peer = self

    def disconnect(self) -> None:
        """Detach from the peer, as when the iframe is removed."""
        if self._peer is not None and self._peer._peer is self:
            self._peer._peer = None
        self._peer = None

    @property
    def is_connected(self) -> bool:
        return not self._closed and self._peer is not None and not self._peer._closed

    @property
    def sent(self) -> list[dict[str, Any]]:
        """Payloads successfully handed to the peer, in send order."""
        return list(self._sent)

    def send_to_peer(self, payload: dict[str, Any]) -> None:
        if not self.is_connected or self._peer is None:
            raise TransportUnavailableError("Peer context is not attached")

        self._sent.append(payload)
        self._peer._receive(copy.deepcopy(payload))
        if self.echo:
            self._receive(copy.deepcopy(payload))

    def on_message_from_peer(self, handler: MessageHandler) -> Callable[[], None]:
        return self._handlers.add(handler)

    def close(self) -> None:
        self._closed = True
        self._handlers.clear()
        self.disconnect()

    def _receive(self, payload: Any) -> None:
        if self._closed:
            return
        if self.deferred:
            asyncio.get_running_loop().call_soon(self._handlers.deliver, payload)
        else:
            self._handlers.deliver(payload)
