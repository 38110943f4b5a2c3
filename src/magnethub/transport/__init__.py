"""Transport adapters.

Endpoints only need the PeerTransport protocol. Adapters provided here:
- memory - In-process pair, for tests and embedded runtimes
- stream - Newline-delimited JSON over asyncio streams (pipes, sockets, stdio)
- websocket - Starlette WebSocket connection (server side)
"""

from .base import HandlerSet, MessageHandler, PeerTransport
from .memory import MemoryTransport
from .stream import StreamTransport
from .websocket import WebSocketPeerTransport

__all__ = [
    "PeerTransport",
    "MessageHandler",
    "HandlerSet",
    "MemoryTransport",
    "StreamTransport",
    "WebSocketPeerTransport",
]
