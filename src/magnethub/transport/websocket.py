"""WebSocket transport for a Starlette connection.

Each inbound frame, text or UTF-8 binary, is one JSON message. Outbound
messages are queued by send_to_peer (which must not block) and written by a
sender task, so the endpoint API stays synchronous.
"""

from __future__ import annotations

import asyncio
import contextlib
import json
import logging
from collections.abc import Callable
from typing import Any

from starlette.websockets import WebSocket, WebSocketDisconnect, WebSocketState

from ..errors import TransportUnavailableError
from .base import HandlerSet, MessageHandler

logger = logging.getLogger(__name__)


class WebSocketPeerTransport:
    """Server-side transport over an accepted Starlette WebSocket.

    Usage:
        await websocket.accept()
        transport = WebSocketPeerTransport(websocket)
        host = Host(transport)
        await transport.run()  # until the client disconnects
    """

    def __init__(self, websocket: WebSocket) -> None:
        self._websocket = websocket
        self._handlers = HandlerSet()
        self._outbox: asyncio.Queue[dict[str, Any]] = asyncio.Queue()
        self._running = False

    @property
    def is_connected(self) -> bool:
        return self._running and self._websocket.client_state == WebSocketState.CONNECTED

    def on_message_from_peer(self, handler: MessageHandler) -> Callable[[], None]:
        return self._handlers.add(handler)

    def send_to_peer(self, payload: dict[str, Any]) -> None:
        if not self.is_connected:
            raise TransportUnavailableError("WebSocket is not connected")
        self._outbox.put_nowait(payload)

    async def run(self) -> None:
        """Receive until the client disconnects, writing queued messages meanwhile."""
        self._running = True
        sender = asyncio.create_task(self._send_loop())
        try:
            while True:
                message = await self._websocket.receive()
                if message["type"] == "websocket.disconnect":
                    logger.info("WebSocket client disconnected")
                    break
                payload = self._decode(message)
                if payload is not None:
                    self._handlers.deliver(payload)
        finally:
            self._running = False
            sender.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await sender
            self._handlers.clear()

    async def _send_loop(self) -> None:
        while True:
            payload = await self._outbox.get()
            try:
                await self._websocket.send_text(json.dumps(payload, ensure_ascii=False))
            except (TypeError, ValueError) as e:
                logger.warning(f"Dropping unserializable message: {e}")
            except (WebSocketDisconnect, RuntimeError) as e:
                logger.debug(f"WebSocket send failed: {e}")
                return

    def _decode(self, message: dict[str, Any]) -> Any:
        # Text and binary frames both carry one UTF-8 JSON message
        text = message.get("text")
        if text is None:
            try:
                text = (message.get("bytes") or b"").decode("utf-8")
            except UnicodeDecodeError:
                logger.debug("Dropping non-UTF-8 binary frame")
                return None
        try:
            return json.loads(text)
        except json.JSONDecodeError as e:
            logger.debug(f"Invalid WebSocket message: {e}")
            return None
