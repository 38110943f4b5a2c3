"""Newline-delimited JSON transport over asyncio streams.

Carries messages between a host and a game running in different processes,
over a subprocess pipe, a TCP socket or stdio.

Wire format (UTF-8, one JSON object per line, LF newlines):
    {"event": "gameLoaded", "data": {"title": "Snake"}, "source": "child"}
    {"event": "pauseGame", "data": {}, "source": "host"}
"""

from __future__ import annotations

import asyncio
import contextlib
import json
import logging
from collections.abc import Callable
from typing import Any

from ..errors import TransportUnavailableError
from .base import HandlerSet, MessageHandler

logger = logging.getLogger(__name__)

ENCODING = "utf-8"
NEWLINE = b"\n"


class StreamTransport:
    """Duplex JSON-lines transport over a StreamReader/StreamWriter pair.

    Usage:
        reader, writer = await asyncio.open_connection("127.0.0.1", 4101)
        transport = StreamTransport(reader, writer)
        child = Child(transport)
        await transport.start()
        ...
        await transport.close()
    """

    def __init__(self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter) -> None:
        self._reader = reader
        self._writer: asyncio.StreamWriter | None = writer
        self._handlers = HandlerSet()
        self._reader_task: asyncio.Task[None] | None = None

    @property
    def is_connected(self) -> bool:
        return self._writer is not None and not self._writer.is_closing()

    def on_message_from_peer(self, handler: MessageHandler) -> Callable[[], None]:
        return self._handlers.add(handler)

    def send_to_peer(self, payload: dict[str, Any]) -> None:
        if not self.is_connected or self._writer is None:
            raise TransportUnavailableError("Stream is closed")

        try:
            line = json.dumps(payload, ensure_ascii=False).encode(ENCODING) + NEWLINE
        except (TypeError, ValueError) as e:
            raise TransportUnavailableError(f"Payload is not JSON serializable: {e}") from e

        # StreamWriter buffers writes; flow control is left to the event loop
        self._writer.write(line)

    async def start(self) -> None:
        """Start the background reader task."""
        if self._reader_task is None:
            self._reader_task = asyncio.create_task(self._read_loop())

    async def wait_closed(self) -> None:
        """Wait until the peer closes the stream."""
        if self._reader_task is not None:
            with contextlib.suppress(asyncio.CancelledError):
                await self._reader_task

    async def close(self) -> None:
        task, self._reader_task = self._reader_task, None
        if task is not None:
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task

        writer, self._writer = self._writer, None
        if writer is not None:
            writer.close()
            with contextlib.suppress(ConnectionError):
                await writer.wait_closed()
        self._handlers.clear()

    async def _read_loop(self) -> None:
        try:
            while True:
                try:
                    line = await self._reader.readline()
                except ValueError as e:
                    # Over the reader limit; readline already discarded the line
                    logger.warning(f"Dropping oversized line: {e}")
                    continue

                if not line:
                    logger.info("Stream closed by peer")
                    break
                self._handle_line(line)
        except ConnectionError as e:
            logger.info(f"Stream connection lost: {e}")
        except Exception as e:
            logger.error(f"Read loop error: {e}")

    def _handle_line(self, line: bytes) -> None:
        text = line.decode(ENCODING, errors="replace").strip()
        if not text:
            return
        if text.startswith("\ufeff"):
            text = text[1:]

        try:
            payload = json.loads(text)
        except json.JSONDecodeError as e:
            logger.debug(f"Skipping non-JSON line: {e} (line: {text[:50]})")
            return

        self._handlers.deliver(payload)
