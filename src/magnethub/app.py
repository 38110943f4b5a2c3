"""Host simulator server.

Creates a Starlette ASGI application exposing a simulated host page:
- /health - Health check with SDK info and connection count
- /ws - WebSocket endpoint; each connection is one embedded game

Every connection gets its own Host endpoint and HostSimulator, so several
games can be developed against one server.
"""

from __future__ import annotations

import logging

from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.routing import Route, WebSocketRoute
from starlette.websockets import WebSocket

from .config import SimulatorConfig
from .host import Host
from .simulator import HostSimulator
from .transport.websocket import WebSocketPeerTransport
from .version import SDK_INFO

logger = logging.getLogger(__name__)


def create_app(config: SimulatorConfig | None = None) -> Starlette:
    """Create the host simulator application.

    Args:
        config: Simulator configuration (defaults to SimulatorConfig.from_env())

    Returns:
        Configured Starlette application
    """
    config = config or SimulatorConfig.from_env()
    connections: set[int] = set()

    async def health(request: Request) -> JSONResponse:
        return JSONResponse(
            {
                "status": "ok",
                "sdk": SDK_INFO,
                "connections": len(connections),
                "ad_outcome": config.ad_outcome,
            }
        )

    async def game_socket(websocket: WebSocket) -> None:
        await websocket.accept()
        transport = WebSocketPeerTransport(websocket)
        host = Host(transport, config=config.endpoint)
        HostSimulator(host, config=config)

        connections.add(id(websocket))
        logger.info(f"Game connected ({len(connections)} active)")
        try:
            await transport.run()
        finally:
            connections.discard(id(websocket))
            host.close()
            logger.info(f"Game disconnected ({len(connections)} active)")

    routes = [
        Route("/health", health, methods=["GET"]),
        WebSocketRoute("/ws", game_socket),
    ]
    return Starlette(routes=routes)
