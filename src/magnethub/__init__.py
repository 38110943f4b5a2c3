"""MagnetHub SDK - messaging between a host page and an embedded game.

Two endpoints talk over any PeerTransport:
- Host: the embedding page (pause/resume, answers ads and data requests)
- Child: the embedded game (lifecycle, score, show_ad, load_data)

Usage:
    host_transport, child_transport = MemoryTransport.pair()
    host = Host(host_transport)
    game = Child(child_transport)

    host.on_show_ad(
        lambda req: host.ad_displayed(req["requestId"], req["adType"], {"completed": True})
    )
    result = await game.show_interstitial()
"""

from .child import Child
from .config import EndpointConfig, SimulatorConfig
from .endpoint import Endpoint
from .errors import (
    AdError,
    EndpointClosedError,
    MagnetHubError,
    RequestTimeoutError,
    TransportUnavailableError,
)
from .host import Host
from .protocol import AdResult, AdType, EventName, Message, Source
from .transport import MemoryTransport, PeerTransport, StreamTransport
from .version import SDK_INFO, VERSION

__version__ = VERSION

__all__ = [
    # Endpoints
    "Host",
    "Child",
    "Endpoint",
    # Configuration
    "EndpointConfig",
    "SimulatorConfig",
    # Protocol types
    "Message",
    "Source",
    "EventName",
    "AdType",
    "AdResult",
    # Transports
    "PeerTransport",
    "MemoryTransport",
    "StreamTransport",
    # Errors
    "MagnetHubError",
    "TransportUnavailableError",
    "AdError",
    "RequestTimeoutError",
    "EndpointClosedError",
    # Version
    "VERSION",
    "SDK_INFO",
]
