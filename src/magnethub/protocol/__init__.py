"""Message protocol shared by the host page and the embedded game.

Key concepts:
- Messages: {event, data, source} dicts, fire-and-forget
- Registry: one callback per event name, last registration wins
- Dispatcher: drops echoes and malformed input, invokes callbacks
- Correlation: request ids pair showAd/getData requests with their responses
"""

from .correlation import PendingRequest, PendingRequests, RequestIdGenerator
from .messages import (
    DATA_EVENT_PREFIX,
    AdRequest,
    AdResult,
    AdType,
    EventName,
    Message,
    Source,
    data_event_name,
)
from .registry import Dispatcher, EventCallback, EventRegistry

__all__ = [
    "Message",
    "Source",
    "EventName",
    "AdType",
    "AdRequest",
    "AdResult",
    "DATA_EVENT_PREFIX",
    "data_event_name",
    "EventRegistry",
    "EventCallback",
    "Dispatcher",
    "PendingRequest",
    "PendingRequests",
    "RequestIdGenerator",
]
