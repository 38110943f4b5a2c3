"""Exception types raised by the MagnetHub SDK.

Nothing here is ever thrown across the transport boundary: transports raise
TransportUnavailableError, which the send primitive catches and logs. The
remaining errors surface only from correlated requests (show_ad, load_data).
"""

from __future__ import annotations

from typing import Any


class MagnetHubError(Exception):
    """Base class for all SDK errors."""

    pass


class TransportUnavailableError(MagnetHubError):
    """Raised by a transport when the peer context is not attached."""

    pass


class AdError(MagnetHubError):
    """The remote side reported an error for an ad request."""

    def __init__(
        self,
        message: str,
        request_id: str | None = None,
        result: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.request_id = request_id
        self.result = result or {}


class RequestTimeoutError(MagnetHubError):
    """A correlated request received no response within its timeout."""

    def __init__(self, request_id: str, timeout: float) -> None:
        super().__init__(f"Request {request_id} timed out after {timeout}s")
        self.request_id = request_id
        self.timeout = timeout


class EndpointClosedError(MagnetHubError):
    """The endpoint was closed while a request was still pending."""

    pass
