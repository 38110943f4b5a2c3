"""Child endpoint: the embedded game.

Usage:
    game = Child(transport)
    game.game_loaded({"title": "Snake"})
    game.on_pause(lambda _: loop.pause())

    result = await game.show_rewarded()
    if result.rewarded:
        grant_extra_life()

    best = await game.load_data("highscore")
"""

from __future__ import annotations

import functools
import logging
from typing import Any

from .config import EndpointConfig
from .endpoint import Endpoint
from .errors import AdError, EndpointClosedError, TransportUnavailableError
from .protocol.correlation import PendingRequest, PendingRequests, RequestIdGenerator
from .protocol.messages import AdRequest, AdResult, AdType, EventName, Source, data_event_name
from .protocol.registry import EventCallback
from .transport.base import PeerTransport

logger = logging.getLogger(__name__)

# Keys the SDK owns in a showAd payload; caller options may not override them
_RESERVED_AD_KEYS = ("adType", "requestId")


class Child(Endpoint):
    """Game side of the channel.

    Ad requests are multiplexed: a single adDisplayed callback routes each
    response to its pending request by requestId, so any number of ads may
    be requested concurrently. Data loads are keyed: concurrent loads of the
    same key share one in-flight getData request.
    """

    identity = Source.CHILD

    def __init__(self, transport: PeerTransport, config: EndpointConfig | None = None) -> None:
        super().__init__(transport, config)
        self._ad_ids = RequestIdGenerator("ad")
        self._ads = PendingRequests("ad", on_removed=self._on_ad_removed)
        self._loads = PendingRequests("data", on_removed=self._on_load_removed)

    @property
    def pending_ad_requests(self) -> list[str]:
        """Ids of ad requests still waiting for a response."""
        return self._ads.request_ids

    @property
    def pending_loads(self) -> list[str]:
        """Keys with a load still waiting for a response."""
        return self._loads.request_ids

    # ==================== Game Lifecycle ====================

    def game_loaded(self, metadata: dict[str, Any] | None = None) -> bool:
        """Tell the host the game is loaded and ready to start."""
        return self.send(EventName.GAME_LOADED, metadata or {})

    def game_start(self, game_data: dict[str, Any] | None = None) -> bool:
        return self.send(EventName.GAME_START, game_data or {})

    def game_over(self, results: dict[str, Any] | None = None) -> bool:
        return self.send(EventName.GAME_OVER, results or {})

    def on_pause(self, callback: EventCallback) -> bool:
        return self.on(EventName.PAUSE_GAME, callback)

    def on_resume(self, callback: EventCallback) -> bool:
        return self.on(EventName.RESUME_GAME, callback)

    # ==================== Levels & Score ====================

    def level_start(self, level: int | str, level_data: dict[str, Any] | None = None) -> bool:
        return self.send(EventName.LEVEL_START, {"level": level, **(level_data or {})})

    def level_end(self, level: int | str, results: dict[str, Any] | None = None) -> bool:
        return self.send(EventName.LEVEL_END, {"level": level, **(results or {})})

    def update_score(self, score: int | float, metadata: dict[str, Any] | None = None) -> bool:
        return self.send(EventName.SCORE_UPDATE, {"score": score, **(metadata or {})})

    # ==================== Ads ====================

    async def show_ad(
        self,
        ad_type: str | AdType = AdType.INTERSTITIAL,
        options: dict[str, Any] | None = None,
        timeout: float | None = None,
    ) -> AdResult:
        """Ask the host to display an ad and wait for the outcome.

        Args:
            ad_type: interstitial, rewarded or banner
            options: Extra fields sent along with the request
            timeout: Seconds to wait (defaults to config.ad_timeout; None waits
                until a response arrives or the endpoint is closed)

        Returns:
            The host's result, with every field it sent

        Raises:
            AdError: The host reported an error (e.g. "no_fill")
            RequestTimeoutError: No response within the timeout
            TransportUnavailableError: The request could not be sent
            EndpointClosedError: The endpoint is closed or was closed while waiting
        """
        if self.is_closed:
            raise EndpointClosedError("Cannot request an ad: endpoint is closed")

        ad_type_value = ad_type.value if isinstance(ad_type, AdType) else ad_type
        extra = dict(options or {})
        for key in _RESERVED_AD_KEYS:
            if key in extra:
                logger.warning(f"Ignoring reserved ad option {key!r}")
                del extra[key]

        request_id = self._ad_ids.next()
        request = AdRequest.model_validate(
            {**extra, "adType": ad_type_value, "requestId": request_id}
        )

        # Registering the router again is harmless and restores it if replaced
        self.on(EventName.AD_DISPLAYED, self._route_ad_result)
        pending = self._ads.create(request_id, EventName.AD_DISPLAYED.value)

        if not self.send(EventName.SHOW_AD, request.to_wire()):
            self._ads.reject(request_id, TransportUnavailableError("showAd request was not sent"))

        effective = timeout if timeout is not None else self.config.ad_timeout
        return await self._ads.wait(pending, effective)

    async def show_interstitial(self, options: dict[str, Any] | None = None) -> AdResult:
        return await self.show_ad(AdType.INTERSTITIAL, options)

    async def show_rewarded(self, options: dict[str, Any] | None = None) -> AdResult:
        return await self.show_ad(AdType.REWARDED, options)

    def _route_ad_result(self, data: Any) -> None:
        if not isinstance(data, dict):
            logger.debug(f"Ignoring malformed adDisplayed payload: {data!r}")
            return

        request_id = data.get("requestId")
        if not isinstance(request_id, str) or request_id not in self._ads:
            logger.debug(f"Ignoring adDisplayed for unknown request {request_id!r}")
            return

        error = data.get("error")
        if error:
            self._ads.reject(request_id, AdError(str(error), request_id=request_id, result=data))
            return

        self._ads.resolve(request_id, AdResult.model_validate(data))

    def _on_ad_removed(self, pending: PendingRequest) -> None:
        if not self._ads:
            self._registry.unregister(EventName.AD_DISPLAYED, self._route_ad_result)

    # ==================== Data ====================

    async def load_data(self, key: str, timeout: float | None = None) -> Any:
        """Request the host's value for `key`, store it locally and return it.

        Args:
            key: The data key
            timeout: Seconds to wait (defaults to config.data_timeout)

        Raises:
            RequestTimeoutError: No response within the timeout
            TransportUnavailableError: The request could not be sent
            EndpointClosedError: The endpoint is closed or was closed while waiting
        """
        if self.is_closed:
            raise EndpointClosedError(f"Cannot load {key!r}: endpoint is closed")

        pending = self._loads.get(key)
        if pending is None:
            event = data_event_name(key)
            handler = functools.partial(self._route_data, key)
            pending = self._loads.create(key, event, handler=handler)
            self.on(event, handler)
            if not self.send(EventName.GET_DATA, {"key": key}):
                self._loads.reject(key, TransportUnavailableError("getData request was not sent"))
        else:
            logger.debug(f"Joining in-flight load for {key!r}")

        effective = timeout if timeout is not None else self.config.data_timeout
        return await self._loads.wait(pending, effective)

    def _route_data(self, key: str, value: Any) -> None:
        if key not in self._loads:
            return
        self._data[key] = value
        self._loads.resolve(key, value)

    def _on_load_removed(self, pending: PendingRequest) -> None:
        if pending.handler is not None:
            self._registry.unregister(pending.result_event, pending.handler)

    # ==================== Lifecycle ====================

    def _on_close(self) -> None:
        ads = self._ads.reject_all(EndpointClosedError("Endpoint closed"))
        loads = self._loads.reject_all(EndpointClosedError("Endpoint closed"))
        if ads or loads:
            logger.info(f"Rejected {ads} pending ad request(s) and {loads} load(s) on close")
