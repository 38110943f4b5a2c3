"""Host endpoint: the page embedding the game.

Usage:
    host = Host(transport)
    host.on_game_loaded(lambda meta: print("Game ready", meta))
    host.on_score_update(lambda data: print("Score:", data["score"]))
    host.pause_game()
"""

from __future__ import annotations

from typing import Any

from .config import EndpointConfig
from .endpoint import Endpoint
from .protocol.messages import AdType, EventName, Source, data_event_name
from .protocol.registry import EventCallback
from .transport.base import PeerTransport


class Host(Endpoint):
    """Host side of the channel. Answers ad and data requests from the child."""

    identity = Source.HOST

    def __init__(
        self,
        transport: PeerTransport,
        config: EndpointConfig | None = None,
        api_key: str | None = None,
    ) -> None:
        super().__init__(transport, config)
        self.api_key = api_key

    # ==================== Game Control ====================

    def pause_game(self, pause_data: dict[str, Any] | None = None) -> bool:
        return self.send(EventName.PAUSE_GAME, pause_data or {})

    def resume_game(self, resume_data: dict[str, Any] | None = None) -> bool:
        return self.send(EventName.RESUME_GAME, resume_data or {})

    # ==================== Event Listeners ====================

    def on_game_loaded(self, callback: EventCallback) -> bool:
        return self.on(EventName.GAME_LOADED, callback)

    def on_game_start(self, callback: EventCallback) -> bool:
        return self.on(EventName.GAME_START, callback)

    def on_game_over(self, callback: EventCallback) -> bool:
        return self.on(EventName.GAME_OVER, callback)

    def on_level_start(self, callback: EventCallback) -> bool:
        return self.on(EventName.LEVEL_START, callback)

    def on_level_end(self, callback: EventCallback) -> bool:
        return self.on(EventName.LEVEL_END, callback)

    def on_score_update(self, callback: EventCallback) -> bool:
        return self.on(EventName.SCORE_UPDATE, callback)

    # ==================== Ads ====================

    def on_show_ad(self, callback: EventCallback) -> bool:
        """Register a callback receiving {adType, requestId, ...options}."""
        return self.on(EventName.SHOW_AD, callback)

    def ad_displayed(
        self,
        request_id: str,
        ad_type: str | AdType,
        result: dict[str, Any] | None = None,
    ) -> bool:
        """Report the outcome of an ad request back to the game.

        Args:
            request_id: The requestId from the showAd payload
            ad_type: Type of ad that was displayed
            result: Outcome fields (completed, skipped, rewarded, error, ...)
        """
        ad_type_value = ad_type.value if isinstance(ad_type, AdType) else ad_type
        payload = {"adType": ad_type_value, **(result or {}), "requestId": request_id}
        return self.send(EventName.AD_DISPLAYED, payload)

    # ==================== Data ====================

    def on_set_data(self, callback: EventCallback) -> bool:
        """Register a callback receiving {key, value} when the game saves data."""
        return self.on(EventName.SET_DATA, callback)

    def on_get_data(self, callback: EventCallback) -> bool:
        """Register a callback receiving {key} when the game requests data."""
        return self.on(EventName.GET_DATA, callback)

    def send_data(self, key: str, value: Any) -> bool:
        """Answer a getData request with the value for `key`."""
        return self.send(data_event_name(key), value)
