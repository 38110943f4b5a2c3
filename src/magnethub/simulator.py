"""Host simulator for developing games without a real embedding page.

Wires a Host endpoint to canned behavior:
- showAd is answered immediately according to the configured ad outcome
- setData values are kept in the simulator store
- getData is answered from that store (None for unknown keys)
- lifecycle and progression events are logged and recorded
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from pydantic import ValidationError

from .config import SimulatorConfig
from .host import Host
from .protocol.messages import AdRequest, AdType, EventName

logger = logging.getLogger(__name__)


@dataclass
class RecordedEvent:
    """A one-way notification received from the game."""

    event: str
    data: Any


@dataclass
class HostSimulator:
    """Answers a game's requests the way a real host page would."""

    host: Host
    config: SimulatorConfig = field(default_factory=SimulatorConfig)
    events: list[RecordedEvent] = field(default_factory=list)
    ad_requests: list[AdRequest] = field(default_factory=list)

    # Saved game data as the page keeps it (e.g. cloud saves)
    store: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        self.store = {**self.config.initial_data, **self.store}

        self.host.on_show_ad(self._handle_show_ad)
        self.host.on_set_data(self._handle_set_data)
        self.host.on_get_data(self._handle_get_data)

        for event in (
            EventName.GAME_LOADED,
            EventName.GAME_START,
            EventName.GAME_OVER,
            EventName.LEVEL_START,
            EventName.LEVEL_END,
            EventName.SCORE_UPDATE,
        ):
            self.host.on(event, self._recorder(event.value))

    def pause(self) -> bool:
        return self.host.pause_game()

    def resume(self) -> bool:
        return self.host.resume_game()

    def events_named(self, event: str | EventName) -> list[RecordedEvent]:
        name = event.value if isinstance(event, EventName) else event
        return [e for e in self.events if e.event == name]

    def _recorder(self, event: str):
        def record(data: Any) -> None:
            logger.info(f"Game event {event}: {data}")
            self.events.append(RecordedEvent(event=event, data=data))

        return record

    def _handle_show_ad(self, data: Any) -> None:
        try:
            request = AdRequest.model_validate(data)
        except ValidationError as e:
            logger.warning(f"Ignoring invalid showAd request: {e}")
            return

        self.ad_requests.append(request)
        logger.info(f"Ad requested: {request.ad_type} ({request.request_id})")

        outcome = self.config.ad_outcome
        if outcome == "no_fill":
            result: dict[str, Any] = {"error": "no_fill"}
        elif outcome == "skipped":
            result = {"completed": False, "skipped": True, "rewarded": False}
        else:
            result = {
                "completed": True,
                "skipped": False,
                "rewarded": request.ad_type == AdType.REWARDED.value,
            }
        self.host.ad_displayed(request.request_id, request.ad_type, result)

    def _handle_set_data(self, data: Any) -> None:
        if not isinstance(data, dict) or not isinstance(data.get("key"), str):
            logger.warning(f"Ignoring invalid setData payload: {data!r}")
            return
        self.store[data["key"]] = data.get("value")
        logger.debug(f"Stored {data['key']!r}")

    def _handle_get_data(self, data: Any) -> None:
        if not isinstance(data, dict) or not isinstance(data.get("key"), str):
            logger.warning(f"Ignoring invalid getData payload: {data!r}")
            return
        key = data["key"]
        self.host.send_data(key, self.store.get(key))
