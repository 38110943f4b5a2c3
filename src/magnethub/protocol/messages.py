"""Wire message definitions.

Every message exchanged between the host page and the embedded game has the
same shape:

    {"event": "scoreUpdate", "data": {"score": 120}, "source": "child"}

`source` always names the sender. Receivers use it to drop echoes of their
own messages when both endpoints share one channel.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

# Prefix of the keyed response event carrying a data value (data:<key>)
DATA_EVENT_PREFIX = "data:"


class Source(str, Enum):
    """Identity of a message sender."""

    HOST = "host"
    CHILD = "child"

    @property
    def peer(self) -> Source:
        """The identity of the opposite endpoint."""
        return Source.CHILD if self is Source.HOST else Source.HOST


class EventName(str, Enum):
    """Catalog of event names shared by both endpoint implementations."""

    # Lifecycle (child -> host)
    GAME_LOADED = "gameLoaded"
    GAME_START = "gameStart"
    GAME_OVER = "gameOver"

    # Game control (host -> child)
    PAUSE_GAME = "pauseGame"
    RESUME_GAME = "resumeGame"

    # Progression (child -> host)
    LEVEL_START = "levelStart"
    LEVEL_END = "levelEnd"
    SCORE_UPDATE = "scoreUpdate"

    # Data (both directions); values come back on data:<key>
    SET_DATA = "setData"
    GET_DATA = "getData"

    # Ads
    SHOW_AD = "showAd"  # child -> host request
    AD_DISPLAYED = "adDisplayed"  # host -> child response


class AdType(str, Enum):
    """Supported ad formats."""

    INTERSTITIAL = "interstitial"
    REWARDED = "rewarded"
    BANNER = "banner"


def data_event_name(key: str) -> str:
    """Name of the keyed event that carries the value for `key`."""
    return f"{DATA_EVENT_PREFIX}{key}"


class Message(BaseModel):
    """A single message on the wire."""

    event: str = Field(min_length=1)
    data: Any = None
    source: Source

    @classmethod
    def create(cls, event: str | EventName, data: Any, source: Source) -> Message:
        return cls(
            event=event.value if isinstance(event, EventName) else event,
            data=data,
            source=source,
        )

    @classmethod
    def parse(cls, payload: Any) -> Message | None:
        """Parse an untrusted inbound payload, returning None if it is malformed.

        Unknown `source` values are treated as malformed.
        """
        if not isinstance(payload, dict):
            return None
        try:
            return cls.model_validate(payload)
        except ValidationError:
            return None

    def to_wire(self) -> dict[str, Any]:
        # data is handed over as-is; encoding it is the transport's concern
        return {"event": self.event, "data": self.data, "source": self.source.value}


class AdRequest(BaseModel):
    """Payload of a showAd request.

    Extra options given by the game are kept and sent alongside adType and
    requestId.
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    ad_type: str = Field(default=AdType.INTERSTITIAL.value, alias="adType")
    request_id: str = Field(alias="requestId")

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


class AdResult(BaseModel):
    """Payload of an adDisplayed response.

    Fields are passed through exactly as the host sent them: no value is
    coerced, defaulted or cross-checked, and unknown fields are kept as
    extras. Only requestId is required.
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    request_id: str = Field(alias="requestId")
    ad_type: Any = Field(default=None, alias="adType")
    completed: Any = None
    skipped: Any = None
    rewarded: Any = None
    error: Any = None

    def to_wire(self) -> dict[str, Any]:
        """Dump the payload using wire field names, omitting unset fields."""
        return self.model_dump(by_alias=True, exclude_unset=True)
