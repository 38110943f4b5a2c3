"""Configuration for endpoints and the host simulator.

Values can be given explicitly or read from MAGNETHUB_* environment
variables via the from_env() constructors.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import Any

logger = logging.getLogger(__name__)

AD_OUTCOMES = ("completed", "skipped", "no_fill")


def _env_timeout(name: str) -> float | None:
    """Read an optional positive timeout (seconds) from the environment."""
    raw = os.getenv(name, "").strip()
    if not raw:
        return None
    try:
        value = float(raw)
    except ValueError:
        logger.warning(f"Ignoring {name}={raw!r}: not a number")
        return None
    if value <= 0:
        logger.warning(f"Ignoring {name}={raw!r}: must be positive")
        return None
    return value


@dataclass
class EndpointConfig:
    """Configuration shared by Host and Child endpoints.

    A timeout of None means a correlated request waits until a response
    arrives, the caller cancels it, or the endpoint is closed.
    """

    ad_timeout: float | None = None
    data_timeout: float | None = None

    @classmethod
    def from_env(cls) -> EndpointConfig:
        return cls(
            ad_timeout=_env_timeout("MAGNETHUB_AD_TIMEOUT"),
            data_timeout=_env_timeout("MAGNETHUB_DATA_TIMEOUT"),
        )


@dataclass
class SimulatorConfig:
    """Configuration for the host simulator server."""

    host: str = "127.0.0.1"
    port: int = 4100

    # How the simulated page answers showAd: "completed", "skipped" or "no_fill"
    ad_outcome: str = "completed"

    # Values the simulated page already holds for getData requests
    initial_data: dict[str, Any] = field(default_factory=dict)

    endpoint: EndpointConfig = field(default_factory=EndpointConfig)

    def __post_init__(self) -> None:
        if self.ad_outcome not in AD_OUTCOMES:
            raise ValueError(
                f"Unknown ad outcome {self.ad_outcome!r}, expected one of {AD_OUTCOMES}"
            )

    @classmethod
    def from_env(cls) -> SimulatorConfig:
        port_raw = os.getenv("MAGNETHUB_PORT", "").strip()
        port = 4100
        if port_raw:
            try:
                port = int(port_raw)
            except ValueError:
                logger.warning(f"Ignoring MAGNETHUB_PORT={port_raw!r}: not an integer")

        outcome = os.getenv("MAGNETHUB_AD_OUTCOME", "completed").strip() or "completed"
        if outcome not in AD_OUTCOMES:
            logger.warning(f"Ignoring MAGNETHUB_AD_OUTCOME={outcome!r}")
            outcome = "completed"

        return cls(
            host=os.getenv("MAGNETHUB_HOST", "127.0.0.1"),
            port=port,
            ad_outcome=outcome,
            endpoint=EndpointConfig.from_env(),
        )
