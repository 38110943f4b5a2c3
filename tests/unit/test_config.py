"""Unit tests for configuration loading."""

from __future__ import annotations

import logging

import pytest

from magnethub.config import EndpointConfig, SimulatorConfig


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "MAGNETHUB_AD_TIMEOUT",
        "MAGNETHUB_DATA_TIMEOUT",
        "MAGNETHUB_HOST",
        "MAGNETHUB_PORT",
        "MAGNETHUB_AD_OUTCOME",
    ):
        monkeypatch.delenv(name, raising=False)


class TestEndpointConfig:
    """Tests for EndpointConfig."""

    def test_defaults_wait_forever(self) -> None:
        config = EndpointConfig()

        assert config.ad_timeout is None
        assert config.data_timeout is None

    def test_from_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("MAGNETHUB_AD_TIMEOUT", "30")
        monkeypatch.setenv("MAGNETHUB_DATA_TIMEOUT", "2.5")

        config = EndpointConfig.from_env()

        assert config.ad_timeout == 30.0
        assert config.data_timeout == 2.5

    @pytest.mark.parametrize("raw", ["soon", "0", "-1"])
    def test_invalid_timeout_is_ignored(
        self, monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture, raw: str
    ) -> None:
        monkeypatch.setenv("MAGNETHUB_AD_TIMEOUT", raw)

        with caplog.at_level(logging.WARNING):
            config = EndpointConfig.from_env()

        assert config.ad_timeout is None
        assert "MAGNETHUB_AD_TIMEOUT" in caplog.text

    def test_blank_timeout_is_unset(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("MAGNETHUB_DATA_TIMEOUT", "  ")

        assert EndpointConfig.from_env().data_timeout is None


class TestSimulatorConfig:
    """Tests for SimulatorConfig."""

    def test_defaults(self) -> None:
        config = SimulatorConfig()

        assert config.host == "127.0.0.1"
        assert config.port == 4100
        assert config.ad_outcome == "completed"
        assert config.initial_data == {}

    def test_unknown_outcome_rejected(self) -> None:
        with pytest.raises(ValueError, match="Unknown ad outcome"):
            SimulatorConfig(ad_outcome="exploded")

    def test_from_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("MAGNETHUB_HOST", "0.0.0.0")
        monkeypatch.setenv("MAGNETHUB_PORT", "9000")
        monkeypatch.setenv("MAGNETHUB_AD_OUTCOME", "skipped")
        monkeypatch.setenv("MAGNETHUB_AD_TIMEOUT", "5")

        config = SimulatorConfig.from_env()

        assert config.host == "0.0.0.0"
        assert config.port == 9000
        assert config.ad_outcome == "skipped"
        assert config.endpoint.ad_timeout == 5.0

    def test_from_env_falls_back_on_bad_values(
        self, monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
    ) -> None:
        monkeypatch.setenv("MAGNETHUB_PORT", "http")
        monkeypatch.setenv("MAGNETHUB_AD_OUTCOME", "exploded")

        with caplog.at_level(logging.WARNING):
            config = SimulatorConfig.from_env()

        assert config.port == 4100
        assert config.ad_outcome == "completed"
        assert "MAGNETHUB_PORT" in caplog.text
        assert "MAGNETHUB_AD_OUTCOME" in caplog.text
