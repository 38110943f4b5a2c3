"""Unit tests for HostSimulator."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from magnethub import AdError, SimulatorConfig
from magnethub.simulator import HostSimulator

if TYPE_CHECKING:
    from tests.conftest import Channel


class TestAdOutcomes:
    """showAd requests are answered according to the configured outcome."""

    @pytest.mark.asyncio
    async def test_completed_rewarded(self, channel: Channel) -> None:
        simulator = HostSimulator(channel.host)

        result = await channel.child.show_rewarded({"placement": "shop"})

        assert result.completed is True
        assert result.skipped is False
        assert result.rewarded is True
        assert simulator.ad_requests[0].ad_type == "rewarded"
        assert simulator.ad_requests[0].model_extra == {"placement": "shop"}

    @pytest.mark.asyncio
    async def test_completed_interstitial_not_rewarded(self, channel: Channel) -> None:
        HostSimulator(channel.host)

        result = await channel.child.show_interstitial()

        assert result.completed is True
        assert result.rewarded is False

    @pytest.mark.asyncio
    async def test_skipped(self, channel: Channel) -> None:
        HostSimulator(channel.host, config=SimulatorConfig(ad_outcome="skipped"))

        result = await channel.child.show_rewarded()

        assert result.skipped is True
        assert result.rewarded is False

    @pytest.mark.asyncio
    async def test_no_fill(self, channel: Channel) -> None:
        HostSimulator(channel.host, config=SimulatorConfig(ad_outcome="no_fill"))

        with pytest.raises(AdError, match="no_fill"):
            await channel.child.show_ad()

    def test_invalid_request_is_ignored(self, channel: Channel) -> None:
        simulator = HostSimulator(channel.host)

        channel.child.send("showAd", {"adType": "banner"})

        assert simulator.ad_requests == []
        assert channel.host_transport.sent == []


class TestDataStore:
    """setData and getData against the simulated page store."""

    @pytest.mark.asyncio
    async def test_initial_data(self, channel: Channel) -> None:
        HostSimulator(channel.host, config=SimulatorConfig(initial_data={"highscore": 42}))

        assert await channel.child.load_data("highscore") == 42

    @pytest.mark.asyncio
    async def test_unknown_key_is_none(self, channel: Channel) -> None:
        HostSimulator(channel.host)

        assert await channel.child.load_data("missing") is None

    @pytest.mark.asyncio
    async def test_set_then_load(self, channel: Channel) -> None:
        simulator = HostSimulator(channel.host)

        channel.child.set_data("coins", 12)

        assert simulator.store == {"coins": 12}
        assert await channel.child.load_data("coins") == 12

    def test_initial_data_is_copied(self, channel: Channel) -> None:
        config = SimulatorConfig(initial_data={"a": 1})
        simulator = HostSimulator(channel.host, config=config)

        channel.child.set_data("a", 2)

        assert simulator.store["a"] == 2
        assert config.initial_data == {"a": 1}

    def test_invalid_payloads_are_ignored(self, channel: Channel) -> None:
        simulator = HostSimulator(channel.host)

        channel.child.send("setData", "coins=3")
        channel.child.send("getData", {"key": 3})

        assert simulator.store == {}
        assert channel.host_transport.sent == []


class TestEventRecording:
    """One-way game events are recorded in order."""

    def test_records_lifecycle_and_progression(self, channel: Channel) -> None:
        simulator = HostSimulator(channel.host)

        channel.child.game_loaded({"title": "Snake"})
        channel.child.game_start()
        channel.child.level_start(1)
        channel.child.update_score(50)
        channel.child.level_end(1, {"stars": 3})
        channel.child.game_over({"score": 50})

        assert [e.event for e in simulator.events] == [
            "gameLoaded",
            "gameStart",
            "levelStart",
            "scoreUpdate",
            "levelEnd",
            "gameOver",
        ]
        assert simulator.events_named("levelEnd")[0].data == {"level": 1, "stars": 3}

    def test_pause_and_resume(self, channel: Channel) -> None:
        simulator = HostSimulator(channel.host)
        seen: list[str] = []
        channel.child.on_pause(lambda _: seen.append("pause"))
        channel.child.on_resume(lambda _: seen.append("resume"))

        assert simulator.pause() is True
        assert simulator.resume() is True

        assert seen == ["pause", "resume"]
