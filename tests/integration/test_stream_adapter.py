"""Integration tests for endpoints talking over a real TCP stream.

A HostSimulator runs behind asyncio.start_server and a Child connects with
StreamTransport, exercising the JSON-lines wire format end to end.
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator
from dataclasses import dataclass

import pytest
import pytest_asyncio

from magnethub import AdError, Child, Host, SimulatorConfig, StreamTransport
from magnethub.simulator import HostSimulator


@dataclass
class Session:
    child: Child
    simulators: list[HostSimulator]


async def _serve(config: SimulatorConfig, simulators: list[HostSimulator]) -> asyncio.Server:
    async def handle(reader: asyncio.StreamReader, writer: asyncio.StreamWriter) -> None:
        transport = StreamTransport(reader, writer)
        host = Host(transport)
        simulators.append(HostSimulator(host, config=config))
        await transport.start()
        await transport.wait_closed()
        host.close()
        await transport.close()

    return await asyncio.start_server(handle, "127.0.0.1", 0)


@pytest_asyncio.fixture
async def session(request: pytest.FixtureRequest) -> AsyncIterator[Session]:
    outcome = getattr(request, "param", "completed")
    config = SimulatorConfig(ad_outcome=outcome, initial_data={"highscore": 42})
    simulators: list[HostSimulator] = []
    server = await _serve(config, simulators)
    port = server.sockets[0].getsockname()[1]

    reader, writer = await asyncio.open_connection("127.0.0.1", port)
    transport = StreamTransport(reader, writer)
    child = Child(transport)
    await transport.start()

    yield Session(child, simulators)

    child.close()
    await transport.close()
    server.close()
    await server.wait_closed()


class TestStreamRoundTrip:
    """Correlated requests across a process boundary."""

    @pytest.mark.asyncio
    async def test_show_rewarded(self, session: Session) -> None:
        result = await asyncio.wait_for(session.child.show_rewarded(), timeout=5.0)

        assert result.completed is True
        assert result.rewarded is True
        assert session.simulators[0].ad_requests[0].ad_type == "rewarded"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("session", ["no_fill"], indirect=True)
    async def test_no_fill(self, session: Session) -> None:
        with pytest.raises(AdError, match="no_fill"):
            await asyncio.wait_for(session.child.show_interstitial(), timeout=5.0)

    @pytest.mark.asyncio
    async def test_load_seeded_data(self, session: Session) -> None:
        value = await asyncio.wait_for(session.child.load_data("highscore"), timeout=5.0)

        assert value == 42
        assert session.child.get_data("highscore") == 42

    @pytest.mark.asyncio
    async def test_set_then_load(self, session: Session) -> None:
        session.child.set_data("coins", {"gold": 3})

        value = await asyncio.wait_for(session.child.load_data("coins"), timeout=5.0)

        assert value == {"gold": 3}
        assert session.simulators[0].store["coins"] == {"gold": 3}

    @pytest.mark.asyncio
    async def test_lifecycle_events_recorded(self, session: Session) -> None:
        session.child.game_loaded({"title": "Snake"})
        session.child.update_score(10)

        # A correlated call afterwards guarantees the earlier lines were read
        await asyncio.wait_for(session.child.load_data("highscore"), timeout=5.0)

        simulator = session.simulators[0]
        assert simulator.events_named("gameLoaded")[0].data == {"title": "Snake"}
        assert simulator.events_named("scoreUpdate")[0].data == {"score": 10}
