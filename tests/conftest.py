"""Pytest configuration and shared fixtures."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass

import pytest

from magnethub import Child, Host, MemoryTransport


@dataclass
class Channel:
    """A connected host/child pair over in-memory transports."""

    host: Host
    child: Child
    host_transport: MemoryTransport
    child_transport: MemoryTransport


@pytest.fixture
def channel() -> Iterator[Channel]:
    """Host and Child connected by a synchronous in-memory channel."""
    host_transport, child_transport = MemoryTransport.pair()
    host = Host(host_transport)
    child = Child(child_transport)
    yield Channel(host, child, host_transport, child_transport)
    child.close()
    host.close()


@pytest.fixture
def host(channel: Channel) -> Host:
    return channel.host


@pytest.fixture
def child(channel: Channel) -> Child:
    return channel.child
