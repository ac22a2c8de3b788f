"""Pytest fixtures for tests."""

from pathlib import Path
from tempfile import TemporaryDirectory

import pytest

from boneled.framework import DeviceRegistry, DeviceServer
from boneled.hardware import MemoryPinAccessor
from boneled.led import BeagleBoneLedScout


async def start_and_settle(server: DeviceServer) -> None:
    """Run the server's scouts and wait for their background discovery."""
    await server.start_scouts()
    for scout in server.scouts:
        await scout.discovery


def make_server(pins: list[str], accessor: MemoryPinAccessor, registry: DeviceRegistry | None = None) -> DeviceServer:
    """A server with one LED scout, not started."""
    return (
        DeviceServer(registry or DeviceRegistry())
        .name("BeagleBone LED")
        .use(BeagleBoneLedScout, pins, accessor)
    )


@pytest.fixture
def temp_dir():
    """Create a temporary directory that gets cleaned up."""
    with TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def accessor():
    """Simulated pin header."""
    return MemoryPinAccessor()


@pytest.fixture
def registry():
    """In-memory device registry."""
    return DeviceRegistry()
