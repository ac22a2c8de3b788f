"""End-to-end tests: bootstrap, discovery, HTTP listener and pin writes."""

import asyncio

import aiohttp
import pytest

from boneled.app import create_server, serve
from boneled.exceptions import ListenerStartError
from boneled.framework import DeviceRegistry
from boneled.hardware import MemoryPinAccessor
from boneled.models import AppConfig, GpioBackend

from conftest import make_server, start_and_settle


def memory_config(**overrides) -> AppConfig:
    values = {"pins": ["P9_12"], "backend": GpioBackend.MEMORY, "registry_path": None}
    values.update(overrides)
    return AppConfig(**values)


class TestBootstrap:
    """Test composing the server from configuration."""

    def test_create_server_uses_config(self, accessor):
        server = create_server(memory_config(name="Bench", pins=["P8_10", "P8_12"]), accessor)

        assert server.server_name == "Bench"
        assert server.registry.path is None

    def test_create_server_opens_registry_file(self, temp_dir, accessor):
        path = temp_dir / "registry.json"
        server = create_server(memory_config(registry_path=path), accessor)
        assert server.registry.path == path

    @pytest.mark.asyncio
    async def test_create_server_builds_memory_backend(self):
        server = create_server(memory_config())

        await start_and_settle(server)

        assert isinstance(server.scouts[0].accessor, MemoryPinAccessor)
        assert [d.name for d in server.devices] == ["P9_12"]


@pytest.mark.integration
@pytest.mark.asyncio
class TestListener:
    """Test the running HTTP listener."""

    async def test_single_pin_discover_then_turn_on(self):
        """One pin, empty registry: one discover, then turn-on drives the pin high."""
        accessor = MemoryPinAccessor()
        registry = DeviceRegistry()
        server = make_server(["P9_12"], accessor, registry)

        await server.listen(0)
        try:
            await server.scouts[0].discovery
            assert len(server.devices) == 1
            device = server.devices[0]
            assert device.name == "P9_12"

            async with aiohttp.ClientSession() as session:
                async with session.post(
                    f"{server.url}/devices/{device.id}", data={"action": "turn-on"}
                ) as resp:
                    assert resp.status == 200
                    data = await resp.json()
        finally:
            await server.stop()

        assert data["state"] == "on"
        assert accessor.writes("P9_12") == [0, 1]
        assert registry.get(device.id).state == "on"
        assert not server.is_running

    async def test_running_message_is_logged(self, caplog):
        caplog.set_level("INFO", logger="boneled")
        server = make_server(["P9_12"], MemoryPinAccessor())

        await server.listen(0)
        await server.scouts[0].discovery
        await server.stop()

        assert f"BeagleBone LED is running at http://127.0.0.1:{server.port}" in caplog.text

    async def test_port_in_use(self):
        first = make_server(["P9_12"], MemoryPinAccessor())
        second = make_server(["P9_11"], MemoryPinAccessor())

        await first.listen(0)
        try:
            with pytest.raises(ListenerStartError) as exc_info:
                await second.listen(first.port)
            await second.scouts[0].discovery
        finally:
            await first.stop()

        assert exc_info.value.port == first.port
        assert not second.is_running

    async def test_serve_stops_on_event(self):
        config = memory_config().model_copy(update={"port": 0})
        server = create_server(config, MemoryPinAccessor())
        stop = asyncio.Event()

        task = asyncio.ensure_future(serve(server, config, stop))
        while not server.is_running:
            await asyncio.sleep(0.01)
        stop.set()
        await task

        assert not server.is_running
