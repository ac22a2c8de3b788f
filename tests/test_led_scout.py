"""Tests for the LED scout's provision/discover reconciliation."""

import asyncio
from unittest.mock import AsyncMock, Mock, patch

import pytest

from boneled.exceptions import RegistryError
from boneled.framework import DeviceRecord, DeviceRegistry, ScoutContext
from boneled.hardware import MemoryPinAccessor
from boneled.led import BeagleBoneLedDevice, BeagleBoneLedScout

from conftest import make_server, start_and_settle


def led_record(pin: str, state: str = "off", record_id: str | None = None) -> DeviceRecord:
    return DeviceRecord(
        id=record_id or f"rec-{pin}",
        type="beaglebone_led",
        name=pin,
        state=state,
        properties={"pin": pin},
    )


def mock_context(results_by_pin: dict[str, list[DeviceRecord]]) -> Mock:
    """ScoutContext double with a registry answering per pin."""
    context = Mock(spec=ScoutContext)
    context.registry = Mock(spec=DeviceRegistry)
    context.registry.where.side_effect = lambda **filters: filters

    async def find(query):
        return results_by_pin.get(query["pin"], [])

    context.registry.find = AsyncMock(side_effect=find)
    return context


async def run_scout(scout: BeagleBoneLedScout, context: Mock) -> None:
    scout.init(context, Mock())
    await scout.discovery


class TestScoutInit:
    """Test the scout's startup contract."""

    def test_pins_come_from_constructor(self, accessor):
        scout = BeagleBoneLedScout(("P9_12", "P9_11"), accessor)
        assert scout.pins == ["P9_12", "P9_11"]

    @pytest.mark.asyncio
    async def test_done_signalled_before_discovery_completes(self, accessor):
        """init reports completion right after scheduling the lookups."""
        scout = BeagleBoneLedScout(["P9_12"], accessor)
        context = mock_context({})
        done = Mock()

        scout.init(context, done)

        done.assert_called_once_with()
        assert not scout.discovery.done()
        context.discover.assert_not_called()

        await scout.discovery
        context.discover.assert_called_once_with(BeagleBoneLedDevice, "P9_12", accessor)

    @pytest.mark.asyncio
    async def test_waits_for_platform_before_querying(self):
        accessor = MemoryPinAccessor()
        ready = asyncio.Event()
        original = accessor.get_platform

        async def slow_platform():
            await ready.wait()
            return await original()

        accessor.get_platform = slow_platform
        scout = BeagleBoneLedScout(["P9_12"], accessor)
        context = mock_context({})

        scout.init(context, Mock())
        await asyncio.sleep(0)
        context.registry.find.assert_not_called()

        ready.set()
        await scout.discovery
        context.registry.find.assert_awaited_once()


@pytest.mark.asyncio
class TestScoutReconcile:
    """Test provision versus discover per pin."""

    async def test_queries_by_type_and_pin(self, accessor):
        context = mock_context({})

        await run_scout(BeagleBoneLedScout(["P9_12"], accessor), context)

        context.registry.where.assert_called_once_with(type="beaglebone_led", pin="P9_12")

    async def test_existing_record_is_provisioned_not_discovered(self, accessor):
        existing = led_record("P9_12")
        context = mock_context({"P9_12": [existing]})

        await run_scout(BeagleBoneLedScout(["P9_12"], accessor), context)

        context.provision.assert_called_once_with(existing, BeagleBoneLedDevice, "P9_12", accessor)
        context.discover.assert_not_called()

    async def test_first_match_wins(self, accessor):
        first = led_record("P9_12", record_id="a")
        second = led_record("P9_12", record_id="b")
        context = mock_context({"P9_12": [first, second]})

        await run_scout(BeagleBoneLedScout(["P9_12"], accessor), context)

        context.provision.assert_called_once()
        assert context.provision.call_args.args[0] is first

    async def test_registry_failure_skips_only_that_pin(self, accessor):
        """A failed lookup for P9_12 does not stop P9_11."""
        server = make_server(["P9_12", "P9_11"], accessor)
        real_find = server.registry.find

        async def flaky_find(query):
            if query.filters["pin"] == "P9_12":
                raise RegistryError("registry offline")
            return await real_find(query)

        with patch.object(server.registry, "find", new=flaky_find):
            await start_and_settle(server)

        assert [d.properties["pin"] for d in server.devices] == ["P9_11"]
        assert "P9_12" not in accessor.modes

    async def test_mixed_pins(self, accessor):
        """One pin reattached, the other created."""
        registry = DeviceRegistry()
        registry.save_record(led_record("P9_11", record_id="kept"))
        server = make_server(["P9_12", "P9_11"], accessor, registry)

        await start_and_settle(server)

        by_pin = {d.properties["pin"]: d for d in server.devices}
        assert by_pin["P9_11"].id == "kept"
        assert by_pin["P9_12"].id != "kept"
        assert len(registry.records()) == 2


@pytest.mark.asyncio
class TestProvisionedState:
    """Test state restored from a stored record."""

    async def test_restored_on_state_with_pin_low(self, accessor):
        """The record's state is restored while the pin starts low."""
        registry = DeviceRegistry()
        registry.save_record(led_record("P9_12", state="on"))
        server = make_server(["P9_12"], accessor, registry)

        await start_and_settle(server)

        device = server.devices[0]
        assert device.state == "on"
        assert device.available_transitions() == ["turn-off"]
        assert accessor.writes("P9_12") == [0]

    async def test_second_provision_of_live_record_is_ignored(self, accessor):
        registry = DeviceRegistry()
        record = led_record("P9_12")
        registry.save_record(record)
        server = make_server(["P9_12"], accessor, registry)
        await start_and_settle(server)

        again = server.provision(record, BeagleBoneLedDevice, "P9_12", accessor)

        assert again is server.devices[0]
        assert len(server.devices) == 1
        assert accessor.writes("P9_12") == [0]


@pytest.mark.asyncio
async def test_platform_failure_is_logged(accessor, caplog):
    accessor.get_platform = AsyncMock(side_effect=RuntimeError("no board"))
    server = make_server(["P9_12"], accessor)

    with pytest.raises(RuntimeError):
        await start_and_settle(server)

    assert server.devices == []
    assert "LED discovery failed" in caplog.text
