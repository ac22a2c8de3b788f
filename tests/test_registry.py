"""Tests for the device registry and its record store."""

import json
from unittest.mock import Mock

import pytest

from boneled.exceptions import ConfigFileInvalidError, ConfigValidationError, RegistryError
from boneled.framework import DeviceEvent, DeviceRecord, DeviceRegistry

@pytest.fixture
def records():
    return [
        DeviceRecord(id="1", type="beaglebone_led", name="P9_12", state="off", properties={"pin": "P9_12"}),
        DeviceRecord(id="2", type="beaglebone_led", name="P9_11", state="on", properties={"pin": "P9_11"}),
        DeviceRecord(id="3", type="thermometer", name="t", properties={"pin": "P9_12"}),
    ]


@pytest.mark.asyncio
class TestQueries:
    """Test where/find."""

    async def test_find_by_type_and_pin(self, registry, records):
        for record in records:
            registry.save_record(record)

        results = await registry.find(registry.where(type="beaglebone_led", pin="P9_12"))

        assert [r.id for r in results] == ["1"]

    async def test_find_by_top_level_field(self, registry, records):
        for record in records:
            registry.save_record(record)

        results = await registry.find(registry.where(state="on"))

        assert [r.id for r in results] == ["2"]

    async def test_find_no_match(self, registry, records):
        for record in records:
            registry.save_record(record)

        assert await registry.find(registry.where(pin="P8_10")) == []

    async def test_missing_key_does_not_match(self, registry, records):
        registry.save_record(records[0])

        assert await registry.find(registry.where(colour="red")) == []

    async def test_lookup_failure_raises_registry_error(self, registry, records):
        registry.save_record(records[0])
        query = registry.where(type="beaglebone_led")
        query.matches = Mock(side_effect=TypeError("bad record"))

        with pytest.raises(RegistryError):
            await registry.find(query)


class TestPersistence:
    """Test the JSON record store."""

    def test_missing_file_starts_empty(self, temp_dir):
        registry = DeviceRegistry(temp_dir / "registry.json")
        assert registry.records() == []

    def test_saved_records_are_rehydrated(self, temp_dir, records):
        path = temp_dir / "registry.json"
        registry = DeviceRegistry(path)
        registry.save_record(records[1])

        reloaded = DeviceRegistry(path)

        assert reloaded.get("2") == records[1]
        data = json.loads(path.read_text())
        assert data["devices"][0]["properties"] == {"pin": "P9_11"}

    def test_in_memory_registry_writes_nothing(self, temp_dir, records):
        registry = DeviceRegistry()
        registry.save_record(records[0])
        assert list(temp_dir.iterdir()) == []

    def test_invalid_json_file(self, temp_dir):
        path = temp_dir / "registry.json"
        path.write_text('{"devices": [}')

        with pytest.raises(RegistryError) as exc_info:
            DeviceRegistry(path)

        assert exc_info.value.user_message == f"Device registry {path} is corrupt."
        assert "registry.json.bak" in exc_info.value.recovery_hint
        assert isinstance(exc_info.value.__cause__, ConfigFileInvalidError)

    def test_invalid_record(self, temp_dir):
        path = temp_dir / "registry.json"
        path.write_text('{"devices": [{"id": "1"}]}')

        with pytest.raises(RegistryError) as exc_info:
            DeviceRegistry(path)

        assert isinstance(exc_info.value.__cause__, ConfigValidationError)
        assert "Configuration" not in exc_info.value.user_message

    def test_unwritable_store_raises_registry_error(self, temp_dir, records):
        blocker = temp_dir / "not-a-dir"
        blocker.write_text("")
        registry = DeviceRegistry(blocker / "registry.json")

        with pytest.raises(RegistryError):
            registry.save_record(records[0])


class TestDeviceObserver:
    """Test the registry reacting to device events."""

    def _live(self, record):
        live = Mock()
        live.to_record.return_value = record
        return live

    def test_discovered_device_is_saved(self, registry, records):
        registry.on_device_event(DeviceEvent.DEVICE_DISCOVERED, self._live(records[0]))
        assert registry.get("1") == records[0]

    def test_state_change_is_on_disk_when_event_returns(self, temp_dir, records):
        path = temp_dir / "registry.json"
        registry = DeviceRegistry(path)

        registry.on_device_event(DeviceEvent.STATE_CHANGED, self._live(records[1]))

        assert json.loads(path.read_text())["devices"][0]["state"] == "on"

    def test_state_change_is_saved(self, registry, records):
        registry.save_record(records[0])
        changed = records[0].model_copy(update={"state": "on"})

        registry.on_device_event(DeviceEvent.STATE_CHANGED, self._live(changed))

        assert registry.get("1").state == "on"

    def test_provisioned_device_is_not_rewritten(self, registry, records):
        live = self._live(records[0])
        registry.on_device_event(DeviceEvent.DEVICE_PROVISIONED, live)
        live.to_record.assert_not_called()

    def test_save_failure_is_logged_not_raised(self, temp_dir, records, caplog):
        blocker = temp_dir / "not-a-dir"
        blocker.write_text("")
        registry = DeviceRegistry(blocker / "registry.json")

        registry.on_device_event(DeviceEvent.STATE_CHANGED, self._live(records[0]))

        assert "Failed to record device event" in caplog.text
