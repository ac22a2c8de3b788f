"""
Device registry: the record store scouts query at startup.

Records outlive the process when the registry is given a path. On the next
start a scout finds the stored record for its pin and provisions it instead
of discovering a duplicate device.

::

    scout                         registry                 registry.json
      │  where(type=..., pin=...)    │                          │
      │ ───────────────────────────▶ │                          │
      │  await find(query)           │   (loaded at startup) ◀──┤
      │ ───────────────────────────▶ │                          │
      │ ◀─────────── [records] ───── │                          │
      │                              │                          │
    server ── DEVICE_DISCOVERED ───▶ │ save_record ───────────▶ │
    server ── STATE_CHANGED ───────▶ │ save_record ───────────▶ │
"""

import asyncio
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, Field

from boneled.exceptions import BoneLedError, ConfigurationError, RegistryError, handle_errors
from boneled.utils.persistence import PydanticPersistence

from .events import DeviceEvent

if TYPE_CHECKING:
    from .state_machine import LiveDevice

logger = logging.getLogger(__name__)


class DeviceRecord(BaseModel):
    """Stored description of one device."""

    id: str = Field(min_length=1, description="Stable device identifier")
    type: str = Field(min_length=1, description="Declared device type (e.g. 'beaglebone_led')")
    name: str | None = Field(default=None, description="Human-readable name")
    state: str | None = Field(default=None, description="Last known state")
    properties: dict[str, Any] = Field(
        default_factory=dict, description="Device-specific properties (e.g. pin)"
    )

    def flatten(self) -> dict[str, Any]:
        """Properties merged with the top-level fields, as queries see them."""
        return {**self.properties, "id": self.id, "type": self.type, "name": self.name, "state": self.state}


class RegistrySnapshot(BaseModel):
    """Root schema of the registry file."""

    devices: list[DeviceRecord] = Field(default_factory=list)


class Query:
    """Equality filter over flattened records."""

    def __init__(self, **filters: Any):
        self.filters = filters

    def matches(self, record: DeviceRecord) -> bool:
        flat = record.flatten()
        return all(key in flat and flat[key] == value for key, value in self.filters.items())

    def __repr__(self) -> str:
        return f"Query({self.filters!r})"


class DeviceRegistry:
    """
    Record store for hosted devices.

    Also a DeviceObserver: the server registers it so discovered devices and
    completed transitions are written back.
    """

    def __init__(self, path: Path | None = None):
        """
        Initialize the registry.

        Args:
            path: JSON file to load from and save to. If None, records
                  live in memory only.

        Raises:
            RegistryError: If the file exists but is not a valid registry
        """
        self.path = path
        self._records: dict[str, DeviceRecord] = {}

        if path is not None:
            try:
                snapshot = PydanticPersistence.load_json_or_default(path, RegistrySnapshot)
            except ConfigurationError as e:
                raise RegistryError(
                    f"Device registry {path} is corrupt.",
                    technical_message=f"Loading {path} failed: {e.technical_message}",
                    recovery_hint=(
                        f"Repair or move {path} aside; the previous version may be in "
                        f"{path.name}.bak. Use '--ephemeral' to start without it."
                    ),
                ) from e
            self._records = {record.id: record for record in snapshot.devices}
            logger.info(f"Loaded {len(self._records)} device records from {path}")

    def where(self, **filters: Any) -> Query:
        """Build a query matching records whose fields equal ``filters``."""
        return Query(**filters)

    async def find(self, query: Query) -> list[DeviceRecord]:
        """
        Return records matching ``query``, in insertion order.

        Raises:
            RegistryError: If the lookup fails
        """
        await asyncio.sleep(0)
        try:
            results = [record for record in self._records.values() if query.matches(record)]
        except Exception as e:
            raise RegistryError(
                "Device registry lookup failed.",
                technical_message=f"find({query!r}) failed: {e}",
            ) from e

        logger.debug(f"find({query!r}) -> {len(results)} record(s)")
        return results

    def get(self, device_id: str) -> DeviceRecord | None:
        return self._records.get(device_id)

    def records(self) -> list[DeviceRecord]:
        return list(self._records.values())

    def save_record(self, record: DeviceRecord) -> None:
        """
        Insert or replace a record and write the store.

        Blocking: the file is written before this returns, on the calling
        thread, so the store on disk follows event order.

        Raises:
            RegistryError: If the store cannot be written
        """
        self._records[record.id] = record
        self._persist()

    def _persist(self) -> None:
        if self.path is None:
            return
        snapshot = RegistrySnapshot(devices=list(self._records.values()))
        try:
            PydanticPersistence.save_json(snapshot, self.path)
        except (OSError, BoneLedError) as e:
            raise RegistryError(
                f"Could not write device registry {self.path}.",
                technical_message=f"Saving {self.path} failed: {e}",
                recovery_hint="Check permissions on the registry directory or pass '--registry'.",
            ) from e

    @handle_errors(operation_name="record device event", re_raise=False)
    def on_device_event(self, event: DeviceEvent, device: "LiveDevice") -> None:
        if event in (DeviceEvent.DEVICE_DISCOVERED, DeviceEvent.STATE_CHANGED):
            self.save_record(device.to_record())
