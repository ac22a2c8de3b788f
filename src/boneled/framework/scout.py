"""What a scout gets to work with during startup."""

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .registry import DeviceRecord, DeviceRegistry
    from .server import DeviceServer
    from .state_machine import LiveDevice


class ScoutContext:
    """
    Registry access plus the two device lifecycle verbs.

    Handed to ``Discoverable.init`` so a scout can reconcile the hardware it
    knows about with stored records without holding the whole server.
    """

    def __init__(self, server: "DeviceServer"):
        self._server = server

    @property
    def registry(self) -> "DeviceRegistry":
        return self._server.registry

    def provision(self, record: "DeviceRecord", device_cls: type, *args: Any, **kwargs: Any) -> "LiveDevice":
        """Attach a new instance of ``device_cls`` to an existing record."""
        return self._server.provision(record, device_cls, *args, **kwargs)

    def discover(self, device_cls: type, *args: Any, **kwargs: Any) -> "LiveDevice":
        """Create a new record and device instance."""
        return self._server.discover(device_cls, *args, **kwargs)
