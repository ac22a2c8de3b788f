"""Fan-out of device lifecycle events to registered observers."""

import logging
from typing import TYPE_CHECKING

from .events import DeviceEvent
from .protocols import DeviceObserver

if TYPE_CHECKING:
    from .state_machine import LiveDevice

logger = logging.getLogger(__name__)


class DeviceEventBus:
    """
    Ordered set of DeviceObservers.

    Lives on the server's event loop; observers are called synchronously,
    in registration order, from ``publish``.

    Example:
        ```python
        bus = DeviceEventBus()
        bus.register(registry)
        bus.publish(DeviceEvent.STATE_CHANGED, live_device)
        ```
    """

    def __init__(self) -> None:
        self._observers: list[DeviceObserver] = []

    def register(self, observer: DeviceObserver) -> None:
        """Add an observer; registering it again is a no-op."""
        if observer in self._observers:
            logger.debug(f"Device observer already registered: {observer!r}")
            return
        self._observers.append(observer)
        logger.info(f"Registered device observer: {observer!r}")

    def unregister(self, observer: DeviceObserver) -> None:
        if observer not in self._observers:
            logger.warning(f"Cannot unregister unknown device observer: {observer!r}")
            return
        self._observers.remove(observer)

    def publish(self, event: DeviceEvent, device: "LiveDevice") -> None:
        """
        Deliver ``event`` for ``device`` to every observer.

        A failing observer is logged and skipped; the others still run.
        """
        for observer in list(self._observers):
            try:
                observer.on_device_event(event, device)
            except Exception:
                logger.exception(f"Device observer {observer!r} failed on {event.value} for {device.id}")

    def __len__(self) -> int:
        return len(self._observers)

    def __contains__(self, observer: object) -> bool:
        return observer in self._observers
