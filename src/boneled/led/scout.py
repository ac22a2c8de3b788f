"""Scout that gives every configured pin exactly one LED device."""

import asyncio
import logging
from collections.abc import Sequence

from boneled.exceptions import RegistryError
from boneled.framework import Done, ScoutContext
from boneled.hardware import PinAccessor

from .device import LED_TYPE, BeagleBoneLedDevice

logger = logging.getLogger(__name__)


class BeagleBoneLedScout:
    """
    Reconciles configured pins with stored LED records.

    For each pin, once the board reports ready: provision the first stored
    record for that pin, or discover a new device if there is none. Pins are
    looked up concurrently, and ``init`` signals completion right after
    scheduling the lookups, not after they finish.
    """

    def __init__(self, pins: Sequence[str], accessor: PinAccessor):
        self.pins = list(pins)
        self.accessor = accessor
        self.discovery: asyncio.Task[None] | None = None

    def init(self, context: ScoutContext, done: Done) -> None:
        self.discovery = asyncio.ensure_future(self._discover_all(context))
        self.discovery.add_done_callback(self._log_failure)
        done()

    def _log_failure(self, task: "asyncio.Task[None]") -> None:
        if not task.cancelled() and task.exception() is not None:
            logger.error("LED discovery failed", exc_info=task.exception())

    async def _discover_all(self, context: ScoutContext) -> None:
        platform = await self.accessor.get_platform()
        logger.info(f"Platform ready ({platform.name}), looking up {len(self.pins)} pin(s)")
        await asyncio.gather(*(self._discover_pin(context, pin) for pin in self.pins))

    async def _discover_pin(self, context: ScoutContext, pin: str) -> None:
        query = context.registry.where(type=LED_TYPE, pin=pin)
        try:
            results = await context.registry.find(query)
        except RegistryError as e:
            # No retry: the pin stays undiscovered for this run
            logger.warning(f"Skipping pin {pin}: {e.technical_message}")
            return

        if results:
            context.provision(results[0], BeagleBoneLedDevice, pin, self.accessor)
        else:
            # Construct a new device with specified pin
            context.discover(BeagleBoneLedDevice, pin, self.accessor)
