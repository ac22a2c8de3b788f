"""
Device server: hosts devices, runs scouts and serves the HTTP API.

Startup order in ``listen``:

1. Every registered scout is constructed and its ``init`` is called with a
   ScoutContext; the server waits for each scout's completion callback.
2. The aiohttp application is started on the requested host and port.

Scouts may keep provisioning or discovering devices after they signal
completion; those devices appear in the API as soon as they are created.
"""

import asyncio
import logging
import uuid
from typing import Any, Self

from aiohttp import web

from boneled.exceptions import DeviceNotFoundError, ErrorContext, ListenerStartError

from .events import DeviceEvent
from .observer import DeviceEventBus
from .protocols import DeviceObserver, Discoverable, Transitionable
from .registry import DeviceRecord, DeviceRegistry
from .scout import ScoutContext
from .state_machine import DeviceConfig, LiveDevice

logger = logging.getLogger(__name__)


class DeviceServer:
    """
    Hosts live devices and exposes them over HTTP.

    Example:
        ```python
        server = (
            DeviceServer(registry)
            .name("BeagleBone LED")
            .use(BeagleBoneLedScout, ["P9_12", "P9_11"], accessor)
        )
        await server.listen(1337)
        ```
    """

    def __init__(self, registry: DeviceRegistry | None = None):
        """
        Initialize the server.

        Args:
            registry: Record store. If None, an in-memory registry is used.
        """
        self.registry = registry if registry is not None else DeviceRegistry()
        self.server_name = "boneled"
        self.scouts: list[Discoverable] = []
        self.host: str | None = None
        self.port: int | None = None

        self._scout_specs: list[tuple[type, tuple, dict]] = []
        self._devices: dict[str, LiveDevice] = {}
        self._events = DeviceEventBus()
        self._events.register(self.registry)

        self._runner: web.AppRunner | None = None
        self._site: web.TCPSite | None = None

    # Composition

    def name(self, value: str) -> Self:
        """Set the server name reported by the API."""
        self.server_name = value
        return self

    def use(self, scout_cls: type, *args: Any, **kwargs: Any) -> Self:
        """Register a scout class, constructed with ``args`` at startup."""
        self._scout_specs.append((scout_cls, args, kwargs))
        return self

    def register_observer(self, observer: DeviceObserver) -> None:
        self._events.register(observer)

    def unregister_observer(self, observer: DeviceObserver) -> None:
        self._events.unregister(observer)

    # Devices

    @property
    def devices(self) -> list[LiveDevice]:
        return list(self._devices.values())

    def get_device(self, device_id: str) -> LiveDevice:
        """
        Look up a live device.

        Raises:
            DeviceNotFoundError: If no device has this id
        """
        try:
            return self._devices[device_id]
        except KeyError:
            raise DeviceNotFoundError(device_id) from None

    def provision(self, record: DeviceRecord, device_cls: type, *args: Any, **kwargs: Any) -> LiveDevice:
        """
        Attach a new device instance to a stored record.

        The record's last known state is restored onto the device after its
        ``init`` has run.
        """
        existing = self._devices.get(record.id)
        if existing is not None:
            logger.warning(f"Record {record.id} is already live, not provisioning it again")
            return existing

        device = device_cls(*args, **kwargs)
        live = self._init_device(record.id, device)
        if record.state is not None:
            device.state = record.state

        self._devices[live.id] = live
        logger.info(f"Provisioned {live.type} '{live.name}' as {live.id} (state={live.state})")
        self._events.publish(DeviceEvent.DEVICE_PROVISIONED, live)
        return live

    def discover(self, device_cls: type, *args: Any, **kwargs: Any) -> LiveDevice:
        """Create a device instance with a fresh record."""
        device = device_cls(*args, **kwargs)
        live = self._init_device(str(uuid.uuid4()), device)

        self._devices[live.id] = live
        logger.info(f"Discovered {live.type} '{live.name}' as {live.id}")
        self._events.publish(DeviceEvent.DEVICE_DISCOVERED, live)
        return live

    def _init_device(self, device_id: str, device: Transitionable) -> LiveDevice:
        config = DeviceConfig()
        device.init(config)
        config.validate()
        device.state = config.initial_state
        return LiveDevice(device_id, device, config, self._events)

    # Lifecycle

    async def start_scouts(self) -> None:
        """Construct every registered scout and wait for each to signal completion."""
        loop = asyncio.get_running_loop()
        context = ScoutContext(self)

        for scout_cls, args, kwargs in self._scout_specs:
            scout = scout_cls(*args, **kwargs)
            ready: asyncio.Future[None] = loop.create_future()

            def done(error: BaseException | None = None, ready=ready) -> None:
                if ready.done():
                    return
                if error is not None:
                    ready.set_exception(error)
                else:
                    ready.set_result(None)

            with ErrorContext(f"initialize scout {scout_cls.__name__}", logger_instance=logger):
                scout.init(context, done)
                await ready

            self.scouts.append(scout)
            logger.info(f"Scout {scout_cls.__name__} initialized")

    def create_app(self) -> web.Application:
        """Build the aiohttp application serving this server's devices."""
        from .api import create_api_app

        return create_api_app(self)

    async def listen(self, port: int, host: str = "127.0.0.1") -> None:
        """
        Start scouts, then the HTTP listener (non-blocking).

        Raises:
            ListenerStartError: If the listener cannot bind
        """
        await self.start_scouts()

        self._runner = web.AppRunner(self.create_app())
        await self._runner.setup()

        self._site = web.TCPSite(self._runner, host, port)
        try:
            await self._site.start()
        except OSError as e:
            await self._runner.cleanup()
            self._runner = None
            self._site = None
            raise ListenerStartError(host, port, original_error=str(e)) from e

        self.host = host
        # Port 0 binds an ephemeral port; report the real one
        addresses = self._runner.addresses
        self.port = addresses[0][1] if addresses else port
        logger.info(f"{self.server_name} is running at {self.url}")

    async def stop(self) -> None:
        """Stop the HTTP listener."""
        if self._runner is None:
            return

        logger.info("Stopping server...")
        await self._runner.cleanup()
        self._runner = None
        self._site = None

    @property
    def is_running(self) -> bool:
        return self._runner is not None

    @property
    def url(self) -> str:
        return f"http://{self.host}:{self.port}"
