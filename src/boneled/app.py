"""Application bootstrap: wires the LED scout into a device server."""

import asyncio
import logging

from boneled.framework import DeviceRegistry, DeviceServer
from boneled.hardware import PinAccessor, create_pin_accessor
from boneled.led import BeagleBoneLedScout
from boneled.models import AppConfig

logger = logging.getLogger(__name__)


def create_server(config: AppConfig, accessor: PinAccessor | None = None) -> DeviceServer:
    """
    Compose the server for ``config``.

    Args:
        config: Application configuration
        accessor: Pin accessor to use. If None, one is built for config.backend.

    Raises:
        HardwareUnavailableError: If the configured backend cannot be loaded
        RegistryError: If the registry file cannot be read
    """
    if accessor is None:
        accessor = create_pin_accessor(config.backend)

    registry = DeviceRegistry(config.registry_path)
    return (
        DeviceServer(registry)
        .name(config.name)
        # construct the scout with the configured pins
        .use(BeagleBoneLedScout, config.pins, accessor)
    )


async def serve(server: DeviceServer, config: AppConfig, stop: asyncio.Event | None = None) -> None:
    """
    Start ``server`` and keep it running until ``stop`` is set.

    Raises:
        ListenerStartError: If the listener cannot bind
    """
    await server.listen(config.port, config.host)
    try:
        await (stop or asyncio.Event()).wait()
    finally:
        await server.stop()


def run(config: AppConfig) -> None:
    """Blocking entry point used by the CLI."""
    server = create_server(config)
    logger.info(f"Starting {config.name} with pins {', '.join(config.pins)}")
    asyncio.run(serve(server, config))
