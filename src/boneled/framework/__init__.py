"""Device hosting framework.

- DeviceServer: hosts devices, runs scouts, serves the HTTP API
- DeviceRegistry: record store queried by scouts
- DeviceConfig / LiveDevice: declaration DSL and state-machine runtime
- Transitionable / Discoverable: capabilities devices and scouts implement
"""

from .events import DeviceEvent
from .observer import DeviceEventBus
from .protocols import DeviceObserver, Discoverable, Done, Transitionable
from .registry import DeviceRecord, DeviceRegistry, Query
from .scout import ScoutContext
from .server import DeviceServer
from .state_machine import DeviceConfig, LiveDevice

__all__ = [
    "DeviceConfig",
    "DeviceEvent",
    "DeviceEventBus",
    "DeviceObserver",
    "DeviceRecord",
    "DeviceRegistry",
    "DeviceServer",
    "Discoverable",
    "Done",
    "LiveDevice",
    "Query",
    "ScoutContext",
    "Transitionable",
]
