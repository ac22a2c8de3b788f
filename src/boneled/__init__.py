"""boneled: BeagleBone GPIO LEDs as state-machine devices over HTTP."""

__version__ = "0.1.0"

from .app import create_server
from .framework import DeviceServer
from .led import BeagleBoneLedDevice, BeagleBoneLedScout

__all__ = [
    "BeagleBoneLedDevice",
    "BeagleBoneLedScout",
    "DeviceServer",
    "create_server",
]
