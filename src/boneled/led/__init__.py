"""BeagleBone LED device and its scout."""

from .device import LED_TYPE, BeagleBoneLedDevice, LedState
from .scout import BeagleBoneLedScout

__all__ = ["LED_TYPE", "BeagleBoneLedDevice", "BeagleBoneLedScout", "LedState"]
