"""BeagleBone LED: one output pin behind an off/on state machine."""

import logging
from enum import Enum

from boneled.framework import DeviceConfig, Done
from boneled.hardware import PinAccessor

logger = logging.getLogger(__name__)

LED_TYPE = "beaglebone_led"


class LedState(str, Enum):
    """LED states."""

    OFF = "off"
    ON = "on"


class BeagleBoneLedDevice:
    """
    LED wired to a single GPIO pin.

    Transitions: off --turn-on--> on, on --turn-off--> off. Legality is
    enforced by the framework, so the handlers just drive the pin.
    """

    def __init__(self, pin: str, accessor: PinAccessor):
        self.pin = pin
        self.state = LedState.OFF
        self._accessor = accessor

    def init(self, config: DeviceConfig) -> None:
        # everything is off to start
        self._accessor.pin_mode(self.pin, "out")
        self._accessor.digital_write(self.pin, 0)

        config.type(LED_TYPE).state(LedState.OFF.value).name(self.pin)

        config.when(LedState.OFF.value, allow=["turn-on"]).when(LedState.ON.value, allow=["turn-off"])

        config.map("turn-off", self.turn_off).map("turn-on", self.turn_on)

    def turn_off(self, done: Done) -> None:
        self.state = LedState.OFF
        self._accessor.digital_write(self.pin, 0)
        done()

    def turn_on(self, done: Done) -> None:
        self.state = LedState.ON
        self._accessor.digital_write(self.pin, 1)
        done()
