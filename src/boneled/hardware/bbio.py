"""Adafruit_BBIO backend for BeagleBone boards."""

import asyncio
import logging
from pathlib import Path

from boneled.exceptions import HardwareUnavailableError, wrap_gpio_error

from .protocols import PinLevel, PinMode, PlatformInfo

logger = logging.getLogger(__name__)

MODEL_PATH = Path("/proc/device-tree/model")


class BBIOPinAccessor:
    """
    Pin access through ``Adafruit_BBIO.GPIO``.

    The library is imported on construction so a missing install or a
    non-BeagleBone host fails at startup instead of on the first write.
    """

    def __init__(self, model_path: Path = MODEL_PATH):
        try:
            import Adafruit_BBIO.GPIO as GPIO
        except ImportError as e:
            raise HardwareUnavailableError("bbio", original_error=str(e)) from e

        self._gpio = GPIO
        self._model_path = model_path
        self._directions = {"in": GPIO.IN, "out": GPIO.OUT}

    def pin_mode(self, pin: str, mode: PinMode) -> None:
        try:
            self._gpio.setup(pin, self._directions[mode])
        except (ValueError, RuntimeError) as e:
            raise wrap_gpio_error(e, pin) from e
        logger.debug(f"Pin {pin} set to {mode}")

    def digital_write(self, pin: str, value: PinLevel) -> None:
        self._gpio.output(pin, self._gpio.HIGH if value else self._gpio.LOW)
        logger.debug(f"Pin {pin} <- {value}")

    async def get_platform(self) -> PlatformInfo:
        """Read the board model from the device tree."""
        try:
            raw = await asyncio.to_thread(self._model_path.read_bytes)
        except OSError as e:
            raise HardwareUnavailableError("bbio", original_error=str(e)) from e

        name = raw.decode("utf-8", errors="replace").rstrip("\x00").strip()
        logger.info(f"Detected platform: {name}")
        return PlatformInfo(name=name, backend="bbio")
