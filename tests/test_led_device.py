"""Tests for the BeagleBone LED device."""

import unittest
from unittest.mock import Mock

from boneled.framework import DeviceConfig
from boneled.hardware import MemoryPinAccessor
from boneled.hardware.memory import PinCall
from boneled.led import LED_TYPE, BeagleBoneLedDevice, LedState


class TestLedInit(unittest.TestCase):
    """Test what init does to the pin and the declaration."""

    def setUp(self):
        self.accessor = MemoryPinAccessor()
        self.device = BeagleBoneLedDevice("P9_12", self.accessor)
        self.config = DeviceConfig()

    def test_init_sets_output_then_writes_low_once(self):
        """Pin is configured as output and driven low exactly once."""
        self.device.init(self.config)

        assert self.accessor.calls == [
            PinCall("pin_mode", "P9_12", "out"),
            PinCall("digital_write", "P9_12", 0),
        ]

    def test_init_writes_low_even_if_state_was_on(self):
        """A restored 'on' state does not change the electrical baseline."""
        self.device.state = LedState.ON

        self.device.init(self.config)

        assert self.accessor.writes("P9_12") == [0]
        assert self.accessor.levels["P9_12"] == 0

    def test_init_declares_state_machine(self):
        """Type, initial state, name and transition table are declared."""
        self.device.init(self.config)

        assert self.config.type_name == LED_TYPE
        assert self.config.initial_state == "off"
        assert self.config.display_name == "P9_12"
        assert self.config.allowed == {"off": ["turn-on"], "on": ["turn-off"]}
        assert self.config.handlers["turn-on"] == self.device.turn_on
        assert self.config.handlers["turn-off"] == self.device.turn_off
        self.config.validate()


class TestLedTransitions(unittest.TestCase):
    """Test the transition handlers."""

    def setUp(self):
        self.accessor = MemoryPinAccessor()
        self.device = BeagleBoneLedDevice("P9_11", self.accessor)
        self.device.init(DeviceConfig())
        self.accessor.calls.clear()

    def test_turn_on(self):
        """turn-on sets state on and writes 1."""
        done = Mock()

        self.device.turn_on(done)

        assert self.device.state == LedState.ON
        assert self.accessor.writes("P9_11") == [1]
        done.assert_called_once_with()

    def test_turn_off(self):
        """turn-off sets state off and writes 0."""
        self.device.state = LedState.ON
        done = Mock()

        self.device.turn_off(done)

        assert self.device.state == LedState.OFF
        assert self.accessor.writes("P9_11") == [0]
        done.assert_called_once_with()

    def test_on_then_off_returns_to_baseline(self):
        """A round trip ends where it started, logically and electrically."""
        self.device.turn_on(Mock())
        self.device.turn_off(Mock())

        assert self.device.state == "off"
        assert self.accessor.levels["P9_11"] == 0
        assert self.accessor.writes("P9_11") == [1, 0]

    def test_done_is_called_after_the_write(self):
        """Completion fires once the pin has its new level."""
        seen = []

        def done():
            seen.append(self.accessor.levels["P9_11"])

        self.device.turn_on(done)

        assert seen == [1]
