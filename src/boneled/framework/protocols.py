"""Capability protocols for hosted devices and scouts.

Devices and scouts are plain classes; the server only relies on the
methods below, so nothing has to inherit from a framework base class.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from .events import DeviceEvent
    from .scout import ScoutContext
    from .state_machine import DeviceConfig, LiveDevice

# Completion callback handed to transition handlers and scout init.
Done = Callable[..., None]


@runtime_checkable
class Transitionable(Protocol):
    """
    A device whose behavior is a declared state machine.

    ``init`` declares the type, initial state, allowed transitions and
    the handler for each transition on the given config. Handlers are
    called as ``handler(*args, done)`` and must call ``done()`` once,
    or ``done(error)`` on failure.
    """

    def init(self, config: DeviceConfig) -> None:
        ...


@runtime_checkable
class Discoverable(Protocol):
    """
    A startup routine that finds devices and hands them to the server.

    ``init`` receives the scout context (registry plus provision and
    discover verbs) and a completion callback to call once the scout
    has finished setting up.
    """

    def init(self, context: ScoutContext, done: Done) -> None:
        ...


@runtime_checkable
class DeviceObserver(Protocol):
    """Observer that receives device lifecycle events."""

    def on_device_event(self, event: DeviceEvent, device: LiveDevice) -> None:
        """
        Handle a device event.

        Args:
            event: What happened
            device: The live device it happened to
        """
        ...
