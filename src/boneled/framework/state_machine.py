"""Device declaration DSL and the state-machine runtime for live devices."""

import asyncio
import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, Any, Self

from boneled.exceptions import (
    DeviceError,
    TransitionInProgressError,
    TransitionNotAllowedError,
)

from .events import DeviceEvent
from .protocols import Transitionable

if TYPE_CHECKING:
    from .observer import DeviceEventBus
    from .registry import DeviceRecord

logger = logging.getLogger(__name__)

# Attribute types copied into a device's public properties.
_PROPERTY_TYPES = (str, int, float, bool)


class DeviceConfig:
    """
    Builder a device fills in from its ``init`` method.

    Example:
        ```python
        def init(self, config):
            config.type("beaglebone_led").state("off").name(self.pin)
            config.when("off", allow=["turn-on"]).when("on", allow=["turn-off"])
            config.map("turn-on", self.turn_on).map("turn-off", self.turn_off)
        ```
    """

    def __init__(self) -> None:
        self.type_name: str | None = None
        self.initial_state: str | None = None
        self.display_name: str | None = None
        self.allowed: dict[str, list[str]] = {}
        self.handlers: dict[str, Callable[..., None]] = {}

    def type(self, name: str) -> Self:
        """Declare the device type used in registry queries."""
        self.type_name = name
        return self

    def state(self, name: str) -> Self:
        """Declare the initial state."""
        self.initial_state = name
        return self

    def name(self, value: str) -> Self:
        """Declare a human-readable name."""
        self.display_name = value
        return self

    def when(self, state: str, allow: list[str]) -> Self:
        """Declare the transitions allowed while in ``state``."""
        self.allowed[state] = list(allow)
        return self

    def map(self, transition: str, handler: Callable[..., None]) -> Self:
        """Bind a transition name to its handler."""
        self.handlers[transition] = handler
        return self

    def validate(self) -> None:
        """
        Check the declaration is complete.

        Raises:
            DeviceError: If type or initial state is missing, or an allowed
                transition has no handler
        """
        if not self.type_name:
            raise DeviceError("Device did not declare a type.")
        if not self.initial_state:
            raise DeviceError(f"Device type '{self.type_name}' did not declare an initial state.")

        unmapped = sorted(
            {t for allowed in self.allowed.values() for t in allowed} - set(self.handlers)
        )
        if unmapped:
            raise DeviceError(
                f"Device type '{self.type_name}' allows unmapped transitions: {', '.join(unmapped)}"
            )


class LiveDevice:
    """
    Runtime wrapper around a hosted device.

    Owns the device's declared state machine: a transition runs only if the
    current state allows it and no other transition is in flight. Handlers
    never see illegal requests.
    """

    def __init__(
        self,
        device_id: str,
        device: Transitionable,
        config: DeviceConfig,
        events: "DeviceEventBus",
    ):
        self.id = device_id
        self.device = device
        self.config = config
        self._events = events
        self._busy = False

    @property
    def type(self) -> str:
        return self.config.type_name or ""

    @property
    def name(self) -> str | None:
        return self.config.display_name

    @property
    def state(self) -> str | None:
        state = getattr(self.device, "state", None)
        # Devices may keep their state as a str-valued Enum
        return getattr(state, "value", state)

    @property
    def properties(self) -> dict[str, Any]:
        """Public scalar attributes of the device, excluding its state."""
        return {
            key: value
            for key, value in vars(self.device).items()
            if not key.startswith("_") and key != "state" and isinstance(value, _PROPERTY_TYPES)
        }

    @property
    def busy(self) -> bool:
        return self._busy

    def available_transitions(self) -> list[str]:
        """Transitions allowed from the current state."""
        return list(self.config.allowed.get(self.state, []))

    async def call(self, transition: str, *args: Any) -> "LiveDevice":
        """
        Run a transition through its mapped handler.

        The handler receives ``*args`` followed by a completion callback;
        this coroutine resolves when the callback fires.

        Raises:
            TransitionInProgressError: If another transition has not completed
            TransitionNotAllowedError: If the current state does not allow it
            Exception: Whatever error the handler passes to its callback
        """
        if self._busy:
            raise TransitionInProgressError(self.id, transition)

        if transition not in self.available_transitions():
            raise TransitionNotAllowedError(self.id, transition, self.state)

        handler = self.config.handlers[transition]
        completion: asyncio.Future[None] = asyncio.get_running_loop().create_future()

        def done(error: BaseException | None = None) -> None:
            if completion.done():
                logger.warning(f"Device {self.id}: '{transition}' completed more than once")
                return
            if error is not None:
                completion.set_exception(error)
            else:
                completion.set_result(None)

        previous = self.state
        self._busy = True
        try:
            handler(*args, done)
            await completion
        finally:
            self._busy = False

        logger.info(f"Device {self.id} ({self.name}): {previous} --{transition}--> {self.state}")
        self._events.publish(DeviceEvent.STATE_CHANGED, self)
        return self

    def to_record(self) -> "DeviceRecord":
        """Snapshot as a registry record."""
        from .registry import DeviceRecord

        return DeviceRecord(
            id=self.id,
            type=self.type,
            name=self.name,
            state=self.state,
            properties=self.properties,
        )

    def to_dict(self) -> dict[str, Any]:
        """JSON representation served by the HTTP API."""
        return {
            "id": self.id,
            "type": self.type,
            "name": self.name,
            "state": self.state,
            "properties": self.properties,
            "actions": self.available_transitions(),
            "links": {"self": f"/devices/{self.id}"},
        }

    def __repr__(self) -> str:
        return f"LiveDevice(id={self.id!r}, type={self.type!r}, state={self.state!r})"
