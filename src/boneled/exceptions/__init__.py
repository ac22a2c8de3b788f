"""
Custom exception hierarchy for boneled.

## Exception Hierarchy

```
BoneLedError (base)
├── ConfigurationError
│   ├── ConfigFileInvalidError
│   └── ConfigValidationError
├── HardwareError
│   └── HardwareUnavailableError
├── RegistryError
├── DeviceError
│   ├── DeviceNotFoundError
│   ├── TransitionNotAllowedError
│   └── TransitionInProgressError
└── ListenerStartError
```

All custom exceptions inherit from `BoneLedError`, which provides
`user_message`, `technical_message`, `recoverable` and `recovery_hint`.

### Example: Illegal Transition

```python
from boneled.exceptions import TransitionNotAllowedError

raise TransitionNotAllowedError(device_id, "turn-off", "off")

# User sees: "Transition 'turn-off' is not allowed in state 'off'."
```

See `boneled.exceptions.handlers` for utilities to handle these exceptions systematically.
"""

from .base import BoneLedError
from .config import ConfigFileInvalidError, ConfigurationError, ConfigValidationError
from .device import (
    DeviceError,
    DeviceNotFoundError,
    RegistryError,
    TransitionInProgressError,
    TransitionNotAllowedError,
)
from .handlers import (
    ErrorContext,
    format_error_for_display,
    handle_errors,
    wrap_gpio_error,
    wrap_pydantic_error,
)
from .hardware import HardwareError, HardwareUnavailableError
from .server import ListenerStartError

__all__ = [
    # Base
    "BoneLedError",
    # Config
    "ConfigFileInvalidError",
    "ConfigValidationError",
    "ConfigurationError",
    # Devices
    "DeviceError",
    "DeviceNotFoundError",
    "RegistryError",
    "TransitionInProgressError",
    "TransitionNotAllowedError",
    # Hardware
    "HardwareError",
    "HardwareUnavailableError",
    # Server
    "ListenerStartError",
    # Handlers
    "ErrorContext",
    "format_error_for_display",
    "handle_errors",
    "wrap_gpio_error",
    "wrap_pydantic_error",
]
