"""
Error translation and logging helpers.

Low-level failures (GPIO library, sockets, JSON files) are turned into
BoneLedError subclasses close to where they happen; the CLI and the HTTP
middleware only ever format ``user_message`` and ``recovery_hint``.

| Use | Helper |
|-----|--------|
| Observer callback that must never raise | `@handle_errors(operation_name="record device event", re_raise=False)` |
| Block whose failure should be logged with context | `with ErrorContext("initialize scout LedScout"): ...` |
| pydantic ValidationError from a file or CLI flags | `raise wrap_pydantic_error(e, source) from e` |
| Adafruit_BBIO exception | `raise wrap_gpio_error(e, pin) from e` |
"""

import logging
from functools import wraps
from typing import Any, Callable, Optional, TypeVar

from .base import BoneLedError
from .config import ConfigFileInvalidError, ConfigValidationError
from .hardware import HardwareError, HardwareUnavailableError

logger = logging.getLogger(__name__)

T = TypeVar('T')


def _describe(error: BaseException) -> str:
    if isinstance(error, BoneLedError):
        return error.technical_message
    return f"{type(error).__name__}: {error}"


def handle_errors(
    *,
    operation_name: str,
    fallback_value: Optional[T] = None,
    re_raise: bool = True,
    log_level: int = logging.ERROR
) -> Callable:
    """
    Log failures of the decorated function as "Failed to <operation_name>".

    Args:
        operation_name: What the function does, for the log line
        fallback_value: Returned instead when ``re_raise`` is False
        re_raise: Re-raise after logging
        log_level: Level of the log line

    Unexpected (non-BoneLedError) exceptions are logged with a traceback.
    """
    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> T:
            try:
                return func(*args, **kwargs)
            except Exception as e:
                logger.log(
                    log_level,
                    f"Failed to {operation_name}: {_describe(e)}",
                    exc_info=not isinstance(e, BoneLedError),
                )
                if re_raise:
                    raise
                return fallback_value

        return wrapper
    return decorator


class ErrorContext:
    """
    Log entry, exit and failure of a block.

    Example:
        ```python
        with ErrorContext(f"initialize scout {name}", logger_instance=logger):
            scout.init(context, done)
            await ready
        ```
    """

    def __init__(
        self,
        operation: str,
        logger_instance: Optional[logging.Logger] = None,
        re_raise: bool = True
    ):
        self.operation = operation
        self.logger = logger_instance or logger
        self.re_raise = re_raise
        self.error: Optional[BaseException] = None

    def __enter__(self):
        self.logger.debug(f"Starting: {self.operation}")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_val is None:
            self.logger.debug(f"Completed: {self.operation}")
            return False

        self.error = exc_val
        known = isinstance(exc_val, BoneLedError)
        detail = exc_val.technical_message if known else exc_val
        self.logger.error(f"Failed to {self.operation}: {detail}", exc_info=not known)
        return not self.re_raise


def _location(err: dict) -> str:
    return ".".join(str(part) for part in err.get('loc', ())) or "config"


def wrap_pydantic_error(error: Exception, file_path: str) -> BoneLedError:
    """
    Convert a pydantic ValidationError into a configuration error.

    Args:
        error: The ValidationError
        file_path: File (or other source, e.g. "command line options") that
                   produced the invalid data

    Returns:
        ConfigFileInvalidError for JSON syntax errors, otherwise
        ConfigValidationError naming the offending field(s)
    """
    from pydantic import ValidationError

    if not isinstance(error, ValidationError):
        return ConfigValidationError(field="unknown", value=None, error_msg=str(error), file_path=file_path)

    errors = error.errors()
    syntax = [err for err in errors if err.get('type') == 'json_invalid']
    if syntax:
        # pydantic reports e.g. "Invalid JSON: EOF while parsing a value at line 1 column 9"
        parse_error = syntax[0].get('msg', str(error)).removeprefix("Invalid JSON:").strip()
        return ConfigFileInvalidError(file_path, parse_error)

    if len(errors) == 1:
        err = errors[0]
        return ConfigValidationError(
            field=_location(err),
            value=err.get('input'),
            error_msg=err.get('msg', 'validation failed'),
            file_path=file_path
        )

    summary = "\n".join(f"  - {_location(err)}: {err.get('msg', 'validation failed')}" for err in errors)
    return ConfigValidationError(
        field="multiple fields",
        value=None,
        error_msg=f"{len(errors)} validation errors:\n{summary}",
        file_path=file_path
    )


def wrap_gpio_error(error: Exception, pin: Optional[str] = None) -> BoneLedError:
    """
    Convert an Adafruit_BBIO exception into a HardwareError.

    The library raises ValueError for pin names it does not know and
    RuntimeError when the GPIO interface cannot be opened.
    """
    error_msg = str(error)

    if isinstance(error, (ImportError, PermissionError)):
        return HardwareUnavailableError("bbio", original_error=error_msg)

    if isinstance(error, ValueError) and pin is not None:
        return HardwareError(
            user_message=f"Unknown pin '{pin}'.",
            technical_message=f"GPIO rejected pin {pin}: {error_msg}",
            pin=pin,
            recoverable=True,
            recovery_hint="Use header labels such as P9_12 or P8_10.",
        )

    return HardwareError(
        user_message=f"GPIO error: {error_msg}",
        technical_message=f"GPIO error on pin {pin}: {error_msg}",
        pin=pin,
    )


def format_error_for_display(error: Exception) -> tuple[str, Optional[str]]:
    """(message, recovery hint or None) for showing ``error`` to a user."""
    if isinstance(error, BoneLedError):
        return error.user_message, error.recovery_hint
    return f"{type(error).__name__}: {error}", None
