"""Data models for boneled."""

from .config import DEFAULT_PINS, AppConfig, GpioBackend

__all__ = [
    "DEFAULT_PINS",
    "AppConfig",
    "GpioBackend",
]
