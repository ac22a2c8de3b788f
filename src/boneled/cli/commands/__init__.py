"""CLI commands for boneled."""

from .config import config
from .devices import devices_group

__all__ = ["config", "devices_group"]
