"""Application configuration model."""

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field, field_serializer, field_validator

from boneled.utils.persistence import PydanticPersistence

DEFAULT_PINS = ["P9_12", "P9_11"]


class GpioBackend(str, Enum):
    """Pin access backends."""

    BBIO = "bbio"      # Adafruit_BBIO on a real board
    MEMORY = "memory"  # Simulated board, no hardware


class AppConfig(BaseModel):
    """Application configuration and settings."""

    name: str = Field(default="BeagleBone LED", min_length=1, description="Server name")
    pins: list[str] = Field(
        default_factory=lambda: list(DEFAULT_PINS),
        min_length=1,
        description="Header pins driven as LED outputs (e.g. P9_12)",
    )

    # Listener
    host: str = Field(default="127.0.0.1", description="Address the HTTP listener binds to")
    port: int = Field(default=1337, ge=1, le=65535, description="HTTP listener port")

    # Hardware
    backend: GpioBackend = Field(
        default=GpioBackend.BBIO, description="GPIO backend (bbio on the board, memory without hardware)"
    )

    # Registry
    registry_path: Path | None = Field(
        default_factory=lambda: Path.home() / ".boneled" / "registry.json",
        description="JSON file holding device records (None keeps records in memory only)",
    )

    @field_validator("pins")
    @classmethod
    def validate_pins(cls, v: list[str]) -> list[str]:
        """Pins must be non-blank and listed once."""
        pins = [pin.strip() for pin in v]
        if any(not pin for pin in pins):
            raise ValueError("pin names must not be blank")
        duplicates = sorted({pin for pin in pins if pins.count(pin) > 1})
        if duplicates:
            raise ValueError(f"duplicate pins: {', '.join(duplicates)}")
        return pins

    @field_serializer("registry_path")
    def serialize_path(self, path: Path | None) -> str | None:
        """Serialize Path to string."""
        return str(path) if path is not None else None

    @classmethod
    def load_or_default(cls, path: Path | None = None) -> "AppConfig":
        """
        Load config from file or return default.

        Args:
            path: Path to config file. If None, uses default location
                  (~/.boneled/config.json).

        Raises:
            ConfigFileInvalidError: If config file has invalid JSON syntax
            ConfigValidationError: If config values fail validation
        """
        if path is None:
            path = Path.home() / ".boneled" / "config.json"

        return PydanticPersistence.load_json_or_default(path, cls)
