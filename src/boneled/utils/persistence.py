"""JSON files backed by pydantic models.

Used for the optional config file and for the device registry's record
store. Writes keep the previous file as ``<name>.bak`` and go through a
``<name>.tmp`` file that is renamed into place, so a crash mid-write
leaves either the old or the new content on disk.
"""

import logging
import shutil
from collections.abc import Callable
from pathlib import Path
from typing import TypeVar

from pydantic import BaseModel, ValidationError

from boneled.exceptions import ConfigFileInvalidError, ConfigurationError, wrap_pydantic_error

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)


def _sibling(path: Path, suffix: str) -> Path:
    return path.with_suffix(path.suffix + suffix)


class PydanticPersistence:
    """
    Load/save helpers for pydantic models stored as JSON.

    Example:
        ```python
        snapshot = PydanticPersistence.load_json_or_default(path, RegistrySnapshot)
        PydanticPersistence.save_json(snapshot, path)
        ```
    """

    @staticmethod
    def load_json(path: Path, model_type: type[T]) -> T:
        """
        Read and validate ``path`` as ``model_type``.

        Raises:
            FileNotFoundError: If the file doesn't exist
            ConfigFileInvalidError: If the file is empty, unreadable or not JSON
            ConfigValidationError: If the JSON does not match the model
        """
        if not path.exists():
            raise FileNotFoundError(f"File not found: {path}")

        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise ConfigFileInvalidError(str(path), f"Cannot read file: {e}") from e

        if not text.strip():
            raise ConfigFileInvalidError(str(path), "File is empty")

        try:
            model = model_type.model_validate_json(text)
        except ValidationError as e:
            logger.error(f"{path} is not a valid {model_type.__name__}: {e}")
            raise wrap_pydantic_error(e, str(path)) from e

        logger.debug(f"Loaded {model_type.__name__} from {path}")
        return model

    @staticmethod
    def save_json(
        data: BaseModel,
        path: Path,
        indent: int = 2,
        create_parents: bool = True,
        backup: bool = True,
    ) -> None:
        """
        Write ``data`` to ``path`` atomically.

        Args:
            data: Model to write
            path: Destination file
            indent: JSON indentation
            create_parents: Create missing parent directories
            backup: Copy an existing file to ``<name>.bak`` first

        Raises:
            OSError: If the file cannot be written
            ConfigurationError: If the model cannot be serialized
        """
        try:
            content = data.model_dump_json(indent=indent)
        except Exception as e:
            raise ConfigurationError(
                user_message=f"Failed to save {path}",
                technical_message=f"Cannot serialize {type(data).__name__}: {e}",
            ) from e

        if create_parents:
            path.parent.mkdir(parents=True, exist_ok=True)

        if backup and path.exists():
            shutil.copy2(path, _sibling(path, ".bak"))

        temp_path = _sibling(path, ".tmp")
        try:
            temp_path.write_text(content, encoding="utf-8")
            temp_path.replace(path)
        except OSError as e:
            logger.error(f"Could not write {path}: {e}")
            raise
        finally:
            temp_path.unlink(missing_ok=True)

        logger.debug(f"Saved {type(data).__name__} to {path}")

    @staticmethod
    def load_json_or_default(
        path: Path, model_type: type[T], default_factory: Callable[[], T] | None = None
    ) -> T:
        """
        Like ``load_json``, but a missing file yields a default.

        The default is not written to disk. A file that exists but is broken
        still raises, so it is never silently replaced.
        """
        try:
            return PydanticPersistence.load_json(path, model_type)
        except FileNotFoundError:
            logger.info(f"{path} does not exist, using default {model_type.__name__}")
            return default_factory() if default_factory else model_type()
