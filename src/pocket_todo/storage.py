"""Storage layer for pocket-todo: the whole list lives in one JSON file."""

import json
import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import List, Optional

from .todo import ToDoItem
from .config import ConfigModel

logger = logging.getLogger(__name__)


class StorageError(Exception):
    """Raised when the storage file cannot be used."""


class StorageCorruptError(StorageError):
    """The storage file exists but does not hold a valid todo list."""

    def __init__(self, path: Path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"todo list at {path} is corrupt: {reason}")


class InitStatus(Enum):
    """Outcome of initializing storage."""
    CREATED = "created"
    FILE_ERROR = "file_error"
    DIR_ERROR = "dir_error"


@dataclass
class InitResult:
    status: InitStatus
    directory: Path
    path: Path
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status is InitStatus.CREATED


class Storage:
    """Loads and saves the todo list for a single storage root."""

    def __init__(self, config: ConfigModel):
        self.config = config

    @property
    def data_dir(self) -> Path:
        return Path(self.config.data_dir)

    @property
    def storage_path(self) -> Path:
        return self.config.get_storage_path()

    @property
    def placeholder_path(self) -> Path:
        return self.config.get_placeholder_path()

    def load(self) -> Optional[List[ToDoItem]]:
        """Read the full todo list.

        Returns:
            The list of items, or None when the storage file does not exist
            (storage has not been initialized).

        Raises:
            StorageCorruptError: If the file is not a JSON array of items.
            StorageError: If the file exists but cannot be read.
        """
        path = self.storage_path
        try:
            with open(path, "r", encoding="utf-8") as f:
                contents = f.read()
        except FileNotFoundError:
            logger.debug(f"No todo list at {path}")
            return None
        except UnicodeDecodeError as e:
            raise StorageCorruptError(path, f"not valid UTF-8: {e}") from e
        except OSError as e:
            raise StorageError(f"couldn't read {path}: {e}") from e

        try:
            data = json.loads(contents)
        except (ValueError, RecursionError) as e:
            # ValueError covers JSONDecodeError and the int digit limit
            raise StorageCorruptError(path, str(e) or type(e).__name__) from e

        if not isinstance(data, list):
            raise StorageCorruptError(path, f"expected a JSON array, got {type(data).__name__}")

        items = []
        for index, raw in enumerate(data):
            try:
                items.append(ToDoItem.from_dict(raw))
            except ValueError as e:
                raise StorageCorruptError(path, f"item {index}: {e}") from e

        logger.debug(f"Loaded {len(items)} items from {path}")
        return items

    def save(self, items: List[ToDoItem]) -> bool:
        """Overwrite the storage file with the full list.

        The list is written to a temporary sibling file first and renamed
        over the storage file, so a failed save leaves the old file intact.

        Returns:
            True if saved successfully, False otherwise
        """
        path = self.storage_path
        temp_path = path.with_name(path.name + ".tmp")
        try:
            content = json.dumps(
                [item.to_dict() for item in items],
                indent=self.config.json_indent,
            )
            with open(temp_path, "w", encoding="utf-8") as f:
                f.write(content)
            temp_path.replace(path)
        except (OSError, TypeError, ValueError) as e:
            logger.error(f"Failed to save todo list to {path}: {e}")
            try:
                temp_path.unlink()
            except FileNotFoundError:
                pass
            except OSError as cleanup_error:
                logger.warning(f"Couldn't remove {temp_path}: {cleanup_error}")
            return False

        logger.debug(f"Saved {len(items)} items to {path}")
        return True

    def initialize(self) -> InitResult:
        """Create the storage directory and the placeholder file.

        An existing directory is fine; an existing placeholder file is
        reported as a failure.
        """
        directory = self.data_dir
        path = self.placeholder_path
        try:
            directory.mkdir(parents=True)
        except FileExistsError:
            logger.debug(f"Storage directory {directory} already exists")
        except OSError as e:
            logger.error(f"Failed to create storage directory {directory}: {e}")
            return InitResult(InitStatus.DIR_ERROR, directory, path, e.strerror or str(e))

        try:
            # mode "x" fails if the file already exists
            with open(path, "x", encoding="utf-8"):
                pass
        except OSError as e:
            logger.debug(f"Couldn't create storage file {path}: {e}")
            return InitResult(InitStatus.FILE_ERROR, directory, path, e.strerror or str(e))

        logger.info(f"Initialised storage at {directory}")
        return InitResult(InitStatus.CREATED, directory, path)
