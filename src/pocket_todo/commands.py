"""Command handlers: each one is a single load, mutate, save cycle."""

import logging
from dataclasses import dataclass, field
from typing import List

from .storage import Storage, InitStatus
from .todo import ToDoItem, render, next_item_id, pending_items

logger = logging.getLogger(__name__)

LOAD_FAILED = "Couldn't load todo list from storage"
SAVE_FAILED = "Error: failed to write todo list to storage"
LIST_HEADER = "TODO List"
LIST_INDENT = "   "


@dataclass
class CommandResult:
    """What a command reports back to the user."""
    success: bool
    lines: List[str] = field(default_factory=list)

    @classmethod
    def ok(cls, *lines: str) -> "CommandResult":
        return cls(True, list(lines))

    @classmethod
    def failed(cls, *lines: str) -> "CommandResult":
        return cls(False, list(lines))


class TodoCommands:
    """The init, new, complete and list operations over one storage root.

    Every handler loads the list fresh from disk. Storage errors raised
    while loading (corrupt or unreadable file) propagate to the caller.
    """

    def __init__(self, storage: Storage):
        self.storage = storage

    def init(self) -> CommandResult:
        """Create the storage directory and placeholder file."""
        result = self.storage.initialize()
        header = f"path: {result.directory}"

        if result.status is InitStatus.CREATED:
            return CommandResult.ok(header, "Successfully initialised storage for todo")
        if result.status is InitStatus.FILE_ERROR:
            return CommandResult.failed(
                header, f"Couldn't create storage file {result.path}: {result.error}"
            )
        return CommandResult.failed(
            header, f"Unexpected error occurred initialising storage for todo: {result.error}"
        )

    def new(self, text: str) -> CommandResult:
        """Append a new pending item and report its id."""
        items = self.storage.load()
        if items is None:
            return CommandResult.failed(LOAD_FAILED)

        item = ToDoItem.create(next_item_id(items), text)
        items.append(item)
        if not self.storage.save(items):
            return CommandResult.failed(SAVE_FAILED)

        logger.info(f"Added item {item.id}")
        return CommandResult.ok(f"New item ({item.id}) added to todo list.")

    def complete(self, item_id: int) -> CommandResult:
        """Mark the first pending item with ``item_id`` as done.

        Items that are already done are treated exactly like missing ones.
        """
        items = self.storage.load()
        if items is None:
            return CommandResult.failed(LOAD_FAILED)

        item = next((i for i in items if i.id == item_id and not i.done), None)
        if item is None:
            return CommandResult.failed(f"Error: item {item_id} not found.")

        item.complete()
        if not self.storage.save(items):
            return CommandResult.failed(SAVE_FAILED)

        logger.info(f"Completed item {item.id}")
        return CommandResult.ok(f"Item {item_id} ({item.text}) completed.")

    def list(self, all: bool = False, verbose: bool = False) -> CommandResult:
        """Render the list, hiding done items unless ``all`` is set."""
        items = self.storage.load()
        if items is None:
            return CommandResult.failed(LOAD_FAILED)

        shown = items if all else pending_items(items)
        lines = [LIST_HEADER, ""]
        lines.extend(f"{LIST_INDENT}{render(item, verbose)}" for item in shown)
        return CommandResult.ok(*lines)
