"""pocket-todo - a small personal command-line todo list."""

__version__ = "0.1.0"
__author__ = "pocket-todo contributors"

from .todo import ToDoItem, render, next_item_id
from .storage import Storage, StorageError, StorageCorruptError

__all__ = [
    "ToDoItem",
    "render",
    "next_item_id",
    "Storage",
    "StorageError",
    "StorageCorruptError",
    "__version__",
]
