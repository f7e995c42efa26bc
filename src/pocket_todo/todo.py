"""Todo item data model for the pocket-todo application."""

from dataclasses import dataclass
from typing import List, Optional, Dict, Any, Iterable
from datetime import datetime

from .utils.datetime import (
    now_utc,
    ensure_aware,
    to_timestamp,
    from_timestamp,
    format_local,
)


@dataclass
class ToDoItem:
    """A single entry on the todo list.

    ``completed_date`` is set exactly when ``done`` becomes true and is
    ``None`` while the item is pending.
    """

    id: int
    text: str
    done: bool = False
    created_date: Optional[datetime] = None
    completed_date: Optional[datetime] = None

    def __post_init__(self):
        """Normalize timestamps to aware UTC datetimes."""
        self.created_date = ensure_aware(self.created_date) or now_utc()
        self.completed_date = ensure_aware(self.completed_date)

    @classmethod
    def create(cls, item_id: int, text: str, now: Optional[datetime] = None) -> "ToDoItem":
        """Build a new pending item stamped with the creation time."""
        return cls(
            id=item_id,
            text=text,
            done=False,
            created_date=now or now_utc(),
            completed_date=None,
        )

    def complete(self, now: Optional[datetime] = None):
        """Mark the item as done and record when."""
        self.done = True
        self.completed_date = ensure_aware(now) or now_utc()

    def to_string(self, verbose: bool = False) -> str:
        """Return the one-line text representation of the item."""
        return render(self, verbose)

    def to_dict(self) -> Dict[str, Any]:
        """Convert the item to its storage representation (epoch seconds)."""
        return {
            "id": self.id,
            "text": self.text,
            "done": self.done,
            "created_date": to_timestamp(self.created_date),
            "completed_date": to_timestamp(self.completed_date),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ToDoItem":
        """Create an item from its storage representation.

        Raises:
            ValueError: If a field is missing or has the wrong type.
        """
        if not isinstance(data, dict):
            raise ValueError(f"expected an object, got {type(data).__name__}")

        item_id = _require(data, "id", _is_int, "an integer")
        text = _require(data, "text", lambda v: isinstance(v, str), "a string")
        done = _require(data, "done", lambda v: isinstance(v, bool), "a boolean")
        created = _require(data, "created_date", _is_int, "an integer timestamp")

        completed = data.get("completed_date")
        if completed is not None and not _is_int(completed):
            raise ValueError("field 'completed_date' must be an integer timestamp or null")

        return cls(
            id=item_id,
            text=text,
            done=done,
            created_date=_timestamp_field("created_date", created),
            completed_date=_timestamp_field("completed_date", completed),
        )


def _timestamp_field(key: str, seconds: Optional[int]) -> Optional[datetime]:
    try:
        return from_timestamp(seconds)
    except (OverflowError, OSError, ValueError) as e:
        raise ValueError(f"field '{key}' is not a valid timestamp: {e}") from e


def _is_int(value: Any) -> bool:
    # bool is a subclass of int but never a valid id or timestamp
    return isinstance(value, int) and not isinstance(value, bool)


def _require(data: Dict[str, Any], key: str, check, description: str) -> Any:
    if key not in data:
        raise ValueError(f"missing field '{key}'")
    value = data[key]
    if not check(value):
        raise ValueError(f"field '{key}' must be {description}")
    return value


def _verbose_details(item: ToDoItem) -> str:
    completed = ""
    if item.completed_date is not None:
        completed = f" completed: {format_local(item.completed_date)}"
    return f"(created: {format_local(item.created_date)}{completed})"


def render(item: ToDoItem, verbose: bool = False) -> str:
    """Render an item as a single display line.

    The id is right-aligned in four columns with a trailing period,
    followed by the completion marker, the text and, when ``verbose``,
    the creation/completion timestamps in local time::

        >>> render(ToDoItem(id=1, text="Walk the dog"))
        '  1. [ ] Walk the dog '
    """
    padded_id = f"{item.id}."
    marker = "X" if item.done else " "
    details = _verbose_details(item) if verbose else ""
    return f"{padded_id:>4} [{marker}] {item.text} {details}"


def next_item_id(items: Iterable[ToDoItem]) -> int:
    """Return the id for a new item: highest existing id plus one."""
    return max((item.id for item in items), default=0) + 1


def pending_items(items: List[ToDoItem]) -> List[ToDoItem]:
    """Items that are not done yet, in list order."""
    return [item for item in items if not item.done]
