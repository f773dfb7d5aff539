"""
Todo Storage - In-memory keyed collection of todo items.

Each todo is identified by a sequence number assigned at creation time. The
counter only moves forward, so ids are never handed out twice, even after
deletion or clear().

Ordering: insertion order (dicts keep it).
Persistence: none, the store lives as long as the app that owns it.
"""
from __future__ import annotations

import itertools
import logging
import threading
from typing import Any, Dict, List, Optional

_LOGGER = logging.getLogger(__name__)


class TodoError(Exception):
    """Base class for todo store errors."""


class TodoValidationError(TodoError, ValueError):
    """Raised when a todo field fails validation."""


class TodoNotFoundError(TodoError, KeyError):
    """Raised when a todo id is unknown."""

    def __init__(self, todo_id: str):
        super().__init__(todo_id)
        self.todo_id = todo_id

    def __str__(self) -> str:
        return "Todo not found"


def _clean_title(title: Any) -> str:
    if not isinstance(title, str):
        raise TodoValidationError("title must be a string")
    title = title.strip()
    if not title:
        raise TodoValidationError("title must not be empty")
    return title


class Todo:
    """A single todo item."""

    def __init__(self, todo_id: str, title: str, completed: bool = False):
        self.id = todo_id
        self.title = title
        self.completed = completed

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to JSON-compatible dict."""
        return {
            "id": self.id,
            "title": self.title,
            "completed": self.completed,
        }

    def __repr__(self) -> str:
        return f"Todo(id={self.id!r}, title={self.title!r}, completed={self.completed!r})"


class TodoStore:
    """Thread-safe in-memory storage for todos."""

    def __init__(self):
        self._todos: Dict[str, Todo] = {}
        self._ids = itertools.count(1)
        self._lock = threading.RLock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._todos)

    def __contains__(self, todo_id: object) -> bool:
        with self._lock:
            return todo_id in self._todos

    def _new_id(self) -> str:
        return str(next(self._ids))

    def create(self, title: str) -> Todo:
        """Create a new todo with ``completed=False``.

        Raises:
            TodoValidationError: If the title is not a non-empty string.
        """
        title = _clean_title(title)
        with self._lock:
            todo = Todo(self._new_id(), title)
            self._todos[todo.id] = todo
        _LOGGER.debug("Created todo %s", todo.id)
        return todo

    def get(self, todo_id: str) -> Optional[Todo]:
        """Get todo by ID."""
        with self._lock:
            return self._todos.get(todo_id)

    def list(self) -> List[Todo]:
        """List all todos in insertion order."""
        with self._lock:
            return list(self._todos.values())

    def update(
        self,
        todo_id: str,
        title: Optional[str] = None,
        completed: Optional[bool] = None,
    ) -> Todo:
        """Apply a partial update. Fields left as None are unchanged.

        Raises:
            TodoNotFoundError: If no todo has this id.
            TodoValidationError: If a title is given but blank, or
                completed is given but not a bool.
        """
        if title is not None:
            title = _clean_title(title)
        if completed is not None and not isinstance(completed, bool):
            raise TodoValidationError("completed must be a boolean")

        with self._lock:
            todo = self._todos.get(todo_id)
            if todo is None:
                raise TodoNotFoundError(todo_id)
            if title is not None:
                todo.title = title
            if completed is not None:
                todo.completed = completed

        _LOGGER.debug("Updated todo %s", todo_id)
        return todo

    def delete(self, todo_id: str) -> bool:
        """Remove a todo. Returns True if it existed."""
        with self._lock:
            removed = self._todos.pop(todo_id, None)

        if removed is None:
            return False
        _LOGGER.debug("Deleted todo %s", todo_id)
        return True

    def clear(self) -> None:
        """Drop every todo. The id counter is not reset."""
        with self._lock:
            self._todos.clear()
