"""Todo list: in-memory store and its REST blueprint."""

from .store import (
    Todo,
    TodoError,
    TodoNotFoundError,
    TodoStore,
    TodoValidationError,
)

__all__ = [
    "Todo",
    "TodoError",
    "TodoNotFoundError",
    "TodoStore",
    "TodoValidationError",
]
