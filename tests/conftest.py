"""Shared test fixtures for Todo Core tests."""
import sys
from pathlib import Path

import pytest

# Add project root to Python path for imports
project_root = Path(__file__).resolve().parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from todo_core.app import TodoConfig, create_app
from todo_core.todos.store import TodoStore


@pytest.fixture
def store() -> TodoStore:
    """A fresh, empty store."""
    return TodoStore()


@pytest.fixture
def app(store: TodoStore):
    """Test Flask app owning the ``store`` fixture."""
    app = create_app(config=TodoConfig(log_level="debug"), store=store)
    app.config["TESTING"] = True
    return app


@pytest.fixture
def client(app):
    with app.test_client() as client:
        yield client
