"""
Todo Core Package

Small JSON service for a todo list:
- Todos: in-memory store and REST endpoints under /api/todos
- App: Flask application factory, config and logging setup
"""

__version__ = "1.0.0"
