"""
Todo API - REST endpoints for the todo list.

Endpoints:
    GET    /api/todos         - List all todos
    POST   /api/todos         - Create a todo
    PUT    /api/todos/{id}    - Update title and/or completed
    DELETE /api/todos/{id}    - Delete a todo
"""
from __future__ import annotations

import logging

from flask import Blueprint, Flask, Response, current_app, jsonify

from ..api.validation import RequestBodyError, parse_json, validate_json
from .schemas import CreateTodoRequest, UpdateTodoRequest
from .store import TodoNotFoundError, TodoStore

_LOGGER = logging.getLogger(__name__)

EXTENSION_KEY = "todo_store"

todos_bp = Blueprint("todos", __name__, url_prefix="/api/todos")


def init_todos_api(app: Flask, store: TodoStore | None = None) -> TodoStore:
    """Attach a store to ``app`` and register the todos blueprint."""
    store = store if store is not None else TodoStore()
    app.extensions[EXTENSION_KEY] = store
    app.register_blueprint(todos_bp)
    return store


def get_store() -> TodoStore:
    """Get the store owned by the current app."""
    store = current_app.extensions.get(EXTENSION_KEY)
    if store is None:
        raise RuntimeError("Todos API not initialized - call init_todos_api() first")
    return store


def _not_found():
    return jsonify({"error": "Todo not found"}), 404


@todos_bp.route("", methods=["GET"])
def list_todos() -> Response:
    """GET /api/todos - all todos in creation order."""
    todos = get_store().list()
    return jsonify({"todos": [t.to_dict() for t in todos]})


@todos_bp.route("", methods=["POST"])
@validate_json(CreateTodoRequest)
def create_todo(body: CreateTodoRequest):
    """
    Create a todo.

    Expected body:
    {
        "title": "Buy milk"
    }
    """
    todo = get_store().create(body.title)

    _LOGGER.info("Todo created: %s", todo.id)
    return jsonify(todo.to_dict()), 201


@todos_bp.route("/<todo_id>", methods=["PUT"])
def update_todo(todo_id: str):
    """
    Update a todo. Only the fields present in the body change.

    Expected body:
    {
        "title": "Buy oat milk",   // optional
        "completed": true          // optional
    }
    """
    store = get_store()
    if todo_id not in store:
        return _not_found()

    try:
        body = parse_json(UpdateTodoRequest, allow_empty=True)
    except RequestBodyError as exc:
        return exc.to_response()

    try:
        todo = store.update(todo_id, title=body.title, completed=body.completed)
    except TodoNotFoundError:
        # Deleted between the lookup and the update.
        return _not_found()

    return jsonify(todo.to_dict())


@todos_bp.route("/<todo_id>", methods=["DELETE"])
def delete_todo(todo_id: str):
    """DELETE /api/todos/{id} - remove a todo."""
    if not get_store().delete(todo_id):
        return _not_found()

    _LOGGER.info("Todo deleted: %s", todo_id)
    return jsonify({"success": True})
