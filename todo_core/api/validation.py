"""Pydantic validation helpers for Flask route handlers."""
from __future__ import annotations

import functools
import logging
from typing import Type, TypeVar

from flask import jsonify, request
from pydantic import BaseModel, ValidationError

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


class RequestBodyError(Exception):
    """The JSON request body is missing, malformed or fails validation."""

    def __init__(self, error: str, detail):
        super().__init__(error)
        self.error = error
        self.detail = detail

    def to_response(self):
        return jsonify({"error": self.error, "detail": self.detail}), 400


def parse_json(model: Type[M], *, allow_empty: bool = False) -> M:
    """Parse and validate the current request's JSON body against ``model``.

    With ``allow_empty`` a request without a body validates as ``{}``.

    Raises:
        RequestBodyError: On invalid JSON or failed validation.
    """
    raw = request.get_json(silent=True)
    if raw is None:
        if not allow_empty or request.get_data(cache=True):
            raise RequestBodyError("invalid_json", "Request body must be valid JSON")
        raw = {}

    if not isinstance(raw, dict):
        raise RequestBodyError("invalid_json", "Request body must be a JSON object")

    try:
        return model.model_validate(raw)
    except ValidationError as exc:
        errors = []
        for err in exc.errors():
            errors.append({
                "field": ".".join(str(loc) for loc in err["loc"]),
                "message": err["msg"],
                "type": err["type"],
            })
        logger.debug("Rejected %s body: %s", model.__name__, errors)
        raise RequestBodyError("validation_error", errors) from exc


def validate_json(model: Type[BaseModel]):
    """Decorator that auto-parses and validates the JSON request body.

    Usage::

        @bp.post("/endpoint")
        @validate_json(MyModel)
        def handle(body: MyModel):
            ...

    On validation failure returns 400 with structured error details.
    """

    def decorator(fn):
        @functools.wraps(fn)
        def wrapper(*args, **kwargs):
            try:
                body = parse_json(model)
            except RequestBodyError as exc:
                return exc.to_response()

            return fn(body, *args, **kwargs)

        return wrapper

    return decorator
