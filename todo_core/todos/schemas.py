"""Pydantic v2 models for todo request validation."""
from __future__ import annotations

from pydantic import BaseModel, StrictBool, StrictStr, field_validator


def _non_blank(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("title must not be empty")
    return v


class CreateTodoRequest(BaseModel):
    """POST /api/todos body."""
    title: StrictStr

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        return _non_blank(v)


class UpdateTodoRequest(BaseModel):
    """PUT /api/todos/<id> body. Omitted fields stay unchanged."""
    title: StrictStr | None = None
    completed: StrictBool | None = None

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str | None) -> str | None:
        if v is None:
            return v
        return _non_blank(v)
