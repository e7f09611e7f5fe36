"""
schemas/todo_schema.py — Marshmallow schemas for todo endpoints.

Validation responsibility:
  - This file: description length, priority enum, done type.
  - services/todo_service.py: ownership (404 for todos of other users).

Priority is loaded as the Priority enum (by value: "low" | "medium" | "high").
"""

from __future__ import annotations

from marshmallow import Schema, fields, validate

from backend.app.models.todo import Priority

_description = dict(
    validate=validate.Length(
        min=1,
        max=255,
        error="Description must be between 1 and 255 characters.",
    ),
)


class TodoCreateSchema(Schema):
    """POST /todos — priority defaults to low in the service when omitted."""

    description = fields.Str(required=True, **_description)
    priority = fields.Enum(Priority, by_value=True)


class TodoUpdateSchema(Schema):
    """PUT /todos/<id> — partial update, every field optional."""

    description = fields.Str(**_description)
    priority = fields.Enum(Priority, by_value=True)
    done = fields.Boolean()
