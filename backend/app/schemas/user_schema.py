"""
schemas/user_schema.py — Marshmallow schema for profile updates.

Only username and email are mutable through PUT /users/<id>; any other key
(password, salt, id, ...) is rejected as an unknown field.
"""

from __future__ import annotations

from marshmallow import Schema, fields, validate


class UserUpdateSchema(Schema):
    """PUT /users/<id> — both fields optional."""

    username = fields.Str(
        validate=validate.Length(
            min=3,
            max=50,
            error="Username must be between 3 and 50 characters.",
        ),
    )
    email = fields.Email(validate=validate.Length(max=255))
