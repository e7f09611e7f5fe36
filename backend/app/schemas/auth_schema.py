"""
schemas/auth_schema.py — Marshmallow schemas for authentication endpoints.

Validation responsibility:
  - This file: field types, lengths, formats.
  - services/auth_service.py: DUPLICATE_EMAIL (requires a DB lookup, not a
    schema concern) and credential correctness.

IMPORTANT: All schemas inherit from marshmallow.Schema directly so they can
           be instantiated without a Flask application context.
"""

from __future__ import annotations

from marshmallow import Schema, ValidationError, fields, validate

# bcrypt only reads the first 72 bytes of a password and recent releases
# refuse anything longer.
BCRYPT_MAX_PASSWORD_BYTES = 72


def _validate_bcrypt_length(value: str) -> None:
    if len(value.encode("utf-8")) > BCRYPT_MAX_PASSWORD_BYTES:
        raise ValidationError(
            f"Password must be at most {BCRYPT_MAX_PASSWORD_BYTES} bytes long."
        )


class RegisterSchema(Schema):
    """
    POST /register

    Field rules:
      username : 3–50 chars
      email    : valid email format, max 255
      password : min 6 chars, at most 72 bytes (bcrypt input limit)
    """

    username = fields.Str(
        required=True,
        validate=validate.Length(
            min=3,
            max=50,
            error="Username must be between 3 and 50 characters.",
        ),
    )

    email = fields.Email(
        required=True,
        validate=validate.Length(max=255),
    )

    password = fields.Str(
        required=True,
        load_only=True,
        validate=[
            validate.Length(
                min=6,
                error="Password must be at least 6 characters long.",
            ),
            _validate_bcrypt_length,
        ],
    )


class LoginSchema(Schema):
    """
    POST /login

    Accepts email + password. Credential correctness is checked in
    auth_service.authenticate() (INVALID_CREDENTIALS, 400).
    """

    email = fields.Email(required=True)
    password = fields.Str(
        required=True,
        load_only=True,
        validate=[
            validate.Length(min=1, error="Password is required."),
            _validate_bcrypt_length,
        ],
    )
