"""
errors.py — AppError base class and error code registry.

Every error returned by the API uses a code defined here.
Do not raise strings or generic exceptions from service or route code.

Rules:
  - Error codes are a versioned contract. They do not change once published.
  - Error messages are human-readable prose. They may be improved at any time.
  - Never conflate 401 (unauthenticated) with 403 (forbidden). See AUTH section below.

Response body (every error path):
    {"error": "<message>", "code": "<CODE>"}            # most errors
    {"error": "...", "code": "...", "details": {...}}    # validation errors
"""

from __future__ import annotations


class AppError(Exception):

    def __init__(
            self,
            code: str,
            message: str,
            http_status: int,
            details: dict | None = None,
    ) -> None:
        super().__init__(message)
        self.code        = code
        self.message     = message
        self.http_status = http_status
        self.details     = details  # per-field messages for validation errors

    def to_dict(self) -> dict:
        payload = {
            "error": self.message,
            "code":  self.code,
        }
        if self.details is not None:
            payload["details"] = self.details
        return payload

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(code={self.code!r}, "
            f"http_status={self.http_status}, "
            f"message={self.message!r})"
        )


# ── Taxonomy ───────────────────────────────────────────────────────────────
# One subclass per failure kind. Each carries its HTTP status so raise sites
# only pick the code and message.

class ValidationFailed(AppError):
    def __init__(self, message: str, details: dict | None = None,
                 code: str = "VALIDATION_FAILED") -> None:
        super().__init__(code, message, 400, details=details)


class Unauthenticated(AppError):
    def __init__(self, code: str, message: str = "Authentication required.") -> None:
        super().__init__(code, message, 401)


class Forbidden(AppError):
    def __init__(self, code: str, message: str = "Permission denied.") -> None:
        super().__init__(code, message, 403)


class NotFound(AppError):
    def __init__(self, code: str, message: str) -> None:
        super().__init__(code, message, 404)


class Conflict(AppError):
    def __init__(self, code: str, message: str) -> None:
        super().__init__(code, message, 409)


# ── Error Code Registry ────────────────────────────────────────────────────
#
# Organised by category. HTTP status is indicated in the comment.
#
# IMPORTANT: these are the string values sent in the API response.
# Do not rename them without a major version bump.
# ──────────────────────────────────────────────────────────────────────────

class ErrorCode:

    # ── Input Errors (400) ─────────────────────────────────────────────────
    VALIDATION_FAILED          = "VALIDATION_FAILED"
    BAD_REQUEST                = "BAD_REQUEST"
    INVALID_CREDENTIALS        = "INVALID_CREDENTIALS"    # 400, login only

    # ── Conflict Errors (409) ──────────────────────────────────────────────
    DUPLICATE_EMAIL            = "DUPLICATE_EMAIL"

    # ── Not Found Errors (404) ─────────────────────────────────────────────
    USER_NOT_FOUND             = "USER_NOT_FOUND"
    TODO_NOT_FOUND             = "TODO_NOT_FOUND"         # also: owned by someone else
    ROUTE_NOT_FOUND            = "ROUTE_NOT_FOUND"

    # ── Auth Errors ────────────────────────────────────────────────────────
    # 401 = we do not know who you are (unauthenticated)
    # 403 = we know who you are, but you are not allowed, or the CSRF pair failed
    TOKEN_MISSING              = "TOKEN_MISSING"          # 401
    TOKEN_INVALID              = "TOKEN_INVALID"          # 401
    TOKEN_EXPIRED              = "TOKEN_EXPIRED"          # 401
    FORBIDDEN                  = "FORBIDDEN"              # 403
    CSRF_FAILED                = "CSRF_FAILED"            # 403

    # ── HTTP-level (werkzeug) ──────────────────────────────────────────────
    METHOD_NOT_ALLOWED         = "METHOD_NOT_ALLOWED"     # 405
    HTTP_ERROR                 = "HTTP_ERROR"

    # ── System Errors (500) ────────────────────────────────────────────────
    INTERNAL_ERROR             = "INTERNAL_ERROR"
