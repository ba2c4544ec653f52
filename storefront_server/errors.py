# Copyright (C) 2024 Storefront Contributors
# SPDX-License-Identifier: GPL-3.0-or-later

"""Domain errors raised by services and mapped to HTTP responses in main.py.

Each error carries a user-safe ``detail`` that is returned unchanged. Storage
and other unexpected errors are never wrapped in these classes.
"""

from typing import Any


class AppError(Exception):
    """Base class for errors that reach the client.

    Attributes:
        status_code: HTTP status code to return.
        detail: JSON-serializable message (string, list or dict).
    """

    status_code: int = 500

    def __init__(self, detail: Any) -> None:
        self.detail = detail
        super().__init__(detail if isinstance(detail, str) else repr(detail))

    def to_content(self) -> dict[str, Any]:
        return {"detail": self.detail}


class BadRequestError(AppError):
    """Invalid input or a business rule violation (400)."""

    status_code = 400


class ForbiddenError(AppError):
    """Cooldown or permission violation (403)."""

    status_code = 403


class NotFoundError(AppError):
    """Referenced entity does not exist (404)."""

    status_code = 404


class InternalServerError(AppError):
    """A dependent operation failed (500)."""

    status_code = 500


# Login failure reasons and the field-level messages they map to
INCORRECT_EMAIL = "incorrect email"
INCORRECT_PASSWORD = "incorrect password"

_AUTH_FIELD_MESSAGES = {
    INCORRECT_EMAIL: ("email", "That email is not registered"),
    INCORRECT_PASSWORD: ("password", "That password is incorrect"),
}


class AuthError(AppError):
    """Credential mismatch (401). Serialized as per-field messages, not a single detail."""

    status_code = 401

    def __init__(self, reason: str) -> None:
        if reason not in _AUTH_FIELD_MESSAGES:
            raise ValueError(f"Unknown auth failure reason: {reason}")
        self.reason = reason
        super().__init__(reason)

    def to_content(self) -> dict[str, Any]:
        errors = {"email": "", "password": ""}
        field, message = _AUTH_FIELD_MESSAGES[self.reason]
        errors[field] = message
        return errors
