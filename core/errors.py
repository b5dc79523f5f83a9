"""
Domain error kinds. Each carries the HTTP status it maps to at the API edge.
"""
from __future__ import annotations

from typing import List


class AppError(Exception):
    status_code = 500
    default_message = "Something went wrong"

    def __init__(self, message: str | None = None, errors: List | None = None):
        self.message = message or self.default_message
        self.errors = list(errors or [])
        super().__init__(self.message)


class ValidationError(AppError):
    status_code = 400
    default_message = "Invalid request"


class AuthenticationError(AppError):
    status_code = 401
    default_message = "Unauthorized request"


class NotFoundError(AppError):
    status_code = 404
    default_message = "Not found"


class ConflictError(AppError):
    status_code = 409
    default_message = "Resource already exists"


class InternalError(AppError):
    status_code = 500


# -------- Token verification failures --------
class TokenError(Exception):
    pass


class TokenExpired(TokenError):
    pass


class TokenInvalidSignature(TokenError):
    pass


class TokenMalformed(TokenError):
    pass


class TokenConfigError(TokenError):
    """Signing secret is not configured."""


__all__ = [
    "AppError",
    "ValidationError",
    "AuthenticationError",
    "NotFoundError",
    "ConflictError",
    "InternalError",
    "TokenError",
    "TokenExpired",
    "TokenInvalidSignature",
    "TokenMalformed",
    "TokenConfigError",
]
