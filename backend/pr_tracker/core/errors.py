# backend/pr_tracker/core/errors.py
"""
Error taxonomy shared by services and the HTTP layer.

Services raise these; main.py renders every AppError as
``{"ok": false, "message": ..., "error": <kind>}`` with ``status_code``.
"""
from __future__ import annotations
from typing import Optional


class AppError(Exception):
    status_code: int = 500
    error: str = "AppError"
    default_message: str = "Unexpected error."

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidInput(AppError):
    status_code = 400
    error = "ValidationError"
    default_message = "Invalid input."


class UnknownCode(AppError):
    status_code = 400
    error = "UnknownCode"
    default_message = "Invalid location or department."


class NotFound(AppError):
    status_code = 404
    error = "NotFound"
    default_message = "Not found."


class Unauthorized(AppError):
    status_code = 401
    error = "Unauthorized"
    default_message = "Not authorized"


class TokenInvalidOrExpired(AppError):
    status_code = 401
    error = "TokenInvalidOrExpired"
    default_message = "Token invalid or expired"


class InvalidCredentials(AppError):
    status_code = 401
    error = "InvalidCredentials"
    default_message = "Invalid credentials"


class AccountInactive(AppError):
    status_code = 403
    error = "AccountInactive"
    default_message = "Account is deactivated. Contact admin."


class DuplicateEmail(AppError):
    status_code = 400
    error = "DuplicateEmail"
    default_message = "Email already registered."


class DuplicateCode(AppError):
    status_code = 409
    error = "DuplicateCode"
    default_message = "Purchase request code already exists."


class StorageUnavailable(AppError):
    status_code = 500
    error = "StorageUnavailable"
    default_message = "Storage unavailable."
