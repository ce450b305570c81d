"""
Error taxonomy for the auth API.

Every request-level error carries the HTTP status it maps to, a
client-facing message, and an optional diagnostic detail that is only
rendered outside production.
"""

from typing import Optional


class AppError(Exception):
    status_code = 500

    def __init__(self, message: str, detail: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.detail = detail


class ValidationError(AppError):
    status_code = 400


class ConflictError(AppError):
    status_code = 400


class AuthError(AppError):
    """Bad credentials or an unusable bearer token.

    `reason` is for logs only; the response never reveals it.
    """

    status_code = 401

    def __init__(self, message: str, reason: str = "invalid_credentials"):
        super().__init__(message)
        self.reason = reason


class NotFoundError(AppError):
    status_code = 404


class PersistenceError(AppError):
    status_code = 500


class ConfigError(Exception):
    """Startup-only misconfiguration. The process must not start."""
