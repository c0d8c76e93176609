"""Exceptions raised by the store, query and configuration layers."""

from __future__ import annotations


class UserAdminError(Exception):
    """Base class for user administration errors."""


class ValidationError(UserAdminError, ValueError):
    """Raised when input is malformed or out of range."""


class ConflictError(UserAdminError, ValueError):
    """Raised when a change would break email uniqueness."""

    def __init__(self, email: str) -> None:
        self.email = email
        super().__init__("Email already exists")


class NotFoundError(UserAdminError, LookupError):
    """Raised when no user exists for the requested identifier."""

    def __init__(self, user_id: int) -> None:
        self.user_id = user_id
        super().__init__("User not found")


class ConfigurationError(UserAdminError):
    """Raised when settings or seed files cannot be loaded."""


__all__ = [
    "ConfigurationError",
    "ConflictError",
    "NotFoundError",
    "UserAdminError",
    "ValidationError",
]
