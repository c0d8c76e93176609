"""In-memory user administration service with a searchable, paginated list API."""

from __future__ import annotations

from typing import Any

from .models import User, UserStatus
from .query import UserPage, UserQuery, run_query
from .store import UserStore


def create_app(*args: Any, **kwargs: Any):
    """Factory function that returns the user administration API application."""

    from .api import create_app as _create_app

    return _create_app(*args, **kwargs)


__all__ = [
    "User",
    "UserPage",
    "UserQuery",
    "UserStatus",
    "UserStore",
    "create_app",
    "run_query",
]
