"""Domain models for the user administration service."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class UserStatus(str, Enum):
    """Account state shown in the admin list."""

    ACTIVE = "active"
    INACTIVE = "inactive"
    PENDING = "pending"


@dataclass(frozen=True)
class User:
    """Represents a user record held by the in-memory store."""

    id: int
    name: str
    email: str
    role: str
    status: UserStatus
    date_joined: str
    last_login: Optional[str] = None


__all__ = ["User", "UserStatus"]
