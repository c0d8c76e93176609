"""In-memory user store for the admin service."""

from __future__ import annotations

import logging
import re
import threading
from dataclasses import replace
from typing import Any, Dict, Iterable, List, Mapping, Optional

from .errors import ConflictError, NotFoundError, ValidationError
from .models import User, UserStatus
from .query import UserPage, UserQuery, run_query

logger = logging.getLogger("useradmin.store")

_MAX_NAME_LENGTH = 100
_MAX_EMAIL_LENGTH = 255
_MAX_ROLE_LENGTH = 32
_ALLOWED_ROLE = re.compile(r"^[A-Za-z0-9_.-]+(?: [A-Za-z0-9_.-]+)*$")

_UPDATABLE_FIELDS = frozenset(
    {"name", "email", "role", "status", "last_login", "date_joined"}
)


def _normalise_name(name: str) -> str:
    value = str(name).strip()
    if not value:
        raise ValidationError("Name must not be empty")
    if len(value) > _MAX_NAME_LENGTH:
        raise ValidationError("Name is too long")
    return value


def _normalise_email(email: str) -> str:
    value = str(email).strip()
    if not value:
        raise ValidationError("Email must not be empty")
    if len(value) > _MAX_EMAIL_LENGTH:
        raise ValidationError("Email is too long")
    return value


def _normalise_status(status: Any) -> UserStatus:
    try:
        return UserStatus(status)
    except ValueError as exc:
        allowed = ", ".join(member.value for member in UserStatus)
        raise ValidationError(f"Status must be one of: {allowed}") from exc


def _normalise_last_login(last_login: Optional[str]) -> Optional[str]:
    if last_login is None:
        return None
    value = str(last_login).strip()
    return value or None


def _normalise_date_joined(date_joined: str) -> str:
    value = str(date_joined).strip()
    if not value:
        raise ValidationError("Date joined must not be empty")
    return value


class UserStore:
    """Owns the user collection and hands out identifiers.

    Records are kept in insertion order, which is also the order list queries
    return them in. Identifiers come from a counter that only moves forward,
    so a deleted user's id is never handed out again.
    """

    def __init__(self, *, allowed_roles: Optional[Iterable[str]] = None) -> None:
        self._users: Dict[int, User] = {}
        self._next_id = 1
        self._lock = threading.Lock()
        self._allowed_roles = (
            frozenset(role.strip() for role in allowed_roles if role.strip())
            if allowed_roles is not None
            else None
        )

    def __len__(self) -> int:
        with self._lock:
            return len(self._users)

    @property
    def allowed_roles(self) -> Optional[frozenset[str]]:
        return self._allowed_roles

    def _normalise_role(self, role: str) -> str:
        value = str(role).strip()
        if not value:
            raise ValidationError("Role must not be empty")
        if len(value) > _MAX_ROLE_LENGTH:
            raise ValidationError("Role is too long")
        if not _ALLOWED_ROLE.fullmatch(value):
            raise ValidationError(
                "Role may only contain letters, numbers, single spaces, underscores, hyphens, or periods",
            )
        if self._allowed_roles is not None and value not in self._allowed_roles:
            allowed = ", ".join(sorted(self._allowed_roles))
            raise ValidationError(f"Role must be one of: {allowed}")
        return value

    def _normalise_changes(self, changes: Mapping[str, Any]) -> Dict[str, Any]:
        unknown = set(changes) - _UPDATABLE_FIELDS
        if unknown:
            raise ValidationError(f"Unknown user fields: {', '.join(sorted(unknown))}")

        cleaned: Dict[str, Any] = {}
        for key, value in changes.items():
            if key == "last_login":
                cleaned[key] = _normalise_last_login(value)
                continue
            if value is None:
                raise ValidationError(f"{key} must not be null")
            if key == "name":
                cleaned[key] = _normalise_name(value)
            elif key == "email":
                cleaned[key] = _normalise_email(value)
            elif key == "role":
                cleaned[key] = self._normalise_role(value)
            elif key == "status":
                cleaned[key] = _normalise_status(value)
            elif key == "date_joined":
                cleaned[key] = _normalise_date_joined(value)
        return cleaned

    def _find_by_email_locked(self, email: str) -> Optional[User]:
        for user in self._users.values():
            if user.email == email:
                return user
        return None

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------
    def get(self, user_id: int) -> Optional[User]:
        with self._lock:
            return self._users.get(user_id)

    def get_by_email(self, email: str) -> Optional[User]:
        """Return the user whose email matches exactly, if any."""

        with self._lock:
            return self._find_by_email_locked(email)

    def list_all(self) -> List[User]:
        """Return a snapshot of every user in insertion order."""

        with self._lock:
            return list(self._users.values())

    def query(self, query: UserQuery) -> UserPage:
        """Run the list pipeline against a consistent snapshot."""

        return run_query(self.list_all(), query)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------
    def insert(
        self,
        *,
        name: str,
        email: str,
        role: str,
        status: UserStatus | str,
        date_joined: str,
        last_login: Optional[str] = None,
    ) -> User:
        """Store a new user and return it with its assigned identifier."""

        fields = self._normalise_changes(
            {
                "name": name,
                "email": email,
                "role": role,
                "status": status,
                "date_joined": date_joined,
                "last_login": last_login,
            }
        )

        with self._lock:
            if self._find_by_email_locked(fields["email"]) is not None:
                logger.warning("Rejected new user with duplicate email %s", fields["email"])
                raise ConflictError(fields["email"])
            user = User(id=self._next_id, **fields)
            self._next_id += 1
            self._users[user.id] = user

        logger.info("Created user %s (%s)", user.id, user.email)
        return user

    def update(self, user_id: int, changes: Mapping[str, Any]) -> User:
        """Apply a partial update and return the merged record."""

        cleaned = self._normalise_changes(changes)

        with self._lock:
            new_email = cleaned.get("email")
            if new_email is not None:
                holder = self._find_by_email_locked(new_email)
                if holder is not None and holder.id != user_id:
                    logger.warning(
                        "Rejected email change for user %s: %s belongs to user %s",
                        user_id,
                        new_email,
                        holder.id,
                    )
                    raise ConflictError(new_email)

            existing = self._users.get(user_id)
            if existing is None:
                raise NotFoundError(user_id)

            updated = replace(existing, **cleaned)
            self._users[user_id] = updated

        logger.info("Updated user %s (fields=%s)", user_id, ", ".join(sorted(cleaned)) or "none")
        return updated

    def delete(self, user_id: int) -> bool:
        """Remove the user if present and report whether anything was removed."""

        with self._lock:
            removed = self._users.pop(user_id, None)

        if removed is not None:
            logger.info("Deleted user %s (%s)", user_id, removed.email)
        return removed is not None


__all__ = ["UserStore"]
