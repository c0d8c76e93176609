"""Search, filter and pagination pipeline for the user list."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

from .errors import ValidationError
from .models import User

DEFAULT_PAGE = 1
DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100

# The list UI sends "all" for an unset dropdown.
_MATCH_ALL = "all"


def _normalise_term(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    cleaned = value.strip()
    if not cleaned or cleaned == _MATCH_ALL:
        return None
    return cleaned


def _normalise_search(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    cleaned = value.strip()
    return cleaned or None


@dataclass(frozen=True)
class UserQuery:
    """Normalised list parameters; ``None`` means no constraint."""

    search: Optional[str] = None
    status: Optional[str] = None
    role: Optional[str] = None
    page: int = DEFAULT_PAGE
    page_size: int = DEFAULT_PAGE_SIZE

    @classmethod
    def from_params(
        cls,
        *,
        search: Optional[str] = None,
        status: Optional[str] = None,
        role: Optional[str] = None,
        page: Optional[int] = None,
        page_size: Optional[int] = None,
    ) -> "UserQuery":
        """Build a query from raw request values.

        Search, status and role are trimmed, and an empty value or the ``"all"``
        sentinel for status/role is treated as absent. Page and page size fall
        back to their defaults and are bounds-checked.
        """

        resolved_page = DEFAULT_PAGE if page is None else page
        resolved_size = DEFAULT_PAGE_SIZE if page_size is None else page_size
        if resolved_page < 1:
            raise ValidationError("page must be 1 or greater")
        if not 1 <= resolved_size <= MAX_PAGE_SIZE:
            raise ValidationError(f"pageSize must be between 1 and {MAX_PAGE_SIZE}")

        return cls(
            search=_normalise_search(search),
            status=_normalise_term(status),
            role=_normalise_term(role),
            page=resolved_page,
            page_size=resolved_size,
        )

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size


@dataclass(frozen=True)
class UserPage:
    """One page of matching users plus the unpaginated match count."""

    users: Tuple[User, ...]
    total: int
    page: int
    page_size: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.page_size)


def _matches_search(user: User, term: str) -> bool:
    return (
        term in user.name.lower()
        or term in user.email.lower()
        or term in user.role.lower()
    )


def filter_users(users: Iterable[User], query: UserQuery) -> List[User]:
    """Return the users matching every active filter, in their given order."""

    matched = list(users)

    if query.search:
        term = query.search.lower()
        matched = [user for user in matched if _matches_search(user, term)]

    if query.status is not None:
        matched = [user for user in matched if user.status == query.status]

    if query.role is not None:
        matched = [user for user in matched if user.role == query.role]

    return matched


def run_query(users: Iterable[User], query: UserQuery) -> UserPage:
    """Filter ``users`` and cut out the requested page.

    A page past the end of the result is empty; ``total`` still reports the
    full number of matches.
    """

    matched = filter_users(users, query)
    start = query.offset
    end = start + query.page_size
    return UserPage(
        users=tuple(matched[start:end]),
        total=len(matched),
        page=query.page,
        page_size=query.page_size,
    )


__all__ = [
    "DEFAULT_PAGE",
    "DEFAULT_PAGE_SIZE",
    "MAX_PAGE_SIZE",
    "UserPage",
    "UserQuery",
    "filter_users",
    "run_query",
]
