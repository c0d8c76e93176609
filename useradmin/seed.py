"""Sample users loaded into a fresh store."""

from __future__ import annotations

import logging
from typing import Any, Iterable, List, Mapping

from .config import Settings, load_seed_users
from .errors import ConfigurationError, ConflictError, ValidationError
from .models import User
from .store import UserStore

logger = logging.getLogger("useradmin.seed")

SAMPLE_USERS: List[Mapping[str, Any]] = [
    {
        "name": "John Smith",
        "email": "john.smith@example.com",
        "role": "admin",
        "status": "active",
        "last_login": "2 hours ago",
        "date_joined": "Jan 15, 2024",
    },
    {
        "name": "Alice Davis",
        "email": "alice.davis@example.com",
        "role": "user",
        "status": "active",
        "last_login": "1 day ago",
        "date_joined": "Dec 8, 2023",
    },
    {
        "name": "Mike Wilson",
        "email": "mike.wilson@example.com",
        "role": "moderator",
        "status": "pending",
        "last_login": "Never",
        "date_joined": "Jan 20, 2024",
    },
    {
        "name": "Sarah Brown",
        "email": "sarah.brown@example.com",
        "role": "editor",
        "status": "inactive",
        "last_login": "3 weeks ago",
        "date_joined": "Nov 30, 2023",
    },
    {
        "name": "Robert Johnson",
        "email": "robert.johnson@example.com",
        "role": "user",
        "status": "active",
        "last_login": "5 hours ago",
        "date_joined": "Oct 12, 2023",
    },
    {
        "name": "Emily Chen",
        "email": "emily.chen@example.com",
        "role": "user",
        "status": "active",
        "last_login": "30 minutes ago",
        "date_joined": "Feb 3, 2024",
    },
    {
        "name": "David Miller",
        "email": "david.miller@example.com",
        "role": "admin",
        "status": "active",
        "last_login": "1 hour ago",
        "date_joined": "Sep 15, 2023",
    },
    {
        "name": "Lisa Garcia",
        "email": "lisa.garcia@example.com",
        "role": "editor",
        "status": "inactive",
        "last_login": "1 week ago",
        "date_joined": "Nov 22, 2023",
    },
    {
        "name": "Tom Anderson",
        "email": "tom.anderson@example.com",
        "role": "moderator",
        "status": "pending",
        "last_login": "Never",
        "date_joined": "Feb 10, 2024",
    },
    {
        "name": "Maria Rodriguez",
        "email": "maria.rodriguez@example.com",
        "role": "user",
        "status": "active",
        "last_login": "3 hours ago",
        "date_joined": "Jan 5, 2024",
    },
    {
        "name": "Kevin Thompson",
        "email": "kevin.thompson@example.com",
        "role": "user",
        "status": "inactive",
        "last_login": "2 weeks ago",
        "date_joined": "Dec 1, 2023",
    },
    {
        "name": "Anna White",
        "email": "anna.white@example.com",
        "role": "editor",
        "status": "active",
        "last_login": "6 hours ago",
        "date_joined": "Oct 28, 2023",
    },
]


def seed_store(store: UserStore, records: Iterable[Mapping[str, Any]] = SAMPLE_USERS) -> List[User]:
    """Insert ``records`` in order and return the created users."""

    created = [store.insert(**dict(record)) for record in records]
    logger.info("Seeded user store with %d user(s)", len(created))
    return created


def build_store(settings: Settings) -> UserStore:
    """Create the store described by ``settings`` and load its seed users."""

    store = UserStore(allowed_roles=settings.allowed_roles)
    if not settings.seed_enabled:
        logger.info("Seeding disabled; starting with an empty user store")
        return store

    if settings.seed_path is not None:
        records: Iterable[Mapping[str, Any]] = [
            seed.as_fields() for seed in load_seed_users(settings.seed_path)
        ]
    else:
        records = SAMPLE_USERS

    try:
        seed_store(store, records)
    except (ConflictError, ValidationError) as exc:
        raise ConfigurationError(f"Invalid seed data: {exc}") from exc
    return store


__all__ = ["SAMPLE_USERS", "build_store", "seed_store"]
