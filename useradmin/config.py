"""Configuration management for the user administration service."""
from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple

import yaml

from .errors import ConfigurationError

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8000
DEFAULT_SERVICE_URL = "http://127.0.0.1:8000"


def _env_flag(value: Optional[str], default: bool) -> bool:
    if value is None:
        return default
    return value.strip().lower() not in {"0", "false", "no", "off"}


def _env_int(value: Optional[str], default: int, *, name: str) -> int:
    if value is None or value.strip() == "":
        return default
    try:
        return int(value)
    except ValueError as exc:
        raise ConfigurationError(f"Invalid integer value {value!r} for {name}") from exc


def _env_list(value: Optional[str]) -> Optional[Tuple[str, ...]]:
    if value is None:
        return None
    items = tuple(item.strip() for item in value.split(",") if item.strip())
    return items or None


@dataclass(frozen=True)
class SeedUser:
    """A user record read from a seed file."""

    name: str
    email: str
    role: str
    status: str
    date_joined: str
    last_login: Optional[str] = None

    @staticmethod
    def from_dict(data: Mapping[str, Any]) -> "SeedUser":
        """Create a :class:`SeedUser` from raw dictionary data."""
        required_fields = {"name", "email", "role", "status", "date_joined"}
        missing = required_fields - data.keys()
        if missing:
            raise ConfigurationError(
                f"Missing required seed user fields: {', '.join(sorted(missing))}"
            )

        last_login = data.get("last_login")
        return SeedUser(
            name=str(data["name"]),
            email=str(data["email"]),
            role=str(data["role"]),
            status=str(data["status"]),
            date_joined=str(data["date_joined"]),
            last_login=str(last_login) if last_login is not None else None,
        )

    def as_fields(self) -> Dict[str, Optional[str]]:
        return {
            "name": self.name,
            "email": self.email,
            "role": self.role,
            "status": self.status,
            "date_joined": self.date_joined,
            "last_login": self.last_login,
        }


def load_seed_users(seed_path: Path) -> List[SeedUser]:
    """Load seed users from a YAML file with a top-level ``users`` list."""
    try:
        with seed_path.open("r", encoding="utf-8") as handle:
            raw = yaml.safe_load(handle) or {}
    except FileNotFoundError as exc:
        raise ConfigurationError(f"Seed file not found: {seed_path}") from exc
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Seed file {seed_path} is not valid YAML: {exc}") from exc

    if not isinstance(raw, Mapping):
        raise ConfigurationError("Seed file must contain a mapping with a 'users' key")

    users_raw = raw.get("users")
    if users_raw is None:
        return []
    if not isinstance(users_raw, list):
        raise ConfigurationError("The 'users' key of a seed file must hold a list")

    seeds: List[SeedUser] = []
    for item in users_raw:
        if not isinstance(item, Mapping):
            raise ConfigurationError("Each seed user must be a mapping of fields")
        seeds.append(SeedUser.from_dict(item))
    return seeds


def resolve_seed_path(env_value: Optional[str]) -> Optional[Path]:
    """Resolve the seed file path, or ``None`` to use the built-in sample users."""
    if env_value is None or env_value.strip() == "":
        return None
    return Path(env_value).expanduser().resolve(strict=False)


@dataclass(frozen=True)
class Settings:
    """Runtime settings for the service and its command line tools."""

    seed_enabled: bool = True
    seed_path: Optional[Path] = None
    allowed_roles: Optional[Tuple[str, ...]] = None
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    service_url: str = DEFAULT_SERVICE_URL


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Load settings from environment variables."""

    env = os.environ if environ is None else environ

    host = env.get("USERADMIN_HOST", DEFAULT_HOST).strip() or DEFAULT_HOST
    service_url = (
        env.get("USERADMIN_SERVICE_URL", DEFAULT_SERVICE_URL).strip().rstrip("/")
        or DEFAULT_SERVICE_URL
    )

    return Settings(
        seed_enabled=_env_flag(env.get("USERADMIN_SEED"), True),
        seed_path=resolve_seed_path(env.get("USERADMIN_SEED_PATH")),
        allowed_roles=_env_list(env.get("USERADMIN_ALLOWED_ROLES")),
        host=host,
        port=_env_int(env.get("USERADMIN_PORT"), DEFAULT_PORT, name="USERADMIN_PORT"),
        service_url=service_url,
    )


__all__ = [
    "DEFAULT_HOST",
    "DEFAULT_PORT",
    "DEFAULT_SERVICE_URL",
    "SeedUser",
    "Settings",
    "load_seed_users",
    "load_settings",
    "resolve_seed_path",
]
