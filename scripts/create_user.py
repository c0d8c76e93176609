import argparse
import sys
from pathlib import Path

import httpx

ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from useradmin.config import load_settings
from useradmin.models import UserStatus


def parse_args(argv=None) -> argparse.Namespace:
    settings = load_settings()
    parser = argparse.ArgumentParser(description="Create a user through a running admin service")
    parser.add_argument("name", help="Display name for the user")
    parser.add_argument("email", help="Unique email address")
    parser.add_argument("--role", required=True, help="Role tag, e.g. admin, user, editor")
    parser.add_argument(
        "--status",
        default=UserStatus.PENDING.value,
        choices=[member.value for member in UserStatus],
        help="Initial account status (default: pending)",
    )
    parser.add_argument("--date-joined", required=True, help="Display date, e.g. 'Feb 3, 2024'")
    parser.add_argument("--last-login", default=None, help="Display text for the last login")
    parser.add_argument(
        "--service-url",
        default=settings.service_url,
        help="Base URL of the service (defaults to USERADMIN_SERVICE_URL)",
    )
    return parser.parse_args(argv)


def build_payload(args: argparse.Namespace) -> dict:
    return {
        "name": args.name.strip(),
        "email": args.email.strip(),
        "role": args.role.strip(),
        "status": args.status,
        "lastLogin": args.last_login,
        "dateJoined": args.date_joined.strip(),
    }


def main(argv=None) -> int:
    args = parse_args(argv)
    endpoint = args.service_url.rstrip("/") + "/api/users"

    try:
        response = httpx.post(endpoint, json=build_payload(args), timeout=10.0)
    except httpx.HTTPError as exc:
        print(f"Error: failed to contact {endpoint}: {exc}", file=sys.stderr)
        return 1

    if response.status_code != 201:
        try:
            message = response.json().get("message", response.text)
        except ValueError:
            message = response.text
        print(f"Error ({response.status_code}): {message}", file=sys.stderr)
        return 1

    user = response.json()
    print(f"Created user #{user['id']}: {user['name']} <{user['email']}> [{user['role']}, {user['status']}]")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
