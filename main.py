"""Command-line interface for the user administration service."""

from __future__ import annotations
import argparse
import logging
import sys
from typing import Any, Dict, List, Mapping, Sequence

try:
    import httpx
except ImportError as exc:  # pragma: no cover - exercised in environments missing deps
    raise SystemExit(
        "The 'httpx' package is required. Run `pip install -e .` to install dependencies."
    ) from exc

from useradmin.config import Settings, load_settings

logger = logging.getLogger("useradmin.main")


def _parse_args(argv: Sequence[str] | None, settings: Settings | None = None) -> argparse.Namespace:
    defaults = settings or Settings()

    parser = argparse.ArgumentParser(description="User administration service utilities")
    subparsers = parser.add_subparsers(dest="command")

    parser.set_defaults(command="serve")

    serve_parser = subparsers.add_parser("serve", help="Start the HTTP API")
    serve_parser.add_argument("--host", default=defaults.host, help="Bind address for the API")
    serve_parser.add_argument(
        "--port",
        type=int,
        default=defaults.port,
        help=f"Port for the HTTP API (default: {defaults.port})",
    )

    list_parser = subparsers.add_parser(
        "list", help="Print a page of users from a running service"
    )
    list_parser.add_argument(
        "--service-url",
        default=defaults.service_url,
        help=f"Base URL of a running service (default: {defaults.service_url})",
    )
    list_parser.add_argument("--search", default=None, help="Match name, email, or role")
    list_parser.add_argument("--status", default=None, help="Only show users with this status")
    list_parser.add_argument("--role", default=None, help="Only show users with this role")
    list_parser.add_argument("--page", type=int, default=None, help="Page number (from 1)")
    list_parser.add_argument(
        "--page-size", type=int, default=None, help="Users per page (1-100)"
    )

    args_list = list(argv) if argv is not None else sys.argv[1:]
    known_commands = {"serve", "list"}

    if not args_list:
        args_list = ["serve"]
    else:
        first = args_list[0]
        if first in ("-h", "--help"):
            return parser.parse_args(args_list)
        if first not in known_commands:
            if any(flag in args_list for flag in ("-h", "--help")):
                return parser.parse_args(args_list)
            args_list = ["serve", *args_list]

    return parser.parse_args(args_list)


def _serve(*, settings: Settings, host: str, port: int) -> None:
    from useradmin.api import create_app
    import uvicorn

    logger.info("Starting user administration API on http://%s:%s", host, port)

    app = create_app(settings=settings)
    uvicorn.run(app, host=host, port=port, log_level="info")


def _build_list_params(args: argparse.Namespace) -> Dict[str, Any]:
    params: Dict[str, Any] = {}
    for key, value in (
        ("search", args.search),
        ("status", args.status),
        ("role", args.role),
        ("page", args.page),
        ("pageSize", args.page_size),
    ):
        if value is not None:
            params[key] = value
    return params


def _print_users(payload: Mapping[str, Any]) -> None:
    users: List[Mapping[str, Any]] = payload.get("users", [])
    total = payload.get("total", 0)

    if not users:
        print(f"No users on this page ({total} matching user(s)).")
        return

    print(f"{'ID':>4}  {'Name':<20}  {'Email':<32}  {'Role':<10}  {'Status':<8}  Last login")
    print("-" * 96)
    for user in users:
        last_login = user.get("lastLogin") or "-"
        print(
            f"{user['id']:>4}  {user['name']:<20}  {user['email']:<32}  "
            f"{user['role']:<10}  {user['status']:<8}  {last_login}"
        )
    print(
        f"\nPage {payload.get('page')} of {payload.get('totalPages')} "
        f"({total} matching user(s))"
    )


def _list_users(service_url: str, params: Mapping[str, Any]) -> int:
    endpoint = service_url.rstrip("/") + "/api/users"

    try:
        response = httpx.get(endpoint, params=dict(params), timeout=10.0)
    except httpx.HTTPError as exc:
        print(f"Failed to contact user administration service: {exc}")
        return 1

    if response.status_code != 200:
        try:
            message = response.json().get("message", response.text.strip())
        except ValueError:
            message = response.text.strip()
        print(f"Service responded with {response.status_code}: {message}")
        return 1

    try:
        payload = response.json()
    except ValueError:
        print("Service returned an unexpected response format.")
        return 1

    _print_users(payload)
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point for CLI usage."""

    logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(levelname)s] %(message)s")

    settings = load_settings()
    args = _parse_args(argv, settings)

    if args.command == "serve":
        _serve(settings=settings, host=args.host, port=args.port)
        return 0
    if args.command == "list":
        return _list_users(args.service_url, _build_list_params(args))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
