import httpx
from fastapi.testclient import TestClient

import main
from main import _build_list_params, _list_users, _parse_args
from useradmin.api import create_app
from useradmin.config import Settings


def test_default_command_invokes_serve() -> None:
    args = _parse_args([])
    assert args.command == "serve"
    assert args.port == 8000


def test_default_command_accepts_options_without_subcommand() -> None:
    args = _parse_args(["--host", "0.0.0.0", "--port", "8080"])
    assert args.command == "serve"
    assert args.host == "0.0.0.0"
    assert args.port == 8080


def test_serve_defaults_follow_settings() -> None:
    args = _parse_args(["serve"], Settings(host="10.0.0.5", port=9100))
    assert args.host == "10.0.0.5"
    assert args.port == 9100


def test_list_subcommand_collects_filters() -> None:
    args = _parse_args(["list", "--status", "active", "--page-size", "5", "--search", "chen"])

    assert args.command == "list"
    assert _build_list_params(args) == {"search": "chen", "status": "active", "pageSize": 5}


def test_list_users_renders_table(monkeypatch, capsys) -> None:
    app = create_app(settings=Settings())

    with TestClient(app) as client:
        def fake_get(url, params=None, timeout=None):
            assert url == "http://admin.test/api/users"
            return client.get("/api/users", params=params)

        monkeypatch.setattr(main.httpx, "get", fake_get)
        exit_code = _list_users("http://admin.test/", {"status": "active", "pageSize": 5})

    output = capsys.readouterr().out
    assert exit_code == 0
    assert "John Smith" in output
    assert "Emily Chen" in output
    assert "Anna White" not in output
    assert "Page 1 of 2 (7 matching user(s))" in output


def test_list_users_reports_empty_page(monkeypatch, capsys) -> None:
    app = create_app(settings=Settings())

    with TestClient(app) as client:
        monkeypatch.setattr(
            main.httpx,
            "get",
            lambda url, params=None, timeout=None: client.get("/api/users", params=params),
        )
        exit_code = _list_users("http://admin.test", {"page": 7})

    assert exit_code == 0
    assert "No users on this page (12 matching user(s))." in capsys.readouterr().out


def test_list_users_reports_service_errors(monkeypatch, capsys) -> None:
    def fake_get(url, params=None, timeout=None):
        return httpx.Response(
            400,
            json={"message": "Invalid query parameters"},
            request=httpx.Request("GET", url),
        )

    monkeypatch.setattr(main.httpx, "get", fake_get)

    assert _list_users("http://admin.test", {"page": 0}) == 1
    assert "Service responded with 400: Invalid query parameters" in capsys.readouterr().out


def test_list_users_reports_connection_errors(monkeypatch, capsys) -> None:
    def fake_get(url, params=None, timeout=None):
        raise httpx.ConnectError("connection refused", request=httpx.Request("GET", url))

    monkeypatch.setattr(main.httpx, "get", fake_get)

    assert _list_users("http://admin.test", {}) == 1
    assert "Failed to contact user administration service" in capsys.readouterr().out
