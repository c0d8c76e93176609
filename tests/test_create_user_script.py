"""Tests for the create-user helper script."""

from __future__ import annotations

from fastapi.testclient import TestClient

import scripts.create_user as create_user_script
from useradmin.api import create_app
from useradmin.config import Settings


def _patch_post(monkeypatch, client: TestClient, calls: list) -> None:
    def fake_post(url, json=None, timeout=None):
        calls.append(url)
        return client.post("/api/users", json=json)

    monkeypatch.setattr(create_user_script.httpx, "post", fake_post)


def test_build_payload_uses_api_field_names() -> None:
    args = create_user_script.parse_args(
        [" Grace Hopper ", "grace@example.com", "--role", "admin", "--date-joined", "Mar 9, 2024"]
    )

    assert create_user_script.build_payload(args) == {
        "name": "Grace Hopper",
        "email": "grace@example.com",
        "role": "admin",
        "status": "pending",
        "lastLogin": None,
        "dateJoined": "Mar 9, 2024",
    }


def test_creates_user_through_service(monkeypatch, capsys) -> None:
    calls: list = []
    app = create_app(settings=Settings())

    with TestClient(app) as client:
        _patch_post(monkeypatch, client, calls)
        exit_code = create_user_script.main(
            [
                "Grace Hopper",
                "grace@example.com",
                "--role",
                "admin",
                "--status",
                "active",
                "--date-joined",
                "Mar 9, 2024",
                "--service-url",
                "http://admin.test/",
            ]
        )

    assert exit_code == 0
    assert calls == ["http://admin.test/api/users"]
    assert "Created user #13: Grace Hopper <grace@example.com> [admin, active]" in capsys.readouterr().out
    assert app.state.store.get(13).email == "grace@example.com"


def test_duplicate_email_exits_with_error(monkeypatch, capsys) -> None:
    calls: list = []
    app = create_app(settings=Settings())

    with TestClient(app) as client:
        _patch_post(monkeypatch, client, calls)
        exit_code = create_user_script.main(
            ["John Again", "john.smith@example.com", "--role", "user", "--date-joined", "Apr 1, 2024"]
        )

    assert exit_code == 1
    assert "Error (409): Email already exists" in capsys.readouterr().err
    assert len(app.state.store) == 12
