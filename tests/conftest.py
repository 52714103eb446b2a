from __future__ import annotations

import os

import pytest
from fastapi.testclient import TestClient

from licdash.server.core import DashboardServer

SECRET = b"0123456789abcdef" * 4
USERNAME = "admin"
PASSWORD = "supersecret"


@pytest.fixture(autouse=True)
def clean_env(monkeypatch) -> None:
    for name in list(os.environ):
        if name.startswith("LICDASH_"):
            monkeypatch.delenv(name)


@pytest.fixture
def secret_key() -> bytes:
    return SECRET


@pytest.fixture
def server(tmp_path, secret_key) -> DashboardServer:
    """Server over the sample dataset with revocations persisted under tmp_path."""
    return DashboardServer(
        secret_key=secret_key,
        admin_username=USERNAME,
        admin_password=PASSWORD,
        revoked_licenses_file_path=tmp_path / "revoked.json",
    )


@pytest.fixture
def client(server) -> TestClient:
    return TestClient(server.app)


@pytest.fixture
def token(client) -> str:
    response = client.post("/login", json={"username": USERNAME, "password": PASSWORD})
    assert response.status_code == 200  # noqa: PLR2004
    client.cookies.clear()
    return response.json()["token"]


@pytest.fixture
def auth_headers(token) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}
