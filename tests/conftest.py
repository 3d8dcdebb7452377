import os
import sys
from pathlib import Path as _Path
sys.path.insert(0, str(_Path(__file__).resolve().parents[1] / "src"))

# Cheap argon2 parameters; must be set before sitecms.auth.passwords is imported.
os.environ.setdefault("SITECMS_HASH_TIME_COST", "1")
os.environ.setdefault("SITECMS_HASH_MEMORY_COST", "1024")

import importlib
import json
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from sitecms.auth.passwords import hash_password

ADMIN_PASSWORD = "admin-pass"
EDITOR_PASSWORD = "editor-pass"


@pytest.fixture()
def users_file(tmp_path: Path) -> Path:
    """users.json with one admin ("admin") and one non-admin ("editor")."""
    path = tmp_path / "data" / "users.json"
    path.parent.mkdir(parents=True, exist_ok=True)
    users = [
        {
            "username": "admin",
            "password": hash_password(ADMIN_PASSWORD),
            "role": "admin",
            "createdAt": "2026-01-01T00:00:00.000Z",
        },
        {
            "username": "editor",
            "password": hash_password(EDITOR_PASSWORD),
            "role": "editor",
            "createdAt": "2026-01-02T00:00:00.000Z",
        },
    ]
    path.write_text(json.dumps(users, indent=2), encoding="utf-8")
    return path


@pytest.fixture()
def content_dir(tmp_path: Path) -> Path:
    d = tmp_path / "content"
    d.mkdir()
    return d


@pytest.fixture()
def app_module(users_file, content_dir, monkeypatch):
    monkeypatch.setenv("SITECMS_USERS_PATH", str(users_file))
    monkeypatch.setenv("SITECMS_CONTENT_DIR", str(content_dir))

    import sitecms.app as app_module
    importlib.reload(app_module)
    return app_module


@pytest.fixture()
def client(app_module) -> TestClient:
    # https so the Secure session cookie is sent back
    return TestClient(app_module.app, base_url="https://testserver")


def login(client: TestClient, username: str = "admin", password: str = ADMIN_PASSWORD):
    return client.post("/api/auth/login", json={"username": username, "password": password})


@pytest.fixture()
def admin_client(client) -> TestClient:
    r = login(client)
    assert r.status_code == 200
    return client
