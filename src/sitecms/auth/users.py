# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

from sitecms.auth.passwords import verify_password
from sitecms.errors import StorageError

DEFAULT_USERS_PATH = Path(
    os.getenv("SITECMS_USERS_PATH", str(Path(os.getenv("SITECMS_DATA_DIR", "data")) / "users.json"))
).resolve()


@dataclass(frozen=True)
class User:
    username: str
    password: str  # argon2 hash, never plaintext
    role: str
    created_at: str

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "User":
        return cls(
            username=str(raw["username"]),
            password=str(raw["password"]),
            role=str(raw.get("role") or ""),
            created_at=str(raw.get("createdAt") or ""),
        )

    def to_dict(self) -> Dict[str, str]:
        return {
            "username": self.username,
            "password": self.password,
            "role": self.role,
            "createdAt": self.created_at,
        }

    def public(self) -> Dict[str, str]:
        """Serialisable view without the password hash."""
        return {"username": self.username, "role": self.role, "createdAt": self.created_at}


def get_users(*, path: Path = DEFAULT_USERS_PATH) -> List[User]:
    """Read the whole users file. The returned list is a private copy."""
    try:
        raw = json.loads(Path(path).read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        raise StorageError(f"Cannot read users file {path}: {e}") from e
    if not isinstance(raw, list):
        raise StorageError(f"Users file {path} must contain a JSON array")
    try:
        return [User.from_dict(u) for u in raw]
    except (KeyError, TypeError, AttributeError) as e:
        raise StorageError(f"Malformed user entry in {path}: {e}") from e


def save_users(users: List[User], *, path: Path = DEFAULT_USERS_PATH) -> None:
    # Plain overwrite, no rename: a crash mid-write can leave a truncated file.
    payload = json.dumps([u.to_dict() for u in users], indent=2, ensure_ascii=False)
    try:
        Path(path).write_text(payload, encoding="utf-8")
    except OSError as e:
        raise StorageError(f"Cannot write users file {path}: {e}") from e


def find_user(users: List[User], username: str) -> Optional[User]:
    for u in users:
        if u.username == username:
            return u
    return None


def authenticate(username: str, password: str, *, path: Path = DEFAULT_USERS_PATH) -> Optional[User]:
    u = find_user(get_users(path=path), username)
    if not u:
        return None
    if not verify_password(u.password, password):
        return None
    return u
