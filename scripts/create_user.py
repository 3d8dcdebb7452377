#!/usr/bin/env python3
from __future__ import annotations

from getpass import getpass

from sitecms.auth.users import DEFAULT_USERS_PATH
from sitecms.services.user_service import upsert_user

USERS_PATH = DEFAULT_USERS_PATH


def main() -> None:
    username = input("Username: ").strip()
    if not username:
        raise SystemExit("Username is required")
    role = input("Role [admin]: ").strip() or "admin"

    pw1 = getpass("Password: ")
    pw2 = getpass("Repeat password: ")
    if pw1 != pw2:
        raise SystemExit("Passwords do not match")
    if not pw1:
        raise SystemExit("Password is required")

    upsert_user(path=USERS_PATH, username=username, password=pw1, role=role)
    print(f"OK -> {USERS_PATH}")


if __name__ == "__main__":
    main()
