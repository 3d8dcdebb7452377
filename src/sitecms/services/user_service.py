# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""User management on top of the credential store.

The store only reads and writes the file; uniqueness and the admin rules
live here:
- usernames are unique
- at least one "admin" must remain
- nobody deletes the account they are logged in with
"""

from __future__ import annotations

import logging
from dataclasses import replace
from pathlib import Path
from typing import Dict, List, Optional

from sitecms.auth.passwords import hash_password
from sitecms.auth.users import User, find_user, get_users, save_users
from sitecms.core.utils import now_iso
from sitecms.errors import ConflictError, ForbiddenError, NotFoundError

logger = logging.getLogger(__name__)

ADMIN_ROLE = "admin"


def list_public_users(*, path: Path) -> List[Dict[str, str]]:
    return [u.public() for u in get_users(path=path)]


def create_user(*, path: Path, username: str, password: str, role: str) -> User:
    users = get_users(path=path)
    if find_user(users, username):
        raise ConflictError("Username already exists")
    user = User(username=username, password=hash_password(password), role=role, created_at=now_iso())
    users.append(user)
    save_users(users, path=path)
    logger.info("Created user %s (role=%s)", username, role)
    return user


def update_user(*, path: Path, username: str, password: Optional[str] = None, role: Optional[str] = None) -> User:
    """Change password and/or role. Empty values leave the field untouched."""
    users = get_users(path=path)
    for i, u in enumerate(users):
        if u.username != username:
            continue
        updated = u
        if password:
            updated = replace(updated, password=hash_password(password))
        if role:
            updated = replace(updated, role=role)
        users[i] = updated
        save_users(users, path=path)
        logger.info("Updated user %s", username)
        return updated
    raise NotFoundError("User not found")


def delete_user(*, path: Path, username: str, current_user: str) -> None:
    if username == current_user:
        raise ForbiddenError("Cannot delete yourself")

    users = get_users(path=path)
    target = find_user(users, username)
    if not target:
        raise NotFoundError("User not found")

    if target.role == ADMIN_ROLE:
        admins = sum(1 for u in users if u.role == ADMIN_ROLE)
        if admins <= 1:
            raise ForbiddenError("Cannot delete the last admin")

    save_users([u for u in users if u.username != username], path=path)
    logger.info("Deleted user %s (by %s)", username, current_user)


def upsert_user(*, path: Path, username: str, password: str, role: str) -> User:
    """Add or replace a user, creating the users file if needed.

    Used for provisioning from the command line, where there is no session.
    """
    users = get_users(path=path) if Path(path).exists() else []
    user = User(username=username, password=hash_password(password), role=role, created_at=now_iso())
    existing = find_user(users, username)
    if existing:
        user = replace(user, created_at=existing.created_at)
        users = [user if u.username == username else u for u in users]
    else:
        users.append(user)
    Path(path).parent.mkdir(parents=True, exist_ok=True)
    save_users(users, path=path)
    return user
