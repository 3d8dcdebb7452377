# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Request bodies, one model per endpoint/verb.

Required strings must be non-empty; ``data`` is required but may be null.
"""

from __future__ import annotations

from typing import Annotated, Any, Dict, Optional

from pydantic import BaseModel, Field

NonEmptyStr = Annotated[str, Field(min_length=1)]


class LoginRequest(BaseModel):
    username: NonEmptyStr
    password: NonEmptyStr


class CreateUserRequest(BaseModel):
    username: NonEmptyStr
    password: NonEmptyStr
    role: NonEmptyStr


class UpdateUserRequest(BaseModel):
    username: NonEmptyStr
    password: Optional[str] = None
    role: Optional[str] = None


class DeleteUserRequest(BaseModel):
    username: NonEmptyStr


class ContentWriteRequest(BaseModel):
    type: NonEmptyStr
    id: NonEmptyStr
    data: Any


class ContentDeleteRequest(BaseModel):
    type: NonEmptyStr
    id: NonEmptyStr


class PostWriteRequest(BaseModel):
    id: NonEmptyStr
    frontmatter: Dict[str, Any]
    content: str


class PostDeleteRequest(BaseModel):
    id: NonEmptyStr
