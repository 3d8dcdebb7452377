# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Admin gate: which paths need a session and what happens without one.

| path class | valid session | result                      |
|------------|---------------|-----------------------------|
| neither    | -             | forwarded                   |
| page       | yes / no      | forwarded / redirect login  |
| api        | yes / no      | forwarded / 401 JSON        |
"""

from __future__ import annotations

import os
from typing import Optional

from fastapi import Request
from fastapi.responses import JSONResponse, RedirectResponse

from sitecms.auth.session import COOKIE_NAME, SessionRegistry
from sitecms.errors import AuthError

ADMIN_PAGE = "page"
ADMIN_API = "api"

LOGIN_PAGE = "/admin/login/"


def classify_path(path: str) -> Optional[str]:
    if path == "/api/admin" or path.startswith("/api/admin/"):
        return ADMIN_API
    if (path == "/admin" or path.startswith("/admin/")) and not path.startswith("/admin/login"):
        return ADMIN_PAGE
    return None


def session_token(request: Request) -> str:
    return request.cookies.get(COOKIE_NAME, "")


def _sessions(request: Request) -> SessionRegistry:
    return request.app.state.sessions


def current_username(request: Request) -> Optional[str]:
    return _sessions(request).validate(session_token(request))


def require_session(request: Request) -> str:
    """Dependency for admin routes; checked again even behind the gate."""
    username = current_username(request)
    if not username:
        raise AuthError()
    return username


async def auth_gate(request: Request, call_next):
    kind = classify_path(request.url.path)
    if kind is None:
        return await call_next(request)

    username = current_username(request)
    if username:
        request.state.user = username
        return await call_next(request)

    if kind == ADMIN_API:
        return JSONResponse({"success": False, "error": "Unauthorized"}, status_code=401)
    return RedirectResponse(url=LOGIN_PAGE, status_code=302)


def cookie_settings() -> dict:
    secure = os.getenv("SITECMS_COOKIE_SECURE", "true").lower() in {"1", "true", "yes", "y"}
    return {"path": "/", "httponly": True, "samesite": "lax", "secure": secure}
