# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Type, TypeVar

from fastapi import Depends, FastAPI, Query, Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import HTMLResponse, JSONResponse, RedirectResponse
from fastapi.templating import Jinja2Templates
from pydantic import BaseModel
from pydantic import ValidationError as ModelValidationError
from starlette.concurrency import run_in_threadpool

from sitecms.auth.session import COOKIE_NAME, SESSION_TTL_SECONDS, SessionRegistry
from sitecms.auth.users import authenticate
from sitecms.errors import CmsError, ValidationError, client_message
from sitecms.infra.content_repo import load_json
from sitecms.permissions import LOGIN_PAGE, auth_gate, cookie_settings, current_username, require_session
from sitecms.schemas import (
    ContentDeleteRequest,
    ContentWriteRequest,
    CreateUserRequest,
    DeleteUserRequest,
    LoginRequest,
    PostDeleteRequest,
    PostWriteRequest,
    UpdateUserRequest,
)
from sitecms.services import content_service, navigation_service, user_service

logger = logging.getLogger(__name__)

BASE_DIR = Path(__file__).resolve().parent

DATA_DIR = Path(os.getenv("SITECMS_DATA_DIR", "data")).resolve()
USERS_PATH = Path(os.getenv("SITECMS_USERS_PATH", str(DATA_DIR / "users.json"))).resolve()
CONTENT_DIR = Path(os.getenv("SITECMS_CONTENT_DIR", "content")).resolve()

templates = Jinja2Templates(directory=str(BASE_DIR / "templates"))

app = FastAPI(title="sitecms")

# One registry per process; restarting drops every session.
SESSIONS = SessionRegistry()
app.state.sessions = SESSIONS

app.middleware("http")(auth_gate)


@app.middleware("http")
async def _error_boundary(request: Request, call_next):
    try:
        return await call_next(request)
    except Exception:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return _fail(500, "Internal server error")


@app.exception_handler(CmsError)
async def _cms_error(request: Request, exc: CmsError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return _fail(exc.status_code, client_message(exc))


def _fail(status_code: int, error: str) -> JSONResponse:
    return JSONResponse({"success": False, "error": error}, status_code=status_code)


def _ok(payload: dict | None = None, status_code: int = 200) -> JSONResponse:
    return JSONResponse(jsonable_encoder({"success": True, **(payload or {})}), status_code=status_code)


M = TypeVar("M", bound=BaseModel)


async def _parse(request: Request, model: Type[M]) -> M:
    """Decode and validate a JSON body before any domain logic runs."""
    try:
        payload = load_json((await request.body()).decode("utf-8"))
    except ValueError:
        raise ValidationError("Request body must be valid JSON")
    if not isinstance(payload, dict):
        raise ValidationError("Request body must be a JSON object")
    try:
        return model.model_validate(payload)
    except ModelValidationError as e:
        fields = sorted({str(err["loc"][0]) for err in e.errors() if err.get("loc")})
        raise ValidationError(f"Missing or invalid fields: {', '.join(fields)}")


def _render(request: Request, template_name: str, ctx: dict):
    base_ctx = {"current_user": getattr(request.state, "user", None)}
    return templates.TemplateResponse(request, template_name, {**base_ctx, **(ctx or {})})


# ------------------ Auth ------------------


@app.post("/api/auth/login")
async def login(request: Request):
    body = await _parse(request, LoginRequest)
    user = await run_in_threadpool(authenticate, body.username, body.password, path=USERS_PATH)
    if not user:
        logger.warning("Failed login for %r", body.username)
        return _fail(401, "Invalid username or password")

    token = SESSIONS.create(user.username)
    logger.info("Login ok for %s", user.username)
    resp = _ok({"username": user.username, "role": user.role})
    resp.set_cookie(COOKIE_NAME, token, max_age=SESSION_TTL_SECONDS, **cookie_settings())
    return resp


@app.post("/api/auth/logout")
def logout(request: Request):
    token = request.cookies.get(COOKIE_NAME)
    if token:
        SESSIONS.destroy(token)
    resp = _ok()
    resp.delete_cookie(COOKIE_NAME, **cookie_settings())
    return resp


# ------------------ Users ------------------


@app.get("/api/admin/users")
def users_list(user: str = Depends(require_session)):
    return _ok({"users": user_service.list_public_users(path=USERS_PATH)})


@app.post("/api/admin/users")
async def users_create(request: Request, user: str = Depends(require_session)):
    body = await _parse(request, CreateUserRequest)
    created = await run_in_threadpool(
        user_service.create_user, path=USERS_PATH, username=body.username, password=body.password, role=body.role
    )
    return _ok({"username": created.username, "role": created.role}, status_code=201)


@app.put("/api/admin/users")
async def users_update(request: Request, user: str = Depends(require_session)):
    body = await _parse(request, UpdateUserRequest)
    updated = await run_in_threadpool(
        user_service.update_user, path=USERS_PATH, username=body.username, password=body.password, role=body.role
    )
    return _ok({"username": updated.username, "role": updated.role})


@app.delete("/api/admin/users")
async def users_delete(request: Request, user: str = Depends(require_session)):
    body = await _parse(request, DeleteUserRequest)
    user_service.delete_user(path=USERS_PATH, username=body.username, current_user=user)
    return _ok()


# ------------------ Content (JSON) ------------------


@app.get("/api/admin/content")
def content_get(
    content_type: str = Query("", alias="type"),
    item_id: str = Query("", alias="id"),
    user: str = Depends(require_session),
):
    if item_id:
        item = content_service.get_content(content_dir=CONTENT_DIR, content_type=content_type, item_id=item_id)
        return _ok({"item": item})
    return _ok({"items": content_service.list_content(content_dir=CONTENT_DIR, content_type=content_type)})


@app.post("/api/admin/content")
async def content_create(request: Request, user: str = Depends(require_session)):
    body = await _parse(request, ContentWriteRequest)
    item_id = content_service.create_content(
        content_dir=CONTENT_DIR, content_type=body.type, item_id=body.id, data=body.data
    )
    return _ok({"id": item_id}, status_code=201)


@app.put("/api/admin/content")
async def content_update(request: Request, user: str = Depends(require_session)):
    body = await _parse(request, ContentWriteRequest)
    item_id = content_service.update_content(
        content_dir=CONTENT_DIR, content_type=body.type, item_id=body.id, data=body.data
    )
    return _ok({"id": item_id})


@app.delete("/api/admin/content")
async def content_delete(request: Request, user: str = Depends(require_session)):
    body = await _parse(request, ContentDeleteRequest)
    content_service.delete_content(content_dir=CONTENT_DIR, content_type=body.type, item_id=body.id)
    return _ok()


# ------------------ Posts (Markdown) ------------------


@app.get("/api/admin/posts")
def posts_get(item_id: str = Query("", alias="id"), user: str = Depends(require_session)):
    if item_id:
        return _ok({"post": content_service.get_post(content_dir=CONTENT_DIR, item_id=item_id)})
    return _ok({"posts": content_service.list_posts(content_dir=CONTENT_DIR)})


@app.post("/api/admin/posts")
async def posts_create(request: Request, user: str = Depends(require_session)):
    body = await _parse(request, PostWriteRequest)
    item_id = content_service.create_post(
        content_dir=CONTENT_DIR, item_id=body.id, frontmatter=body.frontmatter, content=body.content
    )
    return _ok({"id": item_id}, status_code=201)


@app.put("/api/admin/posts")
async def posts_update(request: Request, user: str = Depends(require_session)):
    body = await _parse(request, PostWriteRequest)
    item_id = content_service.update_post(
        content_dir=CONTENT_DIR, item_id=body.id, frontmatter=body.frontmatter, content=body.content
    )
    return _ok({"id": item_id})


@app.delete("/api/admin/posts")
async def posts_delete(request: Request, user: str = Depends(require_session)):
    body = await _parse(request, PostDeleteRequest)
    content_service.delete_post(content_dir=CONTENT_DIR, item_id=body.id)
    return _ok()


# ------------------ Admin pages ------------------


@app.get("/admin/login/", response_class=HTMLResponse)
def login_page(request: Request):
    if current_username(request):
        return RedirectResponse(url="/admin/", status_code=303)
    return _render(request, "login.html", {})


@app.get("/admin", response_class=HTMLResponse)
@app.get("/admin/", response_class=HTMLResponse)
def dashboard(request: Request):
    if not current_username(request):
        return RedirectResponse(url=LOGIN_PAGE, status_code=302)
    links = navigation_service.load_links(content_dir=CONTENT_DIR)
    return _render(
        request,
        "dashboard.html",
        {
            "counts": content_service.count_by_type(content_dir=CONTENT_DIR),
            "posts_count": len(content_service.list_posts(content_dir=CONTENT_DIR)),
            "nav_groups": navigation_service.ordered_groups(links),
            "nav_pinned": navigation_service.pinned(links),
        },
    )
