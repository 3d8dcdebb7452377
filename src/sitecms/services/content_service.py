# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""CRUD over site content.

JSON items are addressed by (type, id) under ``<content_dir>/<type>``; posts
are Markdown documents under ``<content_dir>/posts``. Type checks happen here,
path safety in ``content_repo``.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List

from sitecms.core.frontmatter import parse_frontmatter, serialize_frontmatter
from sitecms.core.mapping import JSON_SUFFIX, MARKDOWN_SUFFIX, VALID_TYPES, is_valid_type, posts_root, type_root
from sitecms.errors import ValidationError
from sitecms.infra import content_repo

logger = logging.getLogger(__name__)


def _json_root(content_dir: Path, content_type: str) -> Path:
    if not is_valid_type(content_type):
        raise ValidationError(f"Invalid type. Must be one of: {', '.join(VALID_TYPES)}")
    return type_root(content_dir, content_type)


def _dump_json(data: Any) -> str:
    try:
        return content_repo.dump_json(data)
    except ValueError:
        raise ValidationError("data must not contain NaN or Infinity")


def _dump_post(frontmatter: Dict[str, Any], content: str) -> str:
    try:
        return serialize_frontmatter(frontmatter, content)
    except ValueError:
        raise ValidationError("frontmatter must not contain NaN or Infinity")


# ------------------ JSON content ------------------


def list_content(*, content_dir: Path, content_type: str) -> List[Dict[str, Any]]:
    root = _json_root(content_dir, content_type)
    return [{"id": item_id, "data": data} for item_id, data in content_repo.list_recursive(root, JSON_SUFFIX, content_repo.load_json)]


def get_content(*, content_dir: Path, content_type: str, item_id: str) -> Dict[str, Any]:
    root = _json_root(content_dir, content_type)
    return {"id": item_id, "data": content_repo.read_item(root, item_id, JSON_SUFFIX, content_repo.load_json)}


def create_content(*, content_dir: Path, content_type: str, item_id: str, data: Any) -> str:
    root = _json_root(content_dir, content_type)
    content_repo.create_item(root, item_id, JSON_SUFFIX, _dump_json(data))
    logger.info("Created %s/%s", content_type, item_id)
    return item_id


def update_content(*, content_dir: Path, content_type: str, item_id: str, data: Any) -> str:
    root = _json_root(content_dir, content_type)
    content_repo.update_item(root, item_id, JSON_SUFFIX, _dump_json(data))
    logger.info("Updated %s/%s", content_type, item_id)
    return item_id


def delete_content(*, content_dir: Path, content_type: str, item_id: str) -> None:
    root = _json_root(content_dir, content_type)
    content_repo.delete_item(root, item_id, JSON_SUFFIX)
    logger.info("Deleted %s/%s", content_type, item_id)


def count_by_type(*, content_dir: Path) -> Dict[str, int]:
    return {t: len(list_content(content_dir=content_dir, content_type=t)) for t in VALID_TYPES}


# ------------------ Posts (Markdown) ------------------


def _post_view(item_id: str, parsed: Any) -> Dict[str, Any]:
    if parsed is None:
        return {"id": item_id, "content": ""}
    frontmatter, body = parsed
    return {**frontmatter, "id": item_id, "content": body}


def list_posts(*, content_dir: Path) -> List[Dict[str, Any]]:
    items = content_repo.list_recursive(posts_root(content_dir), MARKDOWN_SUFFIX, parse_frontmatter)
    return [_post_view(item_id, parsed) for item_id, parsed in items]


def get_post(*, content_dir: Path, item_id: str) -> Dict[str, Any]:
    parsed = content_repo.read_item(posts_root(content_dir), item_id, MARKDOWN_SUFFIX, parse_frontmatter, label="Post")
    frontmatter, body = parsed
    return {"id": item_id, "frontmatter": frontmatter, "content": body}


def create_post(*, content_dir: Path, item_id: str, frontmatter: Dict[str, Any], content: str) -> str:
    text = _dump_post(frontmatter, content)
    content_repo.create_item(posts_root(content_dir), item_id, MARKDOWN_SUFFIX, text, label="Post")
    logger.info("Created post %s", item_id)
    return item_id


def update_post(*, content_dir: Path, item_id: str, frontmatter: Dict[str, Any], content: str) -> str:
    text = _dump_post(frontmatter, content)
    content_repo.update_item(posts_root(content_dir), item_id, MARKDOWN_SUFFIX, text, label="Post")
    logger.info("Updated post %s", item_id)
    return item_id


def delete_post(*, content_dir: Path, item_id: str) -> None:
    content_repo.delete_item(posts_root(content_dir), item_id, MARKDOWN_SUFFIX, label="Post")
    logger.info("Deleted post %s", item_id)
