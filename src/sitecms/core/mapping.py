# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Mapping between content types and their directories on disk.

JSON content types share one layout (``<content_dir>/<type>/<id>.json``);
posts are Markdown files under ``<content_dir>/posts``.
"""

from __future__ import annotations

from pathlib import Path
from typing import List

VALID_TYPES: List[str] = [
    "projects",
    "skills",
    "timeline",
    "friends",
    "diary",
    "albums",
    "navigation",
]

JSON_SUFFIX = ".json"
MARKDOWN_SUFFIX = ".md"
POSTS_DIR_NAME = "posts"


def is_valid_type(content_type: str) -> bool:
    return content_type in VALID_TYPES


def type_root(content_dir: Path, content_type: str) -> Path:
    return Path(content_dir) / content_type


def posts_root(content_dir: Path) -> Path:
    return Path(content_dir) / POSTS_DIR_NAME
