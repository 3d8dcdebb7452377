# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""File-backed content items.

Every item lives at ``<root>/<id><suffix>``; ``id`` may contain ``/`` to nest
items in subdirectories. All paths go through ``resolve_item_path`` before the
filesystem is touched. There is no locking: concurrent writers to one file
race and the last one wins.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Callable, List, Optional, Tuple

from sitecms.errors import ConflictError, NotFoundError, PathTraversalError, StorageError

logger = logging.getLogger(__name__)

Parser = Callable[[str], Any]


def resolve_item_path(root: Path, item_id: str, suffix: str = "") -> str:
    """Return the absolute path of ``item_id`` under ``root`` or raise PathTraversalError.

    Purely lexical (no symlink resolution, no stat): the check runs before any
    filesystem access.
    """
    if not isinstance(item_id, str) or "\x00" in item_id:
        raise PathTraversalError()
    base = os.path.abspath(str(root))
    candidate = os.path.normpath(os.path.join(base, f"{item_id}{suffix}"))
    if candidate == base or candidate.startswith(base + os.sep):
        return candidate
    raise PathTraversalError()


def _require_inside(root: Path, item_id: str, suffix: str) -> str:
    if not item_id:
        raise PathTraversalError()
    path = resolve_item_path(root, item_id, suffix)
    if path == os.path.abspath(str(root)):
        # The root itself is never an item.
        raise PathTraversalError()
    return path


def _reject_constant(name: str) -> Any:
    raise ValueError(f"Non-finite number {name} is not valid JSON")


def load_json(raw: str) -> Any:
    """Strict JSON: NaN and Infinity are rejected like any other syntax error."""
    return json.loads(raw, parse_constant=_reject_constant)


def dump_json(data: Any) -> str:
    """Raises ValueError on NaN or infinite floats."""
    return json.dumps(data, indent=2, ensure_ascii=False, allow_nan=False)


def list_recursive(root: Path, suffix: str, parser: Parser) -> List[Tuple[str, Optional[Any]]]:
    """Walk ``root`` and return (id, parsed content) for every ``*suffix`` file.

    A file that cannot be read or parsed is reported with ``None`` content
    instead of failing the whole listing.
    """
    base = Path(root)
    out: List[Tuple[str, Optional[Any]]] = []
    if not base.is_dir():
        return out

    def walk(directory: Path, prefix: str) -> None:
        try:
            entries = sorted(os.scandir(directory), key=lambda e: e.name)
        except OSError as e:
            logger.warning("Cannot list content directory %s: %s", directory, e)
            return
        # Symlinks are neither walked nor read.
        for entry in entries:
            if entry.is_dir(follow_symlinks=False):
                walk(Path(entry.path), f"{prefix}{entry.name}/")
            elif entry.is_file(follow_symlinks=False) and entry.name.endswith(suffix):
                item_id = prefix + entry.name[: -len(suffix)]
                try:
                    content = parser(Path(entry.path).read_text(encoding="utf-8"))
                except Exception as e:
                    logger.warning("Unparsable content file %s: %s", entry.path, e)
                    content = None
                out.append((item_id, content))

    walk(base, "")
    return out


def read_item(root: Path, item_id: str, suffix: str, parser: Parser, label: str = "Content item") -> Any:
    path = _require_inside(root, item_id, suffix)
    if not os.path.isfile(path):
        raise NotFoundError(f"{label} not found")
    try:
        with open(path, encoding="utf-8") as fh:
            raw = fh.read()
    except (OSError, UnicodeDecodeError) as e:
        raise StorageError(f"Cannot read {path}: {e}") from e
    try:
        return parser(raw)
    except Exception as e:
        raise StorageError(f"Unparsable content file {path}: {e}") from e


def create_item(root: Path, item_id: str, suffix: str, text: str, label: str = "Content item") -> str:
    path = _require_inside(root, item_id, suffix)
    if os.path.exists(path):
        raise ConflictError(f"{label} already exists")
    try:
        os.makedirs(os.path.dirname(path), exist_ok=True)
        with open(path, "w", encoding="utf-8") as fh:
            fh.write(text)
    except OSError as e:
        raise StorageError(f"Cannot write {path}: {e}") from e
    return path


def update_item(root: Path, item_id: str, suffix: str, text: str, label: str = "Content item") -> str:
    path = _require_inside(root, item_id, suffix)
    if not os.path.isfile(path):
        raise NotFoundError(f"{label} not found")
    try:
        with open(path, "w", encoding="utf-8") as fh:
            fh.write(text)
    except OSError as e:
        raise StorageError(f"Cannot write {path}: {e}") from e
    return path


def delete_item(root: Path, item_id: str, suffix: str, label: str = "Content item") -> str:
    path = _require_inside(root, item_id, suffix)
    if not os.path.isfile(path):
        raise NotFoundError(f"{label} not found")
    try:
        os.unlink(path)
    except OSError as e:
        raise StorageError(f"Cannot delete {path}: {e}") from e
    return path
