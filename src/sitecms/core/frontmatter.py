# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Markdown documents with a YAML frontmatter block.

    ---
    title: Hello
    tags: [a, b]
    ---
    Body text...

Serialisation is canonical (``yaml.safe_dump``), so parse -> serialise keeps
keys, values and body but not the original formatting.
"""

from __future__ import annotations

import math
import re
from typing import Any, Dict, Tuple

import yaml

DELIMITER = "---"

_FRONTMATTER_RE = re.compile(r"\A---\r?\n(.*?)\r?\n---(?:\r?\n|\Z)(.*)\Z", re.DOTALL)


def _ensure_finite(value: Any) -> None:
    """Reject NaN and infinities anywhere in the block; they have no JSON form."""
    if isinstance(value, float) and not math.isfinite(value):
        raise ValueError("Frontmatter contains a non-finite number")
    if isinstance(value, dict):
        for v in value.values():
            _ensure_finite(v)
    elif isinstance(value, (list, tuple)):
        for v in value:
            _ensure_finite(v)


def parse_frontmatter(raw: str) -> Tuple[Dict[str, Any], str]:
    """Split ``raw`` into (frontmatter, body).

    A document without a leading ``---`` block has no frontmatter. Raises
    ``yaml.YAMLError`` or ``ValueError`` when the block is not a YAML mapping or holds
    NaN/infinite numbers.
    """
    m = _FRONTMATTER_RE.match(raw)
    if not m:
        return {}, raw
    data = yaml.safe_load(m.group(1))
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ValueError("Frontmatter must be a mapping")
    _ensure_finite(data)
    return data, m.group(2)


def serialize_frontmatter(frontmatter: Dict[str, Any], body: str) -> str:
    _ensure_finite(frontmatter)
    dumped = yaml.safe_dump(
        frontmatter or {},
        sort_keys=False,
        allow_unicode=True,
        default_flow_style=False,
        width=float("inf"),
    ).rstrip()
    if dumped == "{}":
        dumped = ""
    return f"{DELIMITER}\n{dumped}\n{DELIMITER}\n{body}"
