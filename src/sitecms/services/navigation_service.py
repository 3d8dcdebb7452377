# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from sitecms.services.content_service import list_content

UNCATEGORIZED = "uncategorized"


@dataclass(frozen=True)
class NavLink:
    id: str
    title: str
    url: str
    icon: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None
    pinned: bool = False
    tags: List[str] = field(default_factory=list)


def _to_link(item_id: str, data: Any) -> Optional[NavLink]:
    if not isinstance(data, dict):
        return None
    # Nested ids only keep their last segment, like the public site does.
    short_id = item_id.rsplit("/", 1)[-1]
    return NavLink(
        id=short_id,
        title=str(data.get("title") or ""),
        url=str(data.get("url") or ""),
        icon=data.get("icon"),
        description=data.get("description"),
        category=data.get("category") or None,
        pinned=bool(data.get("pinned", False)),
        tags=list(data.get("tags") or []),
    )


def load_links(*, content_dir: Path) -> List[NavLink]:
    """All navigation links; items that are not JSON objects are skipped."""
    links = []
    for item in list_content(content_dir=content_dir, content_type="navigation"):
        link = _to_link(item["id"], item["data"])
        if link is not None:
            links.append(link)
    return links


def categories(links: List[NavLink]) -> List[str]:
    return sorted({link.category for link in links if link.category})


def group_by_category(links: List[NavLink]) -> Dict[str, List[NavLink]]:
    grouped: Dict[str, List[NavLink]] = {}
    for link in links:
        grouped.setdefault(link.category or UNCATEGORIZED, []).append(link)
    return grouped


def ordered_groups(links: List[NavLink]) -> List[Tuple[str, List[NavLink]]]:
    """Groups in category order, with uncategorized links last."""
    grouped = group_by_category(links)
    order = categories(links)
    if UNCATEGORIZED in grouped and UNCATEGORIZED not in order:
        order.append(UNCATEGORIZED)
    return [(c, grouped[c]) for c in order]


def pinned(links: List[NavLink]) -> List[NavLink]:
    return [link for link in links if link.pinned]
