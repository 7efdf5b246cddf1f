"""Navigation list builder.

Builds navigation items from the tip index for UI presentation and
reads them back from their JSON form.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TypedDict

from tipstage.core.index import TipIndex
from tipstage.core.types import URLPath


class NavItemDict(TypedDict):
    """Dictionary representation of a navigation item."""

    id: int
    title: str
    path: str


class NavigationDict(TypedDict):
    """Dictionary representation of the navigation list."""

    items: list[NavItemDict]


@dataclass(frozen=True)
class NavItem:
    """Navigation entry for one tip."""

    id: int
    title: str
    path: URLPath

    def to_dict(self) -> NavItemDict:
        """Convert to dictionary for JSON serialization."""
        return {"id": self.id, "title": self.title, "path": self.path}


def build_navigation(index: TipIndex) -> list[NavItem]:
    """Build navigation items in index order.

    Args:
        index: Tip index to build navigation from

    Returns:
        List of NavItem, one per indexed tip
    """
    return [NavItem(id=doc.id, title=doc.title, path=doc.path) for doc in index]


def navigation_to_dict(items: list[NavItem]) -> NavigationDict:
    return {"items": [item.to_dict() for item in items]}


def parse_navigation(data: object) -> list[NavItem]:
    """Read navigation items back from their dictionary form.

    Args:
        data: Parsed JSON as produced by navigation_to_dict()

    Returns:
        List of NavItem in stored order

    Raises:
        ValueError: If data doesn't have the navigation shape
    """
    if not isinstance(data, dict) or not isinstance(data.get("items"), list):
        raise ValueError("navigation must be an object with an 'items' list")

    items: list[NavItem] = []
    for raw in data["items"]:
        if not isinstance(raw, dict):
            raise ValueError("navigation items must be objects")
        tip_id, title, path = raw.get("id"), raw.get("title"), raw.get("path")
        if not isinstance(tip_id, int) or isinstance(tip_id, bool):
            raise ValueError("navigation item id must be an integer")
        if not isinstance(title, str) or not isinstance(path, str):
            raise ValueError("navigation item title and path must be strings")
        items.append(NavItem(id=tip_id, title=title, path=URLPath(path)))
    return items
