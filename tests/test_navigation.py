"""Tests for navigation builder."""

import json

import pytest
from tipstage.core.documents import Document
from tipstage.core.index import build_index
from tipstage.core.navigation import (
    NavItem,
    build_navigation,
    navigation_to_dict,
    parse_navigation,
)
from tipstage.core.types import TipId, URLPath


def _doc(tip_id: int) -> Document:
    return Document(
        id=TipId(tip_id),
        title=f"Tip of the Week #{tip_id}",
        permalink=f"tips/{tip_id}",
        order=str(tip_id).zfill(3),
        published=True,
        body="",
    )


class TestBuildNavigation:
    """Tests for build_navigation()."""

    def test__items_follow_index_order(self) -> None:
        index = build_index([_doc(140), _doc(1), _doc(59)])

        items = build_navigation(index)

        assert items == [
            NavItem(id=1, title="Tip of the Week #1", path=URLPath("/tips/1")),
            NavItem(id=59, title="Tip of the Week #59", path=URLPath("/tips/59")),
            NavItem(id=140, title="Tip of the Week #140", path=URLPath("/tips/140")),
        ]

    def test__to_dict(self) -> None:
        item = NavItem(id=1, title="One", path=URLPath("/tips/1"))

        assert item.to_dict() == {"id": 1, "title": "One", "path": "/tips/1"}


class TestParseNavigation:
    """Tests for parse_navigation()."""

    def test__render_then_parse__same_ids(self) -> None:
        """Rendering then re-parsing the index keeps the id order."""
        index = build_index([_doc(i) for i in (229, 1, 173, 59, 140)])

        rendered = json.dumps(navigation_to_dict(build_navigation(index)))
        parsed = parse_navigation(json.loads(rendered))

        assert [item.id for item in parsed] == index.ids == [1, 59, 140, 173, 229]

    @pytest.mark.parametrize(
        "data",
        [
            [],
            {"items": "nope"},
            {"items": ["nope"]},
            {"items": [{"id": "1", "title": "x", "path": "/tips/1"}]},
            {"items": [{"id": True, "title": "x", "path": "/tips/1"}]},
            {"items": [{"id": 1, "title": None, "path": "/tips/1"}]},
        ],
    )
    def test__malformed__raises(self, data: object) -> None:
        with pytest.raises(ValueError):
            parse_navigation(data)
