"""Tests for the static site writer."""

import json
from collections.abc import Callable
from pathlib import Path

import pytest
from tipstage.core.errors import TipstageError
from tipstage.core.renderer import PageRenderer
from tipstage.core.site import SiteLoader
from tipstage.core.writer import SiteWriter


class TestSiteWriter:
    """Tests for SiteWriter.write()."""

    def test__writes_index_pages_and_navigation(
        self, tmp_path: Path, source_dir: Path, write_tip: Callable[..., Path]
    ) -> None:
        for tip_id in (140, 1, 59):
            write_tip(tip_id)
        write_tip(7, published=False)
        build = SiteLoader(source_dir).load()
        output_dir = tmp_path / "_site"

        written = SiteWriter(output_dir).write(build, PageRenderer(), source_dir=source_dir)

        assert written[0] == output_dir / "index.html"
        assert (output_dir / "tips" / "1" / "index.html").exists()
        assert (output_dir / "tips" / "140" / "index.html").exists()
        assert not (output_dir / "tips" / "7").exists()
        nav = json.loads((output_dir / "navigation.json").read_text())
        assert [item["id"] for item in nav["items"]] == [1, 59, 140]

    def test__navigation__round_trips(
        self, tmp_path: Path, source_dir: Path, write_tip: Callable[..., Path]
    ) -> None:
        """Rendering then re-parsing the index yields the same ids."""
        for tip_id in (229, 173, 140, 59, 1):
            write_tip(tip_id)
        build = SiteLoader(source_dir).load()
        writer = SiteWriter(tmp_path / "_site")

        writer.write(build, PageRenderer())

        assert writer.read_navigation_ids() == build.index.ids == [1, 59, 140, 173, 229]

    def test__previous_output__removed(
        self, tmp_path: Path, source_dir: Path, write_tip: Callable[..., Path]
    ) -> None:
        output_dir = tmp_path / "_site"
        stale = output_dir / "tips" / "99" / "index.html"
        stale.parent.mkdir(parents=True)
        stale.write_text("stale")
        write_tip(1)

        SiteWriter(output_dir).write(SiteLoader(source_dir).load(), PageRenderer())

        assert not stale.exists()

    def test__output_is_source__raises(self, source_dir: Path, write_tip: Callable[..., Path]) -> None:
        write_tip(1)
        build = SiteLoader(source_dir).load()

        with pytest.raises(TipstageError, match="would overwrite sources"):
            SiteWriter(source_dir).write(build, PageRenderer(), source_dir=source_dir)

        assert (source_dir / "totw-1.md").exists()

    def test__output_contains_source__raises(self, tmp_path: Path, source_dir: Path) -> None:
        build = SiteLoader(source_dir).load()

        with pytest.raises(TipstageError):
            SiteWriter(tmp_path).write(build, PageRenderer(), source_dir=source_dir)

    def test__read_navigation__missing__raises(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            SiteWriter(tmp_path / "_site").read_navigation_ids()

    def test__reference_to_unpublished_tip__not_linked(
        self, tmp_path: Path, source_dir: Path, write_tip: Callable[..., Path]
    ) -> None:
        write_tip(1, "See Tip #7.")
        write_tip(7, published=False)
        output_dir = tmp_path / "_site"

        SiteWriter(output_dir).write(SiteLoader(source_dir).load(), PageRenderer())

        html = (output_dir / "tips" / "1" / "index.html").read_text()
        assert "<p>See Tip #7.</p>" in html
        assert 'href="/tips/7"' not in html
        assert not (output_dir / "tips" / "7").exists()
