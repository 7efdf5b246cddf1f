"""Shared test fixtures."""

from collections.abc import Callable
from pathlib import Path

import pytest
from tipstage.config import Config, DocsConfig, ServerConfig, TipsConfig


def tip_source(
    tip_id: int,
    body: str = "Body text.",
    *,
    title: str | None = None,
    published: bool = True,
    extra: str = "",
) -> str:
    """Return the text of a well-formed tip source."""
    return (
        "---\n"
        f'title: "{title or f"Tip of the Week #{tip_id}: Topic {tip_id}"}"\n'
        "layout: tips\n"
        "sidenav: side-nav-tips.html\n"
        f"published: {'true' if published else 'false'}\n"
        f"permalink: tips/{tip_id}\n"
        "type: markdown\n"
        f'order: "{str(tip_id).zfill(3)}"\n'
        f"{extra}"
        "---\n\n"
        f"{body}\n"
    )


@pytest.fixture
def source_dir(tmp_path: Path) -> Path:
    source = tmp_path / "tips"
    source.mkdir(exist_ok=True)
    return source


@pytest.fixture
def write_tip(source_dir: Path) -> Callable[..., Path]:
    """Write a tip source into source_dir and return its path."""

    def _write(tip_id: int, body: str = "Body text.", **kwargs: object) -> Path:
        path = source_dir / f"totw-{tip_id}.md"
        path.write_text(tip_source(tip_id, body, **kwargs), encoding="utf-8")  # type: ignore[arg-type]
        return path

    return _write


@pytest.fixture
def test_config(tmp_path: Path, source_dir: Path) -> Config:
    """Create a test configuration with tmp_path directories."""
    return Config(
        server=ServerConfig(),
        docs=DocsConfig(source_dir=source_dir, output_dir=tmp_path / "_site"),
        tips=TipsConfig(),
    )
