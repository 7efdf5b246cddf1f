"""Static output writer.

Output structure:
    _site/
    ├── index.html               # Ordered tip list
    ├── navigation.json          # Navigation items in index order
    └── tips/
        └── 36/
            └── index.html       # Rendered tip page
"""

from __future__ import annotations

import json
import logging
import shutil
from pathlib import Path

from tipstage.core.errors import TipstageError
from tipstage.core.navigation import build_navigation, navigation_to_dict, parse_navigation
from tipstage.core.renderer import PageRenderer
from tipstage.core.site import BuildResult

logger = logging.getLogger(__name__)

NAVIGATION_FILENAME = "navigation.json"


class SiteWriter:
    """Writes a build to an output directory, replacing its previous contents."""

    def __init__(self, output_dir: Path) -> None:
        self._output_dir = output_dir

    @property
    def output_dir(self) -> Path:
        return self._output_dir

    def write(
        self,
        build: BuildResult,
        renderer: PageRenderer,
        *,
        source_dir: Path | None = None,
    ) -> list[Path]:
        """Render and write every indexed page.

        Args:
            build: Completed collection build
            renderer: Renderer used for tip and index pages
            source_dir: Source directory, protected from being overwritten

        Returns:
            Paths of written files, index first

        Raises:
            TipstageError: If the output directory would clobber the sources
        """
        if source_dir is not None:
            self._check_not_source(source_dir)

        if self._output_dir.exists():
            shutil.rmtree(self._output_dir)
        self._output_dir.mkdir(parents=True)

        written: list[Path] = []

        index_path = self._output_dir / "index.html"
        index_path.write_text(renderer.render_index(build.index), encoding="utf-8")
        written.append(index_path)

        for document in build.index:
            page_path = self._output_dir / document.permalink / "index.html"
            page_path.parent.mkdir(parents=True, exist_ok=True)
            page_path.write_text(renderer.render_page(document, build), encoding="utf-8")
            written.append(page_path)

        nav_path = self._output_dir / NAVIGATION_FILENAME
        navigation = navigation_to_dict(build_navigation(build.index))
        nav_path.write_text(json.dumps(navigation, indent=2), encoding="utf-8")
        written.append(nav_path)

        logger.info(f"Wrote {len(written)} files to {self._output_dir}")
        return written

    def read_navigation_ids(self) -> list[int]:
        """Read the written navigation back and return its tip ids in order.

        Raises:
            FileNotFoundError: If nothing was written yet
            ValueError: If the navigation file is malformed
        """
        nav_path = self._output_dir / NAVIGATION_FILENAME
        try:
            data = json.loads(nav_path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid navigation file {nav_path}: {e}") from e
        return [item.id for item in parse_navigation(data)]

    def _check_not_source(self, source_dir: Path) -> None:
        output = self._output_dir.resolve()
        source = source_dir.resolve()
        if output == source or output in source.parents:
            raise TipstageError(f"Output directory {self._output_dir} would overwrite sources in {source_dir}")
