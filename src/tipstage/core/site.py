"""Site structure and the collection build pipeline.

Site gives path lookups and previous/next traversal over the indexed
tips. SiteLoader runs read, load, resolve and index in one synchronous
pass and returns everything as a BuildResult.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from tipstage.config import TipsConfig
from tipstage.core.documents import Document, DocumentLoader, read_sources
from tipstage.core.errors import MalformedFrontMatter
from tipstage.core.index import TipIndex, build_index
from tipstage.core.references import BrokenReference, ResolutionResult, resolve_references
from tipstage.core.types import URLPath

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Page:
    """Published page data."""

    tip_id: int
    title: str
    path: URLPath


@dataclass(frozen=True)
class BreadcrumbItem:
    """Breadcrumb navigation item."""

    title: str
    path: str

    def to_dict(self) -> dict[str, str]:
        """Convert to dictionary for JSON serialization."""
        return {"title": self.title, "path": self.path}


class Site:
    """Ordered tip pages with efficient path lookups.

    Pages are kept in index order; neighbours are the adjacent entries.
    """

    __slots__ = ("_pages", "_path_index")

    def __init__(self, pages: list[Page]) -> None:
        self._pages = pages
        self._path_index = {page.path: i for i, page in enumerate(pages)}

    def get_page(self, path: str) -> Page | None:
        """Get page by path.

        Args:
            path: Page path (e.g., "tips/36" or "/tips/36/")

        Returns:
            Page if found, None otherwise
        """
        idx = self._path_index.get(self._normalize_path(path))
        if idx is None:
            return None
        return self._pages[idx]

    def get_pages(self) -> list[Page]:
        """All pages in index order."""
        return list(self._pages)

    def get_neighbours(self, path: str) -> tuple[Page | None, Page | None]:
        """Return (previous, next) pages around path.

        Unknown paths have no neighbours.
        """
        idx = self._path_index.get(self._normalize_path(path))
        if idx is None:
            return None, None
        prev_page = self._pages[idx - 1] if idx > 0 else None
        next_page = self._pages[idx + 1] if idx + 1 < len(self._pages) else None
        return prev_page, next_page

    def get_breadcrumbs(self, path: str) -> list[BreadcrumbItem]:
        """Build breadcrumbs for a given path.

        The index page has no breadcrumbs; every other path, known or not,
        gets [Home] so the UI always has a way back.
        """
        normalized = self._normalize_path(path)
        if normalized == "/":
            return []
        return [BreadcrumbItem(title="Home", path="/")]

    def _normalize_path(self, path: str) -> str:
        """Normalize path to have a leading and no trailing slash."""
        stripped = path.strip("/")
        return f"/{stripped}"


class SiteBuilder:
    """Builder for constructing Site instances."""

    def __init__(self) -> None:
        self._pages: list[Page] = []

    def add_page(self, tip_id: int, title: str, path: str) -> int:
        """Add a page to the site.

        Returns:
            Index of the added page
        """
        self._pages.append(Page(tip_id=tip_id, title=title, path=URLPath(path)))
        return len(self._pages) - 1

    def build(self) -> Site:
        return Site(pages=self._pages)

    @classmethod
    def from_index(cls, index: TipIndex) -> Site:
        builder = cls()
        for doc in index:
            builder.add_page(doc.id, doc.title, doc.path)
        return builder.build()


@dataclass(frozen=True)
class BuildResult:
    """Outcome of one collection build."""

    documents: tuple[Document, ...]
    index: TipIndex
    site: Site
    references: ResolutionResult
    errors: tuple[MalformedFrontMatter, ...]

    @property
    def broken_references(self) -> tuple[BrokenReference, ...]:
        return self.references.broken

    @property
    def ok(self) -> bool:
        """True when no document was skipped and no reference is broken."""
        return not self.errors and not self.references.broken


class SiteLoader:
    """Builds the collection from a source directory.

    Each load() is independent: sources are re-read and nothing is kept
    between calls.
    """

    def __init__(self, source_dir: Path, tips: TipsConfig | None = None) -> None:
        self._source_dir = source_dir
        self._tips = tips or TipsConfig()

    @property
    def source_dir(self) -> Path:
        """Root directory containing tip sources."""
        return self._source_dir

    @property
    def tips(self) -> TipsConfig:
        return self._tips

    def load(self) -> BuildResult:
        """Run the load, resolve and index pipeline.

        Returns:
            BuildResult with documents, index, references and diagnostics

        Raises:
            DuplicateId: If two sources declare the same tip id
        """
        logger.info(f"Building tip collection from {self._source_dir}")
        sources = read_sources(self._source_dir)

        loader = DocumentLoader(
            permalink_prefix=self._tips.permalink_prefix,
            order_width=self._tips.order_width,
        )
        loaded = loader.load(sources)

        references = resolve_references(loaded.documents, self._tips.permalink_prefix)
        index = build_index(loaded.documents, include_unpublished=self._tips.include_unpublished)

        return BuildResult(
            documents=tuple(sorted(loaded.documents, key=lambda d: d.id)),
            index=index,
            site=SiteBuilder.from_index(index),
            references=references,
            errors=loaded.errors,
        )
