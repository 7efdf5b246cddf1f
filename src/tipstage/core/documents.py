"""Document loading and front-matter validation.

Turns raw sources into immutable Document records. Loading is a pure
transformation: read_sources() is the only function touching the filesystem.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from types import MappingProxyType
from typing import Any

from tipstage.core.errors import DuplicateId, MalformedFrontMatter
from tipstage.core.frontmatter import split_front_matter
from tipstage.core.types import TipId, URLPath

logger = logging.getLogger(__name__)

SOURCE_SUFFIXES = (".md", ".markdown")

# Front-matter keys every tip must declare, with their expected type
REQUIRED_FIELDS: dict[str, type] = {
    "title": str,
    "permalink": str,
    "order": str,
    "published": bool,
}

_TITLE_PREFIX = re.compile(r"^\s*Tip\s+of\s+the\s+Week\s+#\d+\s*:\s*", re.IGNORECASE)


@dataclass(frozen=True)
class Source:
    """Raw document text with the name it was read from.

    A source that could not be decoded carries the reason in ``error``
    and an empty ``text``.
    """

    name: str
    text: str
    error: str | None = None


@dataclass(frozen=True)
class Document:
    """A validated tip article."""

    id: TipId
    title: str
    permalink: str
    order: str
    published: bool
    body: str
    source: str = ""
    body_line: int = 1
    published_on: date | None = None
    metadata: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}), compare=False)

    @property
    def path(self) -> URLPath:
        """URL path of the published page."""
        return URLPath(f"/{self.permalink}")

    @property
    def short_title(self) -> str:
        """Title without the leading "Tip of the Week #N:" prefix."""
        return _TITLE_PREFIX.sub("", self.title) or self.title


@dataclass(frozen=True)
class LoadResult:
    """Documents that loaded cleanly plus the sources that were skipped."""

    documents: tuple[Document, ...]
    errors: tuple[MalformedFrontMatter, ...]


def zero_pad(tip_id: int, width: int = 3) -> str:
    """Return the order string for a tip id (``zero_pad(7) == "007"``)."""
    return str(tip_id).zfill(width)


class DocumentLoader:
    """Parses and validates sources into Document records.

    Malformed sources are skipped and reported; duplicate ids abort loading.
    """

    def __init__(self, *, permalink_prefix: str = "tips", order_width: int = 3) -> None:
        """Initialize loader.

        Args:
            permalink_prefix: Leading permalink segment (e.g., "tips")
            order_width: Zero-padding width of the order field
        """
        self._prefix = permalink_prefix.strip("/")
        self._order_width = order_width
        self._permalink_re = re.compile(rf"^{re.escape(self._prefix)}/([1-9][0-9]*)$")

    def load(self, sources: Iterable[Source]) -> LoadResult:
        """Load documents from raw sources.

        Args:
            sources: Raw sources to parse

        Returns:
            LoadResult with documents in source order and per-source errors

        Raises:
            DuplicateId: If two well-formed sources declare the same id
        """
        documents: list[Document] = []
        errors: list[MalformedFrontMatter] = []
        seen: dict[int, list[str]] = {}

        for source in sources:
            try:
                document = self.parse(source)
            except MalformedFrontMatter as e:
                logger.warning(f"Skipping {e.source}: {e.reason}")
                errors.append(e)
                continue

            logger.debug(f"Loaded tip #{document.id} from {source.name}")
            seen.setdefault(document.id, []).append(source.name)
            documents.append(document)

        for tip_id, names in sorted(seen.items()):
            if len(names) > 1:
                raise DuplicateId(tip_id, names)

        logger.info(f"Loaded {len(documents)} tips ({len(errors)} skipped)")
        return LoadResult(documents=tuple(documents), errors=tuple(errors))

    def parse(self, source: Source) -> Document:
        """Parse a single source into a Document.

        Args:
            source: Raw source

        Returns:
            Validated Document

        Raises:
            MalformedFrontMatter: If required fields are missing or invalid
        """
        if source.error is not None:
            raise MalformedFrontMatter(source.name, source.error)

        data, body = split_front_matter(source.text, source.name)

        for key, expected in REQUIRED_FIELDS.items():
            if key not in data:
                raise MalformedFrontMatter(source.name, f"missing required field '{key}'")
            if not isinstance(data[key], expected):
                raise MalformedFrontMatter(
                    source.name,
                    f"field '{key}' must be a {expected.__name__}, got {type(data[key]).__name__}",
                )

        title: str = data["title"]
        if not title.strip():
            raise MalformedFrontMatter(source.name, "field 'title' must not be empty")

        permalink: str = data["permalink"]
        tip_id = self._resolve_id(source.name, data.get("id"), permalink)

        expected_permalink = f"{self._prefix}/{tip_id}"
        if permalink != expected_permalink:
            raise MalformedFrontMatter(
                source.name,
                f"permalink '{permalink}' does not match '{expected_permalink}'",
            )

        order: str = data["order"]
        expected_order = zero_pad(tip_id, self._order_width)
        if order != expected_order:
            raise MalformedFrontMatter(
                source.name,
                f"order '{order}' does not match '{expected_order}'",
            )

        published_on = data.get("date")
        if published_on is not None and not isinstance(published_on, date):
            raise MalformedFrontMatter(source.name, "field 'date' must be a date (YYYY-MM-DD)")

        # Line of the source file the body starts on
        body_line = source.text.count("\n", 0, len(source.text) - len(body)) + 1

        extra = {k: v for k, v in data.items() if k not in REQUIRED_FIELDS and k not in ("id", "date")}

        return Document(
            id=TipId(tip_id),
            title=title,
            permalink=permalink,
            order=order,
            published=data["published"],
            body=body,
            source=source.name,
            body_line=body_line,
            published_on=published_on,
            metadata=MappingProxyType(extra),
        )

    def _resolve_id(self, name: str, explicit: object, permalink: str) -> int:
        """Return the tip id from an explicit ``id`` key or the permalink."""
        if explicit is not None:
            if not isinstance(explicit, int) or isinstance(explicit, bool) or explicit < 1:
                raise MalformedFrontMatter(name, "field 'id' must be a positive integer")
            return explicit

        match = self._permalink_re.match(permalink)
        if match is None:
            raise MalformedFrontMatter(
                name,
                f"permalink '{permalink}' must have the form '{self._prefix}/<id>'",
            )
        return int(match.group(1))


def read_sources(source_dir: Path) -> list[Source]:
    """Read markdown sources from a directory tree.

    Skips files and directories starting with dot or underscore below
    source_dir. Returns an empty list when source_dir doesn't exist.

    Args:
        source_dir: Root directory containing tip sources

    Returns:
        Sources in sorted relative-path order
    """
    if not source_dir.is_dir():
        logger.warning(f"Source directory not found: {source_dir}")
        return []

    sources: list[Source] = []
    for path in sorted(source_dir.rglob("*")):
        if not path.is_file() or path.suffix.lower() not in SOURCE_SUFFIXES:
            continue
        relative = path.relative_to(source_dir)
        if any(part.startswith((".", "_")) for part in relative.parts):
            continue
        name = relative.as_posix()
        try:
            text = path.read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            sources.append(Source(name=name, text="", error=f"invalid UTF-8: {e.reason} at byte {e.start}"))
            continue
        sources.append(Source(name=name, text=text))

    logger.debug(f"Read {len(sources)} sources from {source_dir}")
    return sources
