"""Cross-reference detection and resolution.

Finds citations of other tips in document bodies ("Tip #36",
"Tip of the Week #36", "TotW #36", or a markdown link to a tip permalink)
and checks them against the loaded collection.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Literal

from tipstage.core.documents import Document
from tipstage.core.types import TipId

logger = logging.getLogger(__name__)

ReferenceKind = Literal["mention", "link"]

_MENTION = r"\b(?:Tip(?:\s+of\s+the\s+Week)?|TotW)\s*#(?P<mention_id>\d+)\b"

# Excluded from scanning: fenced blocks (closed by a run of the same fence
# character at least as long as the opener), indented blocks following a
# blank line, and inline code spans
_CODE = re.compile(
    r"^[ \t]{0,3}(?P<ticks>`{3,})[^\n]*\n.*?(?:^[ \t]{0,3}(?P=ticks)`*[ \t]*$|\Z)"
    r"|^[ \t]{0,3}(?P<tildes>~{3,})[^\n]*\n.*?(?:^[ \t]{0,3}(?P=tildes)~*[ \t]*$|\Z)"
    r"|(?:\A|(?<=\n\n))(?:(?: {4}|\t)[^\n]*(?:\n|\Z))+"
    r"|(?P<tick>`+)(?!`)[^\n]*?(?<!`)(?P=tick)(?!`)",
    re.MULTILINE | re.DOTALL,
)


@dataclass(frozen=True)
class CrossReference:
    """A citation of another tip inside a document body."""

    source_id: TipId
    target_id: TipId
    raw_text: str
    start: int
    end: int
    kind: ReferenceKind


@dataclass(frozen=True)
class ResolvedReference:
    """A cross-reference whose target exists in the collection."""

    reference: CrossReference
    target: Document

    @property
    def href(self) -> str:
        return self.target.path


@dataclass(frozen=True)
class BrokenReference:
    """Diagnostic for a cross-reference to a tip that doesn't exist."""

    source_id: TipId
    target_id: TipId
    raw_text: str
    start: int
    line: int
    source: str

    def to_dict(self) -> dict[str, str | int]:
        """Convert to dictionary for JSON serialization."""
        return {
            "source_id": self.source_id,
            "target_id": self.target_id,
            "raw_text": self.raw_text,
            "line": self.line,
            "source": self.source,
        }

    def __str__(self) -> str:
        return f"{self.source}:{self.line}: tip #{self.source_id} references missing tip #{self.target_id} ({self.raw_text!r})"


@dataclass(frozen=True)
class ResolutionResult:
    """Resolved links and broken-reference diagnostics for a collection."""

    resolved: tuple[ResolvedReference, ...]
    broken: tuple[BrokenReference, ...]

    def for_document(self, tip_id: int) -> list[ResolvedReference]:
        """Resolved references originating from one document."""
        return [r for r in self.resolved if r.reference.source_id == tip_id]


class ReferenceScanner:
    """Scans document bodies for references to other tips."""

    def __init__(self, permalink_prefix: str = "tips") -> None:
        prefix = re.escape(permalink_prefix.strip("/"))
        link = rf"\[(?P<link_text>[^\]\n]*)\]\(\s*(?:\.\.?/|/)?{prefix}/(?P<link_id>\d+)/?(?:#[^)\s]*)?\s*\)"
        self._pattern = re.compile(rf"{link}|{_MENTION}", re.IGNORECASE)

    def scan(self, document: Document) -> list[CrossReference]:
        """Find references in a document body, in order of position.

        Args:
            document: Document to scan

        Returns:
            References outside code, ordered by start offset
        """
        body = document.body
        code_spans = [m.span() for m in _CODE.finditer(body)]

        references: list[CrossReference] = []
        for match in self._pattern.finditer(body):
            start, end = match.span()
            if _inside(start, code_spans):
                continue

            if match.group("link_id") is not None:
                target, kind = int(match.group("link_id")), "link"
            else:
                target, kind = int(match.group("mention_id")), "mention"

            references.append(
                CrossReference(
                    source_id=document.id,
                    target_id=TipId(target),
                    raw_text=match.group(0),
                    start=start,
                    end=end,
                    kind=kind,
                ),
            )
        return references


def find_references(document: Document, permalink_prefix: str = "tips") -> list[CrossReference]:
    """Find references to other tips in a document body."""
    return ReferenceScanner(permalink_prefix).scan(document)


def resolve_references(
    documents: Iterable[Document],
    permalink_prefix: str = "tips",
) -> ResolutionResult:
    """Resolve every cross-reference against the full document set.

    Missing targets are reported, not raised. Output is ordered by
    document id then position in body.

    Args:
        documents: Complete loaded collection
        permalink_prefix: Leading permalink segment used by link references

    Returns:
        ResolutionResult with resolved links and broken-reference diagnostics
    """
    ordered = sorted(documents, key=lambda d: d.id)
    by_id = {d.id: d for d in ordered}
    scanner = ReferenceScanner(permalink_prefix)

    resolved: list[ResolvedReference] = []
    broken: list[BrokenReference] = []

    for document in ordered:
        for ref in scanner.scan(document):
            target = by_id.get(ref.target_id)
            if target is not None:
                resolved.append(ResolvedReference(reference=ref, target=target))
                continue

            diagnostic = BrokenReference(
                source_id=ref.source_id,
                target_id=ref.target_id,
                raw_text=ref.raw_text,
                start=ref.start,
                line=document.body_line + document.body.count("\n", 0, ref.start),
                source=document.source,
            )
            logger.warning(f"Broken reference: {diagnostic}")
            broken.append(diagnostic)

    logger.info(f"Resolved {len(resolved)} cross-references ({len(broken)} broken)")
    return ResolutionResult(resolved=tuple(resolved), broken=tuple(broken))


def _inside(position: int, spans: list[tuple[int, int]]) -> bool:
    return any(start <= position < end for start, end in spans)
