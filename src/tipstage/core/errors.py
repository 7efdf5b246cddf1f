"""Error types raised while building a tip collection."""

from __future__ import annotations


class TipstageError(Exception):
    """Base class for collection build errors."""


class MalformedFrontMatter(TipstageError):
    """A source has a missing, unparsable or invalid front-matter block.

    Fatal for that document only: the loader skips it and reports it.
    """

    def __init__(self, source: str, reason: str) -> None:
        self.source = source
        self.reason = reason
        super().__init__(f"{source}: {reason}")

    def to_dict(self) -> dict[str, str]:
        """Convert to dictionary for JSON serialization."""
        return {"source": self.source, "reason": self.reason}


class DuplicateId(TipstageError):
    """Two or more sources declare the same tip id.

    Fatal for the whole build since navigation would be ambiguous.
    """

    def __init__(self, tip_id: int, sources: list[str]) -> None:
        self.tip_id = tip_id
        self.sources = sources
        super().__init__(f"Tip #{tip_id} is declared by more than one source: {', '.join(sources)}")
