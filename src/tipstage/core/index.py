"""Ordered tip index.

Sorts documents by numeric id for navigation. Ids are unique after
loading, so the order is total.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence
from typing import overload

from tipstage.core.documents import Document


class TipIndex(Sequence[Document]):
    """Read-only id-ordered sequence of documents."""

    __slots__ = ("_documents", "_positions")

    def __init__(self, documents: Iterable[Document]) -> None:
        self._documents = tuple(sorted(documents, key=lambda d: d.id))
        self._positions = {d.id: i for i, d in enumerate(self._documents)}

    @overload
    def __getitem__(self, i: int) -> Document: ...

    @overload
    def __getitem__(self, i: slice) -> Sequence[Document]: ...

    def __getitem__(self, i: int | slice) -> Document | Sequence[Document]:
        return self._documents[i]

    def __len__(self) -> int:
        return len(self._documents)

    def __iter__(self) -> Iterator[Document]:
        return iter(self._documents)

    def __contains__(self, item: object) -> bool:
        return isinstance(item, Document) and self.get(item.id) == item

    def __repr__(self) -> str:
        return f"TipIndex(ids={self.ids!r})"

    @property
    def ids(self) -> list[int]:
        """Tip ids in index order."""
        return [d.id for d in self._documents]

    def get(self, tip_id: int) -> Document | None:
        """Get document by id, None when not indexed."""
        pos = self._positions.get(tip_id)
        if pos is None:
            return None
        return self._documents[pos]

    def previous(self, tip_id: int) -> Document | None:
        """Document before tip_id in index order."""
        pos = self._positions.get(tip_id)
        if pos is None or pos == 0:
            return None
        return self._documents[pos - 1]

    def next(self, tip_id: int) -> Document | None:
        """Document after tip_id in index order."""
        pos = self._positions.get(tip_id)
        if pos is None or pos + 1 >= len(self._documents):
            return None
        return self._documents[pos + 1]


def build_index(documents: Iterable[Document], *, include_unpublished: bool = False) -> TipIndex:
    """Build the navigation index.

    Args:
        documents: Loaded documents (ids must be unique)
        include_unpublished: Keep documents with ``published: false``

    Returns:
        TipIndex sorted by id ascending
    """
    return TipIndex(d for d in documents if include_unpublished or d.published)
