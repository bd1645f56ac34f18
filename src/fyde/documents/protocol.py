"""StorageGateway protocol — the persistence contract for documents.

Any backend that implements these five methods can sit behind the
ingestion pipeline.  Implementations raise subclasses of
:class:`fyde.exceptions.StorageError` and never retry internally.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    import uuid

    from .types import Document, ListCursor, Metadata


@runtime_checkable
class StorageGateway(Protocol):
    """Append-only document storage with keyset pagination."""

    def save(self, document: Document) -> None:
        """Insert exactly one new row for *document*.

        Saving an identifier that already exists is an error.
        """
        ...

    def get_all(self, cursor: ListCursor) -> list[Metadata]:
        """Return up to ``cursor.limit`` metadata rows with ``id > cursor.after_id``.

        Rows are ordered by ``id`` ascending.  Blob columns are not loaded.
        """
        ...

    def get_by_id(self, doc_id: uuid.UUID) -> Metadata:
        """Return the metadata for *doc_id* or raise ``DocumentNotFoundError``."""
        ...

    def get_preview(self, doc_id: uuid.UUID) -> bytes:
        """Return the rendered preview blob for *doc_id*."""
        ...

    def get_content(self, doc_id: uuid.UUID) -> bytes:
        """Return the raw content blob for *doc_id*."""
        ...
