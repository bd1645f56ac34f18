"""SqlMetadataStore — StorageGateway over the SQLModel ``document`` table."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any

from sqlalchemy import insert
from sqlalchemy.exc import ArgumentError, CompileError, SQLAlchemyError
from sqlmodel import select

from fyde.exceptions import (
    DocumentNotFoundError,
    QueryBuildError,
    QueryExecutionError,
    StorageError,
)
from fyde.models.document import METADATA_COLUMNS, DocumentRecord

from .types import Metadata

if TYPE_CHECKING:
    import uuid
    from collections.abc import Iterator

    from sqlalchemy.engine import Row

    from fyde.db import Database

    from .types import Document, ListCursor

logger = logging.getLogger(__name__)


@contextmanager
def _storage_errors(action: str) -> Iterator[None]:
    """Translate SQLAlchemy failures into the fyde storage taxonomy."""
    try:
        yield
    except StorageError:
        raise
    except (ArgumentError, CompileError) as exc:
        msg = f"failed to generate a query to {action}: {exc}"
        raise QueryBuildError(msg) from exc
    except SQLAlchemyError as exc:
        msg = f"failed to execute a query to {action}: {exc}"
        raise QueryExecutionError(msg) from exc


def row_to_metadata(row: Row[Any]) -> Metadata:
    """Convert a metadata-only result row into a :class:`Metadata`."""
    mapping = row._mapping
    return Metadata(**{name: mapping[name] for name in METADATA_COLUMNS})


class SqlMetadataStore:
    """Relational document storage.

    Every method runs exactly one statement inside a
    :meth:`Database.session` unit of work, so access to the shared
    connection is serialized.  Listing never touches the blob columns.
    """

    def __init__(self, database: Database) -> None:
        self._db = database
        self._metadata_columns = [getattr(DocumentRecord, name) for name in METADATA_COLUMNS]

    # ------------------------------------------------------------------
    # Write
    # ------------------------------------------------------------------

    def save(self, document: Document) -> None:
        meta = document.metadata
        with _storage_errors("save a document"):
            stmt = insert(DocumentRecord).values(
                id=meta.id,
                name=meta.name,
                checksum=meta.checksum,
                detected_type=meta.detected_type,
                size=meta.size,
                created_at=meta.created_at,
                transcript=meta.transcript,
                file_content=document.file_content,
                file_preview=document.file_preview,
            )
            with self._db.session() as session:
                session.execute(stmt)
        logger.debug("Inserted document %s", meta.id)

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def get_all(self, cursor: ListCursor) -> list[Metadata]:
        with _storage_errors("list documents"):
            query = (
                select(*self._metadata_columns)
                .order_by(DocumentRecord.id.asc())  # type: ignore[union-attr]
                .limit(cursor.limit)
            )
            if cursor.after_id is not None:
                query = query.where(DocumentRecord.id > cursor.after_id)
            with self._db.session() as session:
                rows = session.execute(query).all()
        return [row_to_metadata(row) for row in rows]

    def get_by_id(self, doc_id: uuid.UUID) -> Metadata:
        with _storage_errors("fetch a document"):
            query = select(*self._metadata_columns).where(DocumentRecord.id == doc_id)
            with self._db.session() as session:
                row = session.execute(query).one_or_none()
        if row is None:
            raise DocumentNotFoundError(doc_id)
        return row_to_metadata(row)

    def get_preview(self, doc_id: uuid.UUID) -> bytes:
        return self._get_blob(DocumentRecord.file_preview, doc_id, "fetch a preview")

    def get_content(self, doc_id: uuid.UUID) -> bytes:
        return self._get_blob(DocumentRecord.file_content, doc_id, "fetch a content")

    def _get_blob(self, column: Any, doc_id: uuid.UUID, action: str) -> bytes:
        with _storage_errors(action):
            query = select(column).where(DocumentRecord.id == doc_id)
            with self._db.session() as session:
                blob = session.execute(query).scalar_one_or_none()
        if blob is None:
            raise DocumentNotFoundError(doc_id)
        return bytes(blob)
