"""Tests for SqlMetadataStore — insert, keyset listing, blob reads, errors."""

from __future__ import annotations

import random
import threading
import uuid
from typing import TYPE_CHECKING

import pytest
from _helpers import make_document
from sqlalchemy import event, text
from sqlalchemy.exc import ArgumentError, OperationalError
from uuid6 import uuid7

from fyde.documents.protocol import StorageGateway
from fyde.documents.sql_store import SqlMetadataStore, _storage_errors
from fyde.documents.types import ListCursor
from fyde.exceptions import (
    DocumentNotFoundError,
    QueryBuildError,
    QueryExecutionError,
    StorageError,
)

if TYPE_CHECKING:
    from fyde.db import Database


def _page_through(store: SqlMetadataStore, limit: int) -> list[uuid.UUID]:
    seen: list[uuid.UUID] = []
    after_id = None
    while True:
        page = store.get_all(ListCursor(limit=limit, after_id=after_id))
        if not page:
            return seen
        seen.extend(m.id for m in page)
        after_id = page[-1].id


class TestProtocol:
    def test_store_is_a_gateway(self, store: SqlMetadataStore):
        assert isinstance(store, StorageGateway)


# =========================================================================
# Save
# =========================================================================


class TestSave:
    def test_round_trip_metadata(self, store: SqlMetadataStore):
        doc = make_document(uuid7())
        store.save(doc)
        assert store.get_by_id(doc.metadata.id) == doc.metadata

    def test_null_transcript_round_trips(self, store: SqlMetadataStore):
        doc = make_document(uuid7(), transcript=None)
        store.save(doc)
        assert store.get_by_id(doc.metadata.id).transcript is None

    def test_created_at_keeps_microseconds_and_utc(self, store: SqlMetadataStore):
        doc = make_document(uuid7())
        store.save(doc)
        fetched = store.get_by_id(doc.metadata.id).created_at
        assert fetched == doc.metadata.created_at
        assert fetched.utcoffset().total_seconds() == 0

    def test_id_is_stored_as_raw_bytes(self, store: SqlMetadataStore, database: Database):
        doc = make_document(uuid7())
        store.save(doc)

        with database.session() as session:
            raw = session.execute(text("SELECT id FROM document")).scalar_one()

        assert bytes(raw) == doc.metadata.id.bytes
        assert len(raw) == 16

    def test_duplicate_id_is_execution_error(self, store: SqlMetadataStore):
        doc_id = uuid7()
        store.save(make_document(doc_id))

        with pytest.raises(QueryExecutionError):
            store.save(make_document(doc_id, name="other.pdf"))

        assert [m.name for m in store.get_all(ListCursor(limit=10))] == ["doc.pdf"]

    def test_failed_save_leaves_store_usable(self, store: SqlMetadataStore):
        doc_id = uuid7()
        store.save(make_document(doc_id))
        with pytest.raises(StorageError):
            store.save(make_document(doc_id))

        later = make_document(uuid7())
        store.save(later)
        assert store.get_by_id(later.metadata.id) == later.metadata


# =========================================================================
# Listing
# =========================================================================


class TestGetAll:
    def test_empty_store(self, store: SqlMetadataStore):
        assert store.get_all(ListCursor(limit=20)) == []

    def test_orders_by_id_regardless_of_insert_order(self, store: SqlMetadataStore):
        ids = [uuid7() for _ in range(30)]
        shuffled = ids[:]
        random.Random(7).shuffle(shuffled)
        for doc_id in shuffled:
            store.save(make_document(doc_id))

        listed = [m.id for m in store.get_all(ListCursor(limit=100))]
        assert listed == sorted(ids)

    @pytest.mark.parametrize("limit", [1, 3, 7, 30, 100])
    def test_keyset_pages_are_complete_and_disjoint(self, store: SqlMetadataStore, limit: int):
        ids = [uuid7() for _ in range(30)]
        shuffled = ids[:]
        random.Random(limit).shuffle(shuffled)
        for doc_id in shuffled:
            store.save(make_document(doc_id))

        assert _page_through(store, limit) == sorted(ids)

    def test_limit_is_applied(self, store: SqlMetadataStore):
        for _ in range(5):
            store.save(make_document(uuid7()))
        assert len(store.get_all(ListCursor(limit=2))) == 2
        assert store.get_all(ListCursor(limit=0)) == []

    def test_listing_does_not_select_blobs(self, store: SqlMetadataStore, database: Database):
        store.save(make_document(uuid7()))
        statements: list[str] = []

        def _capture(conn, cursor, statement, parameters, context, executemany):
            statements.append(statement)

        event.listen(database.engine, "before_cursor_execute", _capture)
        try:
            store.get_all(ListCursor(limit=5))
        finally:
            event.remove(database.engine, "before_cursor_execute", _capture)

        selects = [s for s in statements if s.lstrip().upper().startswith("SELECT")]
        assert selects
        assert all("file_content" not in s and "file_preview" not in s for s in selects)

    def test_listing_is_parameterized(self, store: SqlMetadataStore, database: Database):
        doc = make_document(uuid7())
        store.save(doc)
        statements: list[str] = []

        def _capture(conn, cursor, statement, parameters, context, executemany):
            statements.append(statement)

        event.listen(database.engine, "before_cursor_execute", _capture)
        try:
            store.get_all(ListCursor(limit=5, after_id=doc.metadata.id))
        finally:
            event.remove(database.engine, "before_cursor_execute", _capture)

        assert any("?" in s for s in statements)
        assert all(doc.metadata.id.hex not in s for s in statements)


# =========================================================================
# Single-row reads
# =========================================================================


class TestSingleRowReads:
    def test_blobs_round_trip(self, store: SqlMetadataStore):
        doc = make_document(uuid7())
        store.save(doc)

        assert store.get_preview(doc.metadata.id) == doc.file_preview
        assert store.get_content(doc.metadata.id) == doc.file_content

    def test_blobs_are_bytes(self, store: SqlMetadataStore):
        doc = make_document(uuid7())
        store.save(doc)
        assert type(store.get_content(doc.metadata.id)) is bytes

    @pytest.mark.parametrize("method", ["get_by_id", "get_preview", "get_content"])
    def test_missing_row_is_not_found(self, store: SqlMetadataStore, method: str):
        store.save(make_document(uuid7()))
        missing = uuid7()

        with pytest.raises(DocumentNotFoundError) as exc_info:
            getattr(store, method)(missing)

        assert exc_info.value.doc_id == missing
        assert isinstance(exc_info.value, StorageError)


# =========================================================================
# Error translation
# =========================================================================


class TestStorageErrors:
    def test_argument_error_is_build_error(self):
        with pytest.raises(QueryBuildError), _storage_errors("test"):
            msg = "bad column"
            raise ArgumentError(msg)

    def test_operational_error_is_execution_error(self):
        with pytest.raises(QueryExecutionError) as exc_info, _storage_errors("test"):
            raise OperationalError("SELECT 1", {}, Exception("database is locked"))
        assert isinstance(exc_info.value.__cause__, OperationalError)

    def test_storage_errors_pass_through(self):
        original = DocumentNotFoundError(uuid.uuid4())
        with pytest.raises(DocumentNotFoundError) as exc_info, _storage_errors("test"):
            raise original
        assert exc_info.value is original


# =========================================================================
# Concurrency
# =========================================================================


class TestConcurrentAccess:
    def test_threads_share_one_store(self, store: SqlMetadataStore):
        errors: list[BaseException] = []

        def _worker() -> None:
            try:
                for _ in range(10):
                    doc = make_document(uuid7())
                    store.save(doc)
                    store.get_by_id(doc.metadata.id)
            except BaseException as exc:  # noqa: BLE001
                errors.append(exc)

        threads = [threading.Thread(target=_worker) for _ in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert errors == []
        assert len(_page_through(store, 100)) == 40
