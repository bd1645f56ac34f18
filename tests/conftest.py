"""Shared fixtures for fyde tests."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from _helpers import FakeExtractor, FakeRenderer, FakeSniffer, make_pdf

from fyde.db import Database
from fyde.documents.service import IngestionPipeline
from fyde.documents.sql_store import SqlMetadataStore

if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path


# =========================================================================
# Fixtures
# =========================================================================


@pytest.fixture
def database() -> Iterator[Database]:
    """Migrated in-memory database."""
    db = Database.open()
    yield db
    db.close()


@pytest.fixture
def store(database: Database) -> SqlMetadataStore:
    return SqlMetadataStore(database)


@pytest.fixture
def pipeline(store: SqlMetadataStore) -> IngestionPipeline:
    """Pipeline with the real PDF engines."""
    return IngestionPipeline(store)


@pytest.fixture
def fake_pipeline(store: SqlMetadataStore) -> IngestionPipeline:
    """Pipeline with deterministic engine doubles."""
    return IngestionPipeline(
        store,
        renderer=FakeRenderer(),
        extractor=FakeExtractor(),
        sniffer=FakeSniffer(),
    )


@pytest.fixture
def pdf_bytes() -> bytes:
    return make_pdf("Alpha", "Bravo")


@pytest.fixture
def pdf_file(tmp_path: Path, pdf_bytes: bytes) -> Path:
    path = tmp_path / "sample.pdf"
    path.write_bytes(pdf_bytes)
    return path
