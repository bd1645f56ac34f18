"""Sdk facade — configuration, database and ingestion pipeline wiring."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from fyde.config import SdkConfig, StorageType, resolve_db_path
from fyde.db import Database
from fyde.documents.service import IngestionPipeline
from fyde.documents.sql_store import SqlMetadataStore

if TYPE_CHECKING:
    from fyde.documents.engines import PreviewRenderer, TextExtractor, TypeSniffer

logger = logging.getLogger(__name__)


class Sdk:
    """Entry point for an embedding application.

    Opens (and migrates) the document database selected by *config* and
    exposes the ingestion pipeline as :attr:`documents`.

    Usage::

        with Sdk(SdkConfig(storage_type=StorageType.FILE_SYSTEM)) as sdk:
            doc = sdk.documents.save_file_from_path("invoice.pdf")
            first_page = sdk.documents.get_all()
    """

    def __init__(
        self,
        config: SdkConfig | None = None,
        *,
        renderer: PreviewRenderer | None = None,
        extractor: TextExtractor | None = None,
        sniffer: TypeSniffer | None = None,
    ) -> None:
        self.config = config or SdkConfig()
        self._closed = False

        if self.config.storage_type is StorageType.FILE_SYSTEM:
            db_path = resolve_db_path(self.config)
            logger.debug("Opening document database at %s", db_path)
        else:
            db_path = None
            logger.debug("Opening in-memory document database")

        self._database = Database.open(db_path)
        self.documents = IngestionPipeline(
            SqlMetadataStore(self._database),
            renderer=renderer,
            extractor=extractor,
            sniffer=sniffer,
            authorized_types=self.config.authorized_types,
            require_transcript=self.config.require_transcript,
        )

    @property
    def database(self) -> Database:
        return self._database

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def close(self) -> None:
        """Release the database connection. Safe to call twice."""
        if self._closed:
            return
        self._closed = True
        self._database.close()

    def __enter__(self) -> Sdk:
        return self

    def __exit__(self, exc_type: object, exc_val: object, exc_tb: object) -> None:
        self.close()
