"""IngestionPipeline — read, fingerprint, validate, render, extract, persist.

``save_file_from_path`` is the only mutating operation.  Every stage is a
hard gate: the first failure raises and nothing is written.  The read
operations delegate straight to the storage gateway; no cache is kept.
"""

from __future__ import annotations

import hashlib
import logging
import os
from datetime import UTC, datetime
from pathlib import Path
from typing import TYPE_CHECKING, BinaryIO

from uuid6 import uuid7

from fyde.config import AUTHORIZED_MIME_TYPES
from fyde.exceptions import (
    ExtractTextError,
    FileAccessError,
    InvalidFileFormatError,
    InvalidSizeError,
    PathIsDirError,
    RenderPreviewError,
)

from .engines import FiletypeSniffer, PdfiumPreviewRenderer, PdfplumberTextExtractor
from .types import Document, ListCursor, Metadata

if TYPE_CHECKING:
    import uuid
    from collections.abc import Iterable

    from .engines import PreviewRenderer, TextExtractor, TypeSniffer
    from .protocol import StorageGateway

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 20
MAX_LIMIT = 100
UNKNOWN_TYPE = "unknown"


def compute_checksum(content: bytes) -> str:
    """Return the hex SHA-256 digest of *content*."""
    return hashlib.sha256(content).hexdigest()


def clamp_limit(limit: int | None) -> int:
    """Apply the default page size and keep it within ``[0, MAX_LIMIT]``."""
    if limit is None:
        return DEFAULT_LIMIT
    return max(0, min(limit, MAX_LIMIT))


def _reported_size(handle: BinaryIO) -> int:
    return os.fstat(handle.fileno()).st_size


class IngestionPipeline:
    """Turns files on disk into persisted :class:`Document` records.

    The three engines are injected by capability; the defaults handle PDF.

    Usage::

        pipeline = IngestionPipeline(SqlMetadataStore(Database.open()))
        doc = pipeline.save_file_from_path("report.pdf")
        page = pipeline.get_all(limit=50)
    """

    def __init__(
        self,
        storage: StorageGateway,
        *,
        renderer: PreviewRenderer | None = None,
        extractor: TextExtractor | None = None,
        sniffer: TypeSniffer | None = None,
        authorized_types: Iterable[str] = AUTHORIZED_MIME_TYPES,
        require_transcript: bool = True,
    ) -> None:
        self._storage = storage
        self._renderer = renderer or PdfiumPreviewRenderer()
        self._extractor = extractor or PdfplumberTextExtractor()
        self._sniffer = sniffer or FiletypeSniffer()
        self._authorized_types = frozenset(t.lower() for t in authorized_types)
        self._require_transcript = require_transcript

    @property
    def authorized_types(self) -> frozenset[str]:
        return self._authorized_types

    # ------------------------------------------------------------------
    # Ingestion
    # ------------------------------------------------------------------

    def save_file_from_path(self, path: str | os.PathLike[str]) -> Document:
        """Ingest the file at *path* and persist it.

        Returns the persisted :class:`Document` itself, no re-read is done.

        Raises:
            PathIsDirError: *path* is a directory.
            FileAccessError: the file cannot be opened or read.
            InvalidSizeError: bytes read differ from the reported size.
            InvalidFileFormatError: unknown or unauthorized media type.
            RenderPreviewError: the preview cannot be rendered.
            ExtractTextError: text extraction failed (strict mode).
            StorageError: the gateway rejected the insert.
        """
        source = Path(path)
        logger.debug("Start saving file from path: %s", source)

        if source.is_dir() or not source.name:
            raise PathIsDirError(str(source))

        content = self._read(source)
        checksum = compute_checksum(content)
        detected_type = self._check_type(content)
        preview = self._render(content)
        transcript = self._extract(content)

        document = Document(
            metadata=Metadata(
                id=uuid7(),
                name=source.name,
                checksum=checksum,
                detected_type=detected_type,
                size=len(content),
                created_at=datetime.now(UTC),
                transcript=transcript,
            ),
            file_content=content,
            file_preview=preview,
        )

        self._storage.save(document)
        logger.info(
            "Saved document %s (%s, %d bytes)",
            document.metadata.id,
            document.metadata.name,
            document.metadata.size,
        )
        return document

    def _read(self, source: Path) -> bytes:
        try:
            with source.open("rb") as handle:
                reported = _reported_size(handle)
                content = handle.read()
        except OSError as exc:
            msg = f"failed to access a file: {exc}"
            raise FileAccessError(msg) from exc

        if len(content) != reported:
            raise InvalidSizeError(expected=reported, actual=len(content))
        return content

    def _check_type(self, content: bytes) -> str:
        sniffed = self._sniffer.sniff(content)
        if not sniffed:
            raise InvalidFileFormatError(UNKNOWN_TYPE)
        detected = sniffed.lower()
        if detected not in self._authorized_types:
            raise InvalidFileFormatError(detected)
        return detected

    def _render(self, content: bytes) -> bytes:
        try:
            return self._renderer.render(content)
        except RenderPreviewError:
            raise
        except Exception as exc:
            msg = f"failed to render the preview: {exc}"
            raise RenderPreviewError(msg) from exc

    def _extract(self, content: bytes) -> str | None:
        try:
            return self._extractor.extract(content)
        except Exception as exc:
            if not self._require_transcript:
                logger.warning("Text extraction failed, storing without transcript", exc_info=True)
                return None
            if isinstance(exc, ExtractTextError):
                raise
            msg = f"failed to extract the text from the pdf: {exc}"
            raise ExtractTextError(msg) from exc

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_all(self, after: Metadata | None = None, limit: int | None = None) -> list[Metadata]:
        """List metadata ordered by id, strictly after *after* when given.

        *limit* defaults to 20 and is capped at 100.
        """
        cursor = ListCursor(
            limit=clamp_limit(limit),
            after_id=after.id if after is not None else None,
        )
        return self._storage.get_all(cursor)

    def get_by_id(self, doc_id: uuid.UUID) -> Metadata:
        return self._storage.get_by_id(doc_id)

    def get_preview(self, metadata: Metadata) -> bytes:
        return self._storage.get_preview(metadata.id)

    def get_content(self, metadata: Metadata) -> bytes:
        return self._storage.get_content(metadata.id)
