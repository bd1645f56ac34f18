"""Documents layer — value types, storage gateway, engines, ingestion pipeline."""

from fyde.documents.engines import (
    FiletypeSniffer,
    PdfiumPreviewRenderer,
    PdfplumberTextExtractor,
    PreviewRenderer,
    TextExtractor,
    TypeSniffer,
)
from fyde.documents.protocol import StorageGateway
from fyde.documents.service import (
    DEFAULT_LIMIT,
    MAX_LIMIT,
    IngestionPipeline,
    clamp_limit,
    compute_checksum,
)
from fyde.documents.sql_store import SqlMetadataStore
from fyde.documents.types import Document, ListCursor, Metadata

__all__ = [
    "DEFAULT_LIMIT",
    "MAX_LIMIT",
    "Document",
    "FiletypeSniffer",
    "IngestionPipeline",
    "ListCursor",
    "Metadata",
    "PdfiumPreviewRenderer",
    "PdfplumberTextExtractor",
    "PreviewRenderer",
    "SqlMetadataStore",
    "StorageGateway",
    "TextExtractor",
    "TypeSniffer",
    "clamp_limit",
    "compute_checksum",
]
