"""fyde: local document ingestion.

Fingerprint, preview and transcribe PDF files, then keep them in a
keyset-paginated SQLite store.
"""

__version__ = "0.1.0"

from fyde._sdk import Sdk
from fyde.config import AUTHORIZED_MIME_TYPES, SdkConfig, StorageType
from fyde.documents import (
    Document,
    IngestionPipeline,
    Metadata,
    SqlMetadataStore,
    StorageGateway,
)
from fyde.exceptions import (
    ConfigSetupError,
    DocumentError,
    DocumentNotFoundError,
    ExtractTextError,
    FileAccessError,
    FydeError,
    InvalidFileFormatError,
    InvalidSizeError,
    PathIsDirError,
    QueryBuildError,
    QueryExecutionError,
    RenderPreviewError,
    StorageError,
    StorageInitError,
)

__all__ = [
    "AUTHORIZED_MIME_TYPES",
    "ConfigSetupError",
    "Document",
    "DocumentError",
    "DocumentNotFoundError",
    "ExtractTextError",
    "FileAccessError",
    "FydeError",
    "IngestionPipeline",
    "InvalidFileFormatError",
    "InvalidSizeError",
    "Metadata",
    "PathIsDirError",
    "QueryBuildError",
    "QueryExecutionError",
    "RenderPreviewError",
    "Sdk",
    "SdkConfig",
    "SqlMetadataStore",
    "StorageError",
    "StorageGateway",
    "StorageInitError",
    "StorageType",
    "__version__",
]
