"""Custom exception hierarchy for fyde."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import uuid


class FydeError(Exception):
    """Base exception for all fyde errors."""


# ---------------------------------------------------------------------------
# Setup
# ---------------------------------------------------------------------------


class ConfigSetupError(FydeError):
    """Raised when the configuration directory cannot be prepared."""


class StorageInitError(FydeError):
    """Raised when the database cannot be opened, configured or migrated."""


# ---------------------------------------------------------------------------
# Ingestion
# ---------------------------------------------------------------------------


class DocumentError(FydeError):
    """Base exception for failures while ingesting a file."""


class FileAccessError(DocumentError):
    """Raised when the source file cannot be opened or read."""


class InvalidFileFormatError(DocumentError):
    """Raised when the sniffed media type is missing or not authorized."""

    def __init__(self, file_type: str) -> None:
        self.file_type = file_type
        super().__init__(f"invalid file format detected: {file_type}")


class InvalidSizeError(DocumentError):
    """Raised when the bytes read differ from the size reported by the filesystem."""

    def __init__(self, expected: int, actual: int) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"the saved size is different than the one fetched: expected {expected}, read {actual}"
        )


class PathIsDirError(DocumentError):
    """Raised when the given path points to a directory."""

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"the given path doesn't point to a file: {path}")


class ExtractTextError(DocumentError):
    """Raised when the text extraction engine fails."""


class RenderPreviewError(DocumentError):
    """Raised when the preview rendering engine fails."""


# ---------------------------------------------------------------------------
# Storage
# ---------------------------------------------------------------------------


class StorageError(FydeError):
    """Raised on storage backend failures."""


class QueryBuildError(StorageError):
    """Raised when a statement cannot be constructed or compiled."""


class QueryExecutionError(StorageError):
    """Raised when the database rejects or fails to run a statement."""


class DocumentNotFoundError(StorageError):
    """Raised when no document matches the requested identifier."""

    def __init__(self, doc_id: uuid.UUID) -> None:
        self.doc_id = doc_id
        super().__init__(f"document not found: {doc_id}")
