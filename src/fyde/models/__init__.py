"""SQLModel database models for fyde."""

from fyde.models.document import METADATA_COLUMNS, DocumentRecord
from fyde.models.types import UTCDateTime, UUIDBytes

__all__ = [
    "METADATA_COLUMNS",
    "DocumentRecord",
    "UTCDateTime",
    "UUIDBytes",
]
