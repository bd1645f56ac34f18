"""DocumentRecord — the single ``document`` table.

Metadata columns and both binary artifacts live in one row.  Listing
queries select only the metadata columns (see ``METADATA_COLUMNS``).
"""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import LargeBinary
from sqlmodel import Field, SQLModel

from .types import UTCDateTime, UUIDBytes


class DocumentRecord(SQLModel, table=True):
    """One ingested file per row."""

    __tablename__ = "document"

    id: uuid.UUID = Field(primary_key=True, sa_type=UUIDBytes)
    name: str
    checksum: str
    detected_type: str
    size: int
    created_at: datetime = Field(sa_type=UTCDateTime)
    transcript: str | None = Field(default=None)
    file_content: bytes = Field(sa_type=LargeBinary)
    file_preview: bytes = Field(sa_type=LargeBinary)


METADATA_COLUMNS = (
    "id",
    "name",
    "checksum",
    "detected_type",
    "size",
    "created_at",
    "transcript",
)
"""Non-blob columns, in the order ``Metadata`` declares its fields."""
