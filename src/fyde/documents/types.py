"""Value types: Metadata, Document, ListCursor."""

from __future__ import annotations

import base64
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


@dataclass(frozen=True, slots=True)
class Metadata:
    """Descriptive record of one ingested file.

    Attributes:
        id: Time-ordered UUIDv7 assigned at ingestion.
        name: Final segment of the source path.
        checksum: Hex-encoded SHA-256 of the raw bytes.
        detected_type: Lower-cased sniffed media type.
        size: Byte length of the raw content.
        created_at: Ingestion timestamp (UTC).
        transcript: Extracted plain text, ``None`` when not available.
    """

    id: uuid.UUID
    name: str
    checksum: str
    detected_type: str
    size: int
    created_at: datetime
    transcript: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready mapping: ``id`` as a hyphenated string, ``created_at`` as ISO-8601."""
        return {
            "id": str(self.id),
            "name": self.name,
            "checksum": self.checksum,
            "detected_type": self.detected_type,
            "size": self.size,
            "created_at": self.created_at.isoformat(),
            "transcript": self.transcript,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Metadata:
        created_at = datetime.fromisoformat(data["created_at"])
        if created_at.tzinfo is None:
            msg = "created_at must carry a UTC offset"
            raise ValueError(msg)
        return cls(
            id=uuid.UUID(data["id"]),
            name=data["name"],
            checksum=data["checksum"],
            detected_type=data["detected_type"],
            size=int(data["size"]),
            created_at=created_at,
            transcript=data.get("transcript"),
        )


@dataclass(frozen=True, slots=True)
class Document:
    """An ingested file: its metadata plus the raw bytes and the PNG preview."""

    metadata: Metadata
    file_content: bytes = field(repr=False)
    file_preview: bytes = field(repr=False)

    def to_dict(self, *, include_blobs: bool = True) -> dict[str, Any]:
        """JSON-ready mapping; the blobs are base64 strings.

        With ``include_blobs=False`` only ``metadata`` is emitted, which is
        what a listing view needs.
        """
        data: dict[str, Any] = {"metadata": self.metadata.to_dict()}
        if include_blobs:
            data["file_content"] = base64.b64encode(self.file_content).decode("ascii")
            data["file_preview"] = base64.b64encode(self.file_preview).decode("ascii")
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Document:
        return cls(
            metadata=Metadata.from_dict(data["metadata"]),
            file_content=base64.b64decode(data["file_content"], validate=True),
            file_preview=base64.b64decode(data["file_preview"], validate=True),
        )


@dataclass(frozen=True, slots=True)
class ListCursor:
    """Keyset pagination command handed to a storage gateway.

    ``limit`` is expected to be already clamped by the caller.
    """

    limit: int
    after_id: uuid.UUID | None = None
