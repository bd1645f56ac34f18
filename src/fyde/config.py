"""SDK configuration — storage selection and config-directory resolution."""

from __future__ import annotations

import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from fyde.exceptions import ConfigSetupError

APP_NAME = "fyde"
DB_FILENAME = "storage.db3"

AUTHORIZED_MIME_TYPES: tuple[str, ...] = ("application/pdf",)
"""Media types accepted by ``save_file_from_path`` unless overridden."""


class StorageType(Enum):
    """Where the document database lives."""

    MEMORY = "memory"
    FILE_SYSTEM = "file_system"


@dataclass(frozen=True)
class SdkConfig:
    """Options for :class:`fyde.Sdk`.

    Attributes:
        storage_type: In-memory (ephemeral) or file-backed database.
        data_dir: Overrides the config directory for file-backed storage.
        authorized_types: Media types the pipeline accepts.
        require_transcript: When ``False`` a text-extraction failure stores
            the document without a transcript instead of aborting.
    """

    storage_type: StorageType = StorageType.MEMORY
    data_dir: str | Path | None = None
    authorized_types: tuple[str, ...] = AUTHORIZED_MIME_TYPES
    require_transcript: bool = True


def default_config_dir() -> Path:
    """Return ``$XDG_CONFIG_HOME/fyde``, falling back to ``~/.config/fyde``."""
    base = os.environ.get("XDG_CONFIG_HOME")
    root = Path(base) if base else Path.home() / ".config"
    return root / APP_NAME


def resolve_db_path(config: SdkConfig) -> Path:
    """Create the config directory if needed and return the database file path."""
    config_dir = Path(config.data_dir) if config.data_dir else default_config_dir()
    try:
        config_dir.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        msg = f"failed to setup the config directory {config_dir}: {exc}"
        raise ConfigSetupError(msg) from exc
    return config_dir / DB_FILENAME
