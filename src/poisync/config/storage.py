"""Where the element store and the HTTP cache live on disk."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Final

APP_DIR_NAME: Final[str] = "poisync"
DATABASE_FILENAME: Final[str] = "poisync.db"
HTTP_CACHE_FILENAME: Final[str] = "http_cache.db"


@dataclass(frozen=True, slots=True)
class StorageConfig:
    """Data directory for local state. Created on first use."""

    data_dir: Path

    def _directory(self) -> Path:
        directory = self.data_dir.expanduser().resolve()
        directory.mkdir(parents=True, exist_ok=True)
        return directory

    def database_path(self) -> Path:
        return self._directory() / DATABASE_FILENAME

    def http_cache_path(self) -> Path:
        return self._directory() / HTTP_CACHE_FILENAME

    def database_uri(self) -> str:
        return f"sqlite+pysqlite:///{self.database_path()}"


def _default_data_dir() -> Path:
    xdg_data_home = os.getenv("XDG_DATA_HOME")
    base = Path(xdg_data_home) if xdg_data_home else Path.home() / ".local" / "share"
    return base / APP_DIR_NAME


def get_storage_config() -> StorageConfig:
    override = os.getenv("POISYNC_DATA_DIR")
    return StorageConfig(data_dir=Path(override) if override else _default_data_dir())


def get_database_uri() -> str:
    """``DATABASE_URI`` when set, else a SQLite file in the data directory."""

    return os.getenv("DATABASE_URI") or get_storage_config().database_uri()


def get_http_cache_path() -> Path:
    return get_storage_config().http_cache_path()
