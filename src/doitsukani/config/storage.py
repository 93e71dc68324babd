"""Where doitsukani keeps its run history and HTTP cache."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Final

DATA_DIR_ENV: Final[str] = "DOITSUKANI_DATA_DIR"
DATABASE_URI_ENV: Final[str] = "DATABASE_URI"
DATABASE_FILENAME: Final[str] = "doitsukani.db"
HTTP_CACHE_FILENAME: Final[str] = "http_cache.db"


@dataclass(frozen=True, slots=True)
class StorageConfig:
    data_dir: Path
    database_uri: str

    @property
    def http_cache_path(self) -> Path:
        return self.data_dir / HTTP_CACHE_FILENAME


def _platform_data_home() -> Path:
    if os.name == "nt":
        return Path(os.getenv("LOCALAPPDATA") or Path.home() / "AppData" / "Local")
    return Path(os.getenv("XDG_DATA_HOME") or Path.home() / ".local" / "share")


def get_storage_config() -> StorageConfig:
    """Resolve (and create) the data directory.

    ``DATABASE_URI`` replaces the sqlite file in the data directory, which is
    what the tests use to run against an in-memory database.
    """

    override = os.getenv(DATA_DIR_ENV)
    data_dir = Path(override) if override else _platform_data_home() / "doitsukani"
    data_dir = data_dir.expanduser().resolve()
    data_dir.mkdir(parents=True, exist_ok=True)
    database_uri = os.getenv(DATABASE_URI_ENV) or (
        f"sqlite+pysqlite:///{data_dir / DATABASE_FILENAME}"
    )
    return StorageConfig(data_dir=data_dir, database_uri=database_uri)
