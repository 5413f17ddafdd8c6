"""Where contentport keeps its database and stored attachment payloads."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Final

from .env import optional_env_var

APP_DIR_NAME: Final[str] = "contentport"
DEFAULT_DB_FILENAME: Final[str] = "contentport.db"
UPLOADS_DIRNAME: Final[str] = "attachments"


@dataclass(frozen=True, slots=True)
class StorageConfig:
    """Data directory layout: ``<data_dir>/contentport.db`` and ``<data_dir>/attachments/``."""

    data_dir: Path
    database_filename: str = DEFAULT_DB_FILENAME
    uploads_dirname: str = UPLOADS_DIRNAME

    def resolve_data_dir(self, *, ensure: bool = False) -> Path:
        data_dir = self.data_dir.expanduser().resolve()
        if ensure:
            data_dir.mkdir(parents=True, exist_ok=True)
        return data_dir

    def database_path(self, *, ensure: bool = True) -> Path:
        return self.resolve_data_dir(ensure=ensure) / self.database_filename

    def uploads_path(self, *, ensure: bool = True) -> Path:
        uploads = self.resolve_data_dir(ensure=ensure) / self.uploads_dirname
        if ensure:
            uploads.mkdir(exist_ok=True)
        return uploads

    def database_uri(self) -> str:
        return f"sqlite+pysqlite:///{self.database_path()}"


@dataclass(frozen=True, slots=True)
class DatabaseConfig:
    uri: str


def _platform_data_home() -> Path:
    if os.name == "nt":
        local = optional_env_var("LOCALAPPDATA")
        return Path(local) if local else Path.home() / "AppData" / "Local"
    xdg = optional_env_var("XDG_DATA_HOME")
    return Path(xdg) if xdg else Path.home() / ".local" / "share"


def get_storage_config() -> StorageConfig:
    configured = optional_env_var("CONTENTPORT_DATA_DIR")
    data_dir = Path(configured) if configured else _platform_data_home() / APP_DIR_NAME
    return StorageConfig(data_dir=data_dir)


def get_database_config(*, storage: StorageConfig | None = None) -> DatabaseConfig:
    """``DATABASE_URI`` wins over the SQLite file inside the data directory."""

    override = optional_env_var("DATABASE_URI")
    if override:
        return DatabaseConfig(uri=override)
    return DatabaseConfig(uri=(storage or get_storage_config()).database_uri())
