"""Data storage configuration helpers."""

from __future__ import annotations

import os
from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path
from typing import Final

from .env import optional_env_var
from .errors import ConfigurationError

APP_DIR_NAME: Final[str] = "guild_logbook"
DEFAULT_DB_FILENAME: Final[str] = "guild_logbook.db"
DEFAULT_JSON_FILENAME: Final[str] = "logbook.json"


class StoreBackend(StrEnum):
    """Persistence backends available for the roster collections."""

    JSON = "json"
    SQL = "sql"


@dataclass(frozen=True, slots=True)
class StorageConfig:
    data_dir: Path
    database_filename: str = DEFAULT_DB_FILENAME
    json_filename: str = DEFAULT_JSON_FILENAME

    def resolve_data_dir(self) -> Path:
        return self.data_dir.expanduser().resolve()

    def ensure_data_dir(self) -> Path:
        data_dir = self.resolve_data_dir()
        data_dir.mkdir(parents=True, exist_ok=True)
        return data_dir

    def database_path(self, *, ensure: bool = True) -> Path:
        base = self.ensure_data_dir() if ensure else self.resolve_data_dir()
        return base / self.database_filename

    def json_path(self, *, ensure: bool = True) -> Path:
        base = self.ensure_data_dir() if ensure else self.resolve_data_dir()
        return base / self.json_filename

    def database_uri(self) -> str:
        return f"sqlite+pysqlite:///{self.database_path()}"


@dataclass(frozen=True, slots=True)
class DatabaseConfig:
    uri: str


@dataclass(frozen=True, slots=True)
class StoreConfig:
    backend: StoreBackend
    json_path: Path
    database: DatabaseConfig | None = None


def _default_data_dir() -> Path:
    if os.name == "nt":
        base = os.getenv("LOCALAPPDATA")
        base_path = Path(base) if base else (Path.home() / "AppData" / "Local")
    else:
        base = os.getenv("XDG_DATA_HOME")
        base_path = Path(base) if base else (Path.home() / ".local" / "share")
    return (base_path / APP_DIR_NAME).expanduser().resolve()


def get_storage_config() -> StorageConfig:
    env_dir = optional_env_var("GUILD_LOGBOOK_DATA_DIR")
    data_dir = Path(env_dir) if env_dir else _default_data_dir()
    return StorageConfig(data_dir=data_dir)


def get_database_config(*, storage: StorageConfig | None = None) -> DatabaseConfig:
    env_uri = optional_env_var("DATABASE_URI")
    if env_uri:
        return DatabaseConfig(uri=env_uri)
    storage_config = storage or get_storage_config()
    return DatabaseConfig(uri=storage_config.database_uri())


def get_store_config(*, storage: StorageConfig | None = None) -> StoreConfig:
    storage_config = storage or get_storage_config()

    backend_name = optional_env_var("GUILD_LOGBOOK_STORE") or StoreBackend.JSON.value
    try:
        backend = StoreBackend(backend_name.lower())
    except ValueError as exc:
        choices = ", ".join(member.value for member in StoreBackend)
        raise ConfigurationError(
            f"Unsupported GUILD_LOGBOOK_STORE value {backend_name!r} (expected one of: {choices})"
        ) from exc

    env_json = optional_env_var("GUILD_LOGBOOK_JSON_PATH")
    json_path = (
        Path(env_json).expanduser().resolve()
        if env_json
        else storage_config.json_path(ensure=backend is StoreBackend.JSON)
    )
    database = (
        get_database_config(storage=storage_config) if backend is StoreBackend.SQL else None
    )
    return StoreConfig(backend=backend, json_path=json_path, database=database)
