"""Application configuration helpers."""

from __future__ import annotations

from .env import optional_env_var
from .errors import ConfigurationError
from .logging import configure_logging, get_log_level
from .storage import (
    DatabaseConfig,
    StorageConfig,
    StoreBackend,
    StoreConfig,
    get_database_config,
    get_storage_config,
    get_store_config,
)

__all__ = [
    "ConfigurationError",
    "DatabaseConfig",
    "StorageConfig",
    "StoreBackend",
    "StoreConfig",
    "configure_logging",
    "get_database_config",
    "get_log_level",
    "get_storage_config",
    "get_store_config",
    "optional_env_var",
]
