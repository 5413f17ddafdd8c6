"""Application configuration helpers."""

from __future__ import annotations

from .content_types import (
    ContentTypesConfig,
    get_content_types_config,
    load_content_types,
    parse_content_types,
)
from .env import optional_env_var, require_env_path, require_env_var, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .imports import ImportConfig, get_import_config
from .storage import DatabaseConfig, StorageConfig, get_database_config, get_storage_config

__all__ = [
    "ConfigurationError",
    "ContentTypesConfig",
    "DatabaseConfig",
    "ImportConfig",
    "MissingConfigurationError",
    "StorageConfig",
    "get_content_types_config",
    "get_database_config",
    "get_import_config",
    "get_storage_config",
    "load_content_types",
    "parse_content_types",
    "optional_env_var",
    "require_env_path",
    "require_env_var",
    "require_env_vars",
]
