"""Application configuration helpers."""

from __future__ import annotations

from .env import optional_env_var
from .errors import ConfigurationError
from .handlers import HandlerConfig, get_handler_config, parse_duplicate_key_policy
from .logging import configure_logging, level_for_verbosity
from .storage import (
    DatabaseConfig,
    StorageConfig,
    get_database_config,
    get_database_uri,
    get_storage_config,
)

__all__ = [
    "ConfigurationError",
    "DatabaseConfig",
    "HandlerConfig",
    "StorageConfig",
    "configure_logging",
    "get_database_config",
    "get_database_uri",
    "get_handler_config",
    "get_storage_config",
    "level_for_verbosity",
    "optional_env_var",
    "parse_duplicate_key_policy",
]
