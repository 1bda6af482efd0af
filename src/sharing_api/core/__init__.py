"""Shared primitives for the sharing preference broker."""

from .cache import OwnerCache
from .config import CoreSettings, clear_config_cache, get_config
from .exceptions import (
    ConfigException,
    NotPermittedError,
    PreferencesCorruptError,
    SharingAPIException,
    StorageException,
)
from .logging import (
    JSONFormatter,
    StandardFormatter,
    configure_logging,
    get_logger,
)

__all__ = [
    # Config
    "CoreSettings",
    "get_config",
    "clear_config_cache",
    # Cache
    "OwnerCache",
    # Exceptions
    "SharingAPIException",
    "ConfigException",
    "StorageException",
    "PreferencesCorruptError",
    "NotPermittedError",
    # Logging
    "JSONFormatter",
    "StandardFormatter",
    "configure_logging",
    "get_logger",
]
