# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Ourochronos Contributors

"""Core configuration - centralized config for the sharing_api package.

All environment-based configuration should flow through this module.
This provides a single source of truth and consistent defaults.

Usage:
    from sharing_api.core.config import get_config
    config = get_config()

    storage_dir = config.storage_path
    log_level = config.log_level
"""

from __future__ import annotations

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class CoreSettings(BaseSettings):
    """Core configuration settings for the sharing preference broker.

    Settings can be configured via environment variables using the
    SHARING_API_ prefix, or through a local .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        env_prefix="SHARING_API_",
    )

    # ==========================================================================
    # STORAGE SETTINGS
    # ==========================================================================

    service_name: str = Field(
        default="SharingAPI",
        description="Namespace under which owner preference records are stored",
    )
    data_dir: str = Field(
        default="data",
        description="Root directory for persisted preference records",
    )
    storage_backend: str = Field(
        default="file",
        description="Preference storage backend: 'file' or 'memory'",
    )

    # ==========================================================================
    # CACHE SETTINGS
    # ==========================================================================

    cache_max_size: int = Field(
        default=0,
        description="Maximum number of cached owner records (0 = unbounded)",
    )

    # ==========================================================================
    # LOGGING SETTINGS
    # ==========================================================================

    log_level: str = Field(
        default="INFO",
        description="Log level (DEBUG, INFO, WARNING, ERROR)",
    )
    log_format: str = Field(
        default="",
        description="Log format: 'json', 'text', or '' (auto-detect)",
    )
    log_file: str | None = Field(
        default=None,
        description="Log file path (optional)",
    )

    # ==========================================================================
    # COMPUTED PROPERTIES
    # ==========================================================================

    @property
    def storage_path(self) -> Path:
        """Directory holding one record per owner for this service."""
        return Path(self.data_dir) / self.service_name


# ==========================================================================
# GLOBAL CONFIG INSTANCE (lazy loaded)
# ==========================================================================

_config: CoreSettings | None = None


def get_config() -> CoreSettings:
    """Get the global configuration instance.

    Returns:
        The singleton CoreSettings instance.
    """
    global _config
    if _config is None:
        _config = CoreSettings()
    return _config


def clear_config_cache() -> None:
    """Clear the config cache. Useful for testing."""
    global _config
    _config = None
