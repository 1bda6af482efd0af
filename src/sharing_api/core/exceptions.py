# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Ourochronos Contributors

"""Custom exception hierarchy for the sharing preference broker.

These are raised at internal seams only. The public ``SharingAPI`` facade
turns every one of them into an absent result so a misbehaving feature or a
damaged data file can never abort the host.
"""

from __future__ import annotations


class SharingAPIException(Exception):  # noqa: N818
    """Base exception for all sharing_api errors."""

    def __init__(self, message: str, details: dict | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
        }


class ConfigException(SharingAPIException):
    """Exception for configuration errors.

    Raised when:
    - An unknown storage backend is configured
    - Configuration values are out of range
    """

    def __init__(self, message: str, setting: str | None = None):
        details = {}
        if setting:
            details["setting"] = setting
        super().__init__(message, details)
        self.setting = setting


class StorageException(SharingAPIException):
    """Exception for preference storage write failures."""

    def __init__(self, message: str, owner_id: str | None = None):
        details = {}
        if owner_id is not None:
            details["owner_id"] = owner_id
        super().__init__(message, details)
        self.owner_id = owner_id


class PreferencesCorruptError(SharingAPIException):
    """A persisted preference record could not be interpreted.

    Callers treat this exactly like a missing record.
    """

    def __init__(self, message: str, owner_id: str | None = None):
        details = {}
        if owner_id is not None:
            details["owner_id"] = owner_id
        super().__init__(message, details)
        self.owner_id = owner_id


class NotPermittedError(SharingAPIException):
    """The share type does not offer the requested recipient category."""

    def __init__(self, type_name: str, category: str):
        message = f"Share type {type_name!r} does not allow customizing {category!r}"
        super().__init__(message, {"type_name": type_name, "category": category})
        self.type_name = type_name
        self.category = category
