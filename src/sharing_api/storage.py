"""Durable storage for owner preference records.

Each owner has exactly one record, addressed by ``(namespace, owner_id)``.
A missing record is normal and means "use the share type defaults". A record
that cannot be read is treated the same way.
"""

from __future__ import annotations

import copy
import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable
from urllib.parse import quote, unquote

from .core.exceptions import ConfigException, StorageException

if TYPE_CHECKING:
    from .core.config import CoreSettings

logger = logging.getLogger(__name__)


@runtime_checkable
class PreferenceStorage(Protocol):
    """Protocol for owner preference persistence."""

    def load(self, owner_id: str) -> dict[str, Any] | None:
        """Load the serialized record for an owner.

        Returns:
            The record, or None if there is none or it is unreadable
        """
        ...

    def save(self, owner_id: str, data: dict[str, Any]) -> None:
        """Replace the owner's record with ``data``.

        Readers must never observe a partially written record.
        """
        ...

    def delete(self, owner_id: str) -> bool:
        """Delete an owner's record. Returns False if there was none."""
        ...

    def list_owners(self) -> list[str]:
        """List owner ids with a stored record."""
        ...


class InMemoryPreferenceStorage:
    """In-memory preference storage for tests and ephemeral hosts.

    Not persistent - data lost on process restart.
    """

    def __init__(self) -> None:
        self._storage: dict[str, dict[str, Any]] = {}

    def load(self, owner_id: str) -> dict[str, Any] | None:
        data = self._storage.get(owner_id)
        return copy.deepcopy(data) if data is not None else None

    def save(self, owner_id: str, data: dict[str, Any]) -> None:
        self._storage[owner_id] = copy.deepcopy(data)

    def delete(self, owner_id: str) -> bool:
        return self._storage.pop(owner_id, None) is not None

    def list_owners(self) -> list[str]:
        return list(self._storage.keys())

    def clear(self) -> None:
        """Clear all stored data (testing helper)."""
        self._storage.clear()


class FilePreferenceStorage:
    """File-based preference storage.

    Stores each owner's record as ``<base_path>/<namespace>/<owner_id>.json``,
    with the owner id percent-encoded.
    Writes go to a temporary file that is then renamed over the target.
    """

    def __init__(self, base_path: str | Path, namespace: str | None = None) -> None:
        """Initialize file-based storage.

        Args:
            base_path: Root data directory
            namespace: Service name the records belong to; records live
                directly under ``base_path`` when omitted
        """
        self._dir = Path(base_path) / namespace if namespace else Path(base_path)
        self._dir.mkdir(parents=True, exist_ok=True)

    @property
    def directory(self) -> Path:
        return self._dir

    def _file_path(self, owner_id: str) -> Path:
        # Reversible: each owner id maps to exactly one file
        safe_id = quote(str(owner_id), safe="")
        return self._dir / f"{safe_id}.json"

    def load(self, owner_id: str) -> dict[str, Any] | None:
        file_path = self._file_path(owner_id)
        if not file_path.exists():
            return None

        try:
            data = json.loads(file_path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            logger.warning(f"Ignoring unreadable preferences for {owner_id}: {e}")
            return None

        if not isinstance(data, dict):
            logger.warning(f"Ignoring preferences for {owner_id}: expected an object, got {type(data).__name__}")
            return None
        return data

    def save(self, owner_id: str, data: dict[str, Any]) -> None:
        file_path = self._file_path(owner_id)
        temp_path = file_path.with_suffix(".json.tmp")

        try:
            temp_path.write_text(json.dumps(data, indent=2), encoding="utf-8")
            temp_path.replace(file_path)
        except OSError as e:
            if temp_path.exists():
                temp_path.unlink()
            raise StorageException(f"Failed to save preferences: {e}", owner_id=owner_id) from e

    def delete(self, owner_id: str) -> bool:
        file_path = self._file_path(owner_id)
        if file_path.exists():
            file_path.unlink()
            return True
        return False

    def list_owners(self) -> list[str]:
        return sorted(unquote(f.stem) for f in self._dir.glob("*.json"))


def create_storage(settings: CoreSettings) -> PreferenceStorage:
    """Build the storage backend selected by configuration.

    Raises:
        ConfigException: If the configured backend is unknown
    """
    backend = settings.storage_backend.strip().lower()
    if backend == "file":
        return FilePreferenceStorage(settings.storage_path)
    if backend == "memory":
        return InMemoryPreferenceStorage()
    raise ConfigException(f"Unknown storage backend: {settings.storage_backend!r}", setting="storage_backend")
