"""Owner preference records and the cache that fronts their storage.

Read path: a cached record if the owner has one, otherwise a transient load
from storage, otherwise the share type defaults. Reads never populate the
cache.

Write path: load-or-create the owner's record once, cache it, mutate it,
then persist the whole record before returning.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

from .core.cache import OwnerCache
from .core.exceptions import NotPermittedError, PreferencesCorruptError, StorageException
from .registry import ShareTypeEntry
from .storage import PreferenceStorage
from .types import RecipientType, SharingSettings

logger = logging.getLogger(__name__)

PreferenceChangedCallback = Callable[[str, str, str, bool], None]


@dataclass
class OwnerPreferences:
    """Everything one owner has customized.

    A share type only appears in ``settings_by_type`` once the owner toggled
    one of its categories or had preferences imported for it. Absence means
    the share type defaults apply.
    """

    owner_id: str
    settings_by_type: dict[str, SharingSettings] = field(default_factory=dict)

    def get_settings_of_type(self, type_name: str) -> SharingSettings | None:
        return self.settings_by_type.get(type_name)

    def get_or_create_settings_of_type(self, entry: ShareTypeEntry) -> SharingSettings:
        settings = self.settings_by_type.get(entry.type_name)
        if settings is None:
            settings = entry.defaults
            self.settings_by_type[entry.type_name] = settings
        return settings

    def set_settings_of_type(self, type_name: str, settings: SharingSettings) -> None:
        self.settings_by_type[type_name] = settings

    def import_settings(self, settings_by_type: Mapping[str, Mapping[str, bool]]) -> bool:
        """Install settings for share types this owner has not customized yet.

        Existing preferences always win over imported ones. The whole batch
        is validated before anything is installed.

        Raises:
            PreferencesCorruptError: If any imported value is malformed
        """
        if not isinstance(settings_by_type, Mapping):
            raise PreferencesCorruptError("Imported preferences must be an object", owner_id=self.owner_id)

        parsed = {
            str(type_name): SharingSettings.from_dict(values)
            for type_name, values in settings_by_type.items()
            if str(type_name) not in self.settings_by_type
        }
        self.settings_by_type.update(parsed)
        return True

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the persisted record layout."""
        return {
            "owner_id": self.owner_id,
            "share_settings_by_type": {
                type_name: settings.to_dict() for type_name, settings in self.settings_by_type.items()
            },
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], owner_id: str | None = None) -> OwnerPreferences:
        """Deserialize a persisted record.

        Also accepts records written with capitalised keys
        (``UserId`` / ``ShareSettingsByType`` / ``Team`` ...).

        Raises:
            PreferencesCorruptError: If the record is malformed or belongs to
                an owner other than ``owner_id``
        """
        if not isinstance(data, Mapping):
            raise PreferencesCorruptError("Preference record is not an object", owner_id=owner_id)

        stored_owner = data.get("owner_id", data.get("UserId"))
        if owner_id is not None:
            # A record only ever belongs to the owner it was loaded for
            if stored_owner is not None and str(stored_owner) != owner_id:
                raise PreferencesCorruptError(
                    f"Preference record belongs to {stored_owner!r}, not {owner_id!r}", owner_id=owner_id
                )
            stored_owner = owner_id
        if stored_owner is None:
            raise PreferencesCorruptError("Preference record has no owner id")

        raw_settings = data.get("share_settings_by_type", data.get("ShareSettingsByType")) or {}
        if not isinstance(raw_settings, Mapping):
            raise PreferencesCorruptError("share_settings_by_type must be an object", owner_id=str(stored_owner))

        try:
            settings_by_type = {
                str(type_name): SharingSettings.from_dict(values) for type_name, values in raw_settings.items()
            }
        except PreferencesCorruptError as e:
            raise PreferencesCorruptError(e.message, owner_id=str(stored_owner)) from e

        return cls(owner_id=str(stored_owner), settings_by_type=settings_by_type)


class PreferencesManager:
    """Caches owner records and writes every change through to storage.

    Args:
        storage: Durable preference storage
        cache_max_size: Bound for the owner cache; 0 keeps every owner
            for the life of the process
    """

    def __init__(self, storage: PreferenceStorage, cache_max_size: int = 0) -> None:
        self._storage = storage
        self._cache: OwnerCache[str, OwnerPreferences] = OwnerCache(max_size=cache_max_size)
        # Serializes load-or-create and mutations; re-entrant so toggle can call get_for_write
        self._lock = threading.RLock()
        self._listeners: list[PreferenceChangedCallback] = []

    @property
    def storage(self) -> PreferenceStorage:
        return self._storage

    def _load(self, owner_id: str) -> OwnerPreferences | None:
        data = self._storage.load(owner_id)
        if data is None:
            return None
        try:
            return OwnerPreferences.from_dict(data, owner_id=owner_id)
        except PreferencesCorruptError as e:
            logger.warning(f"Discarding corrupt preferences for {owner_id}: {e.message}")
            return None

    def _save(self, preferences: OwnerPreferences) -> None:
        try:
            self._storage.save(preferences.owner_id, preferences.to_dict())
        except StorageException as e:
            # The cached record still holds the change; the next save retries it
            logger.error(f"Could not persist preferences for {preferences.owner_id}: {e.message}")

    def get_settings_for_read(self, entry: ShareTypeEntry, owner_id: str) -> SharingSettings:
        """Return the settings in effect for ``owner_id`` on ``entry``.

        The returned object may be the share type's shared defaults; it is
        immutable so callers cannot corrupt it.
        """
        preferences = self._cache.get(owner_id) or self._load(owner_id)
        if preferences is not None:
            settings = preferences.get_settings_of_type(entry.type_name)
            if settings is not None:
                return settings
        return entry.defaults

    def get_for_write(self, owner_id: str) -> OwnerPreferences:
        """Return the cached record for ``owner_id``, loading or creating it once."""
        cached = self._cache.get(owner_id)
        if cached is not None:
            return cached

        with self._lock:
            cached = self._cache.get(owner_id)
            if cached is not None:
                return cached
            preferences = self._load(owner_id) or OwnerPreferences(owner_id=owner_id)
            return self._cache.setdefault(owner_id, preferences)

    def toggle_sharing(self, entry: ShareTypeEntry, owner_id: str, recipient_type: RecipientType) -> bool:
        """Flip one category for one owner and persist it.

        Returns:
            The new value of the category

        Raises:
            NotPermittedError: If the share type does not offer the category
        """
        if not entry.enabled(recipient_type):
            raise NotPermittedError(entry.type_name, recipient_type.value)

        with self._lock:
            preferences = self.get_for_write(owner_id)
            settings = preferences.get_or_create_settings_of_type(entry).toggled(recipient_type)
            preferences.set_settings_of_type(entry.type_name, settings)
            self._save(preferences)

        new_value = settings.get(recipient_type)
        logger.debug(f"{owner_id} set {entry.type_name}.{recipient_type.value} = {new_value}")
        self._notify(owner_id, entry.type_name, recipient_type.value, new_value)
        return new_value

    def import_preferences(self, owner_id: str, settings_by_type: Mapping[str, Mapping[str, bool]]) -> bool:
        """Bulk-install preferences for share types the owner has not customized."""
        with self._lock:
            preferences = self.get_for_write(owner_id)
            result = preferences.import_settings(settings_by_type)
            self._save(preferences)
        return result

    def on_preference_changed(self, callback: PreferenceChangedCallback) -> None:
        """Register a listener called as ``callback(owner_id, type_name, category, new_value)``."""
        self._listeners.append(callback)

    def _notify(self, owner_id: str, type_name: str, category: str, new_value: bool) -> None:
        for callback in self._listeners:
            try:
                callback(owner_id, type_name, category, new_value)
            except Exception as e:
                logger.error(f"Preference change listener failed: {e}")

    def cached_owners(self) -> list[str]:
        return list(self._cache)
