# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Ourochronos Contributors

"""Public entry points for feature modules.

Feature modules register a share type once, then ask either "does this
owner share with that identity?" or "who does this owner share with?".
Nothing here raises for an unknown share type, an unknown owner, or a
missing provider; those all resolve to ``None`` / ``False``.

Example:
    >>> api = SharingAPI(storage=InMemoryPreferenceStorage())
    >>> api.register_share_type("cupboard", my_module, {"team": True, "clan": False})
    >>> is_sharing = api.get_is_sharing_with_callback("cupboard")
    >>> is_sharing("76561198000000001", "76561198000000002")
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Mapping
from typing import Any

from .core.config import CoreSettings, get_config
from .core.exceptions import NotPermittedError, PreferencesCorruptError
from .lang import MessageCatalog
from .preferences import PreferenceChangedCallback, PreferencesManager
from .providers import RelationshipProviders
from .registry import ShareTypeEntry, ShareTypeRegistry
from .resolver import RelationshipResolver
from .storage import PreferenceStorage, create_storage
from .types import RecipientType

logger = logging.getLogger(__name__)

IsSharingWithCallback = Callable[[Any, Any], bool]


class SharingAPI:
    """Sharing preference broker.

    Args:
        storage: Durable preference storage. Built from configuration when omitted.
        providers: Relationship providers; slots may be filled or cleared later
        settings: Configuration; the process-wide settings when omitted
        localizer: Message catalog used for display-name matching
    """

    def __init__(
        self,
        storage: PreferenceStorage | None = None,
        providers: RelationshipProviders | None = None,
        settings: CoreSettings | None = None,
        localizer: MessageCatalog | None = None,
    ) -> None:
        self.settings = settings or get_config()
        self.registry = ShareTypeRegistry()
        self.preferences = PreferencesManager(
            storage if storage is not None else create_storage(self.settings),
            cache_max_size=self.settings.cache_max_size,
        )
        self.resolver = RelationshipResolver(self.preferences, providers)
        self.localizer = localizer or MessageCatalog(broker_module=self)

    @property
    def providers(self) -> RelationshipProviders:
        return self.resolver.providers

    # -------------------------------------------------------------------------
    # Registration
    # -------------------------------------------------------------------------

    def register_share_type(self, type_name: str, module: Any, defaults: Mapping[str, bool] | None) -> None:
        """Register (or replace) a share type owned by ``module``.

        Only the categories present in ``defaults`` can be customized by
        owners or take part in sharing for this type.
        """
        self.registry.register(type_name, module, defaults)

    def on_module_unloaded(self, module: Any) -> list[str]:
        """Forget everything an unloading module contributed.

        Removes the share types it registered, its messages, and any provider
        slot it was filling.

        Returns:
            Names of the removed share types
        """
        self.providers.detach(module)
        self.localizer.unregister_messages(module)
        return self.registry.unregister(module)

    def get_share_type(self, type_name: str) -> ShareTypeEntry | None:
        return self.registry.get(type_name)

    def resolve_share_type(self, owner_id: Any, raw_name: str) -> ShareTypeEntry | None:
        """Match a share type by its localized short name or abbreviation."""
        return self.registry.resolve_by_display_name(str(owner_id), raw_name, self.localizer)

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def get_is_sharing_with_callback(self, type_name: str) -> IsSharingWithCallback | None:
        """Return a reusable ``(owner_id, other_id) -> bool`` check bound to one share type.

        The callback keeps the entry it was created with, so hot paths skip
        the registry lookup.
        """
        entry = self.registry.get(type_name)
        if entry is None:
            return None

        def is_sharing_with(owner_id: Any, other_id: Any) -> bool:
            return self.resolver.is_sharing_with(entry, str(owner_id), str(other_id))

        return is_sharing_with

    def is_sharing_with(self, type_name: str, owner_id: Any, other_id: Any) -> bool:
        entry = self.registry.get(type_name)
        if entry is None:
            return False
        return self.resolver.is_sharing_with(entry, str(owner_id), str(other_id))

    def get_sharing_preferences(self, type_name: str, owner_id: Any) -> dict[str, bool] | None:
        """Current toggles of ``owner_id`` for the categories the share type offers."""
        entry = self.registry.get(type_name)
        if entry is None:
            return None

        settings = self.preferences.get_settings_for_read(entry, str(owner_id))
        return {rt.value: settings.get(rt) for rt in entry.enabled_types()}

    def get_shared_with_ids(self, owner_id: Any, type_name: str) -> list[str] | None:
        """Everyone ``owner_id`` currently shares ``type_name`` with.

        Returns:
            List of identities without duplicates, or None if the share type
            is unknown or offers no categories
        """
        entry = self.registry.get(type_name)
        if entry is None:
            return None

        shared_with = self.resolver.collect_shared_with(entry, str(owner_id))
        return sorted(shared_with) if shared_with is not None else None

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def toggle_sharing(self, type_name: str, owner_id: Any, category: str | RecipientType) -> bool | None:
        """Flip one category for one owner.

        Returns:
            The new value, or None if the share type or category is unknown
            or the share type does not allow customizing that category
        """
        entry = self.registry.get(type_name)
        recipient_type = RecipientType.parse(category)
        if entry is None or recipient_type is None:
            return None

        try:
            return self.preferences.toggle_sharing(entry, str(owner_id), recipient_type)
        except NotPermittedError as e:
            logger.debug(e.message)
            return None

    def import_preferences(self, owner_id: Any, settings_by_type: Mapping[str, Mapping[str, bool]]) -> None:
        """Seed preferences for share types the owner has not customized yet."""
        try:
            self.preferences.import_preferences(str(owner_id), settings_by_type)
        except PreferencesCorruptError as e:
            logger.warning(f"Rejected preference import for {owner_id}: {e.message}")

    def on_preference_changed(self, callback: PreferenceChangedCallback) -> None:
        """Subscribe to ``(owner_id, type_name, category, new_value)`` change events."""
        self.preferences.on_preference_changed(callback)


# =============================================================================
# Process-wide instance
# =============================================================================

_default_api: SharingAPI | None = None
_default_api_lock = threading.Lock()


def get_sharing_api() -> SharingAPI:
    """Get the process-wide SharingAPI, built from configuration on first use."""
    global _default_api
    if _default_api is None:
        with _default_api_lock:
            if _default_api is None:
                _default_api = SharingAPI()
    return _default_api


def reset_sharing_api() -> None:
    """Drop the process-wide instance. Useful for testing."""
    global _default_api
    with _default_api_lock:
        _default_api = None
