"""Share type registry.

A share type is a feature (a cupboard, a turret, a storage box...) that
delegates its "who else counts as me" decision to this broker. Each
registration records the owning module, a default per offered category, and
therefore which categories owners may customize at all.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Protocol

from .types import RecipientType, SharingSettings

logger = logging.getLogger(__name__)


class Localizer(Protocol):
    """Resolves message keys in the context of a module and an owner's language."""

    def get_message(self, key: str, module: Any, owner_id: str) -> str: ...


@dataclass(frozen=True)
class ShareTypeEntry:
    """A registered share type.

    Attributes:
        type_name: Unique feature name
        module: Owning module handle, compared by identity and otherwise opaque
        defaults: Default toggles used until an owner overrides them
        customizable: Categories the feature offers. A category without a
            registered default is never toggle-able and never expanded.
    """

    type_name: str
    module: Any = field(compare=False)
    defaults: SharingSettings = field(default_factory=SharingSettings)
    customizable: frozenset[RecipientType] = frozenset()

    @classmethod
    def create(cls, module: Any, type_name: str, defaults_by_category: Mapping[str, bool] | None) -> ShareTypeEntry:
        """Build an entry from the defaults a feature supplied at registration."""
        defaults = SharingSettings()
        customizable: set[RecipientType] = set()

        for key, value in (defaults_by_category or {}).items():
            recipient_type = RecipientType.parse(key)
            if recipient_type is None:
                logger.debug(f"Share type {type_name!r} registered unknown category {key!r}; ignoring")
                continue
            if not isinstance(value, bool):
                logger.warning(
                    f"Share type {type_name!r} registered non-boolean default {value!r} "
                    f"for {recipient_type.value!r}; category not offered"
                )
                continue
            defaults = defaults.with_value(recipient_type, value)
            customizable.add(recipient_type)

        return cls(
            type_name=type_name,
            module=module,
            defaults=defaults,
            customizable=frozenset(customizable),
        )

    def enabled(self, recipient_type: RecipientType) -> bool:
        return recipient_type in self.customizable

    def any_enabled(self) -> bool:
        return bool(self.customizable)

    def enabled_types(self) -> list[RecipientType]:
        """Customizable categories in evaluation order."""
        return [rt for rt in RecipientType if rt in self.customizable]

    @property
    def short_name_key(self) -> str:
        return f"{self.type_name}.ShortName"

    @property
    def abbreviation_key(self) -> str:
        return f"{self.type_name}.Abbreviation"


class ShareTypeRegistry:
    """In-memory registry of share types keyed by name.

    Iteration follows registration order. Re-registering a name replaces the
    previous entry outright, keeping its original position.
    """

    def __init__(self) -> None:
        self._entries: dict[str, ShareTypeEntry] = {}

    def register(
        self,
        type_name: str,
        module: Any,
        defaults_by_category: Mapping[str, bool] | None = None,
    ) -> ShareTypeEntry:
        """Register or replace a share type.

        Args:
            type_name: Unique feature name
            module: Owning module handle
            defaults_by_category: Category name -> default. Only the
                categories present here can be customized.

        Returns:
            The stored entry
        """
        entry = ShareTypeEntry.create(module, type_name, defaults_by_category)
        replaced = type_name in self._entries
        self._entries[type_name] = entry
        logger.info(
            f"{'Re-registered' if replaced else 'Registered'} share type {type_name!r} "
            f"with categories {[rt.value for rt in entry.enabled_types()]}"
        )
        return entry

    def unregister(self, module: Any) -> list[str]:
        """Remove every share type owned by ``module``.

        Returns:
            Names of the removed share types (empty if none matched)
        """
        removed = [name for name, entry in self._entries.items() if entry.module is module]
        for name in removed:
            del self._entries[name]
        if removed:
            logger.info(f"Unregistered share types {removed} after module unload")
        return removed

    def get(self, type_name: str) -> ShareTypeEntry | None:
        return self._entries.get(type_name)

    def entries(self) -> list[ShareTypeEntry]:
        return list(self._entries.values())

    def resolve_by_display_name(
        self,
        owner_id: str,
        raw_name: str,
        localizer: Localizer,
    ) -> ShareTypeEntry | None:
        """Find a share type by its localized short name or abbreviation.

        Matching is a case-insensitive full-string comparison done in the
        owner's language. The first entry in registration order wins.
        """
        wanted = raw_name.strip().lower()
        if not wanted:
            return None

        for entry in self._entries.values():
            short_name = localizer.get_message(entry.short_name_key, entry.module, owner_id)
            abbreviation = localizer.get_message(entry.abbreviation_key, entry.module, owner_id)
            if wanted in (short_name.lower(), abbreviation.lower()):
                return entry
        return None

    def clear(self) -> None:
        self._entries.clear()

    def __contains__(self, type_name: object) -> bool:
        return type_name in self._entries

    def __len__(self) -> int:
        return len(self._entries)
