"""Value types for sharing preferences.

Implements the four recipient categories and the immutable per-category
toggle set used both for share type defaults and for owner overrides.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any

from .core.exceptions import PreferencesCorruptError


class RecipientType(Enum):
    """Kinds of identities an owner can share with.

    Declaration order is the evaluation order: cheapest lookup first.
    The values are part of the persisted format and the change hook.
    """

    TEAM = "team"
    FRIENDS = "friends"
    CLAN = "clan"
    ALLIES = "allies"

    @classmethod
    def parse(cls, name: Any) -> RecipientType | None:
        """Look up a category by name, ignoring case. Returns None if unknown."""
        if isinstance(name, RecipientType):
            return name
        if not isinstance(name, str):
            return None
        try:
            return cls(name.strip().lower())
        except ValueError:
            return None

    @property
    def display_key(self) -> str:
        """Message key used for the localized category name."""
        return self.value.capitalize()


@dataclass(frozen=True)
class SharingSettings:
    """One boolean per recipient category.

    Instances are immutable so the defaults held by a share type can be
    handed out by the read path without any caller being able to alter them.
    Use ``toggled`` / ``with_value`` to derive a changed copy.
    """

    team: bool = False
    friends: bool = False
    clan: bool = False
    allies: bool = False

    def get(self, recipient_type: RecipientType) -> bool:
        return getattr(self, recipient_type.value)

    def with_value(self, recipient_type: RecipientType, value: bool) -> SharingSettings:
        return replace(self, **{recipient_type.value: bool(value)})

    def toggled(self, recipient_type: RecipientType) -> SharingSettings:
        return self.with_value(recipient_type, not self.get(recipient_type))

    def to_dict(self) -> dict[str, bool]:
        """Serialize to a fresh dictionary keyed by category value."""
        return {rt.value: self.get(rt) for rt in RecipientType}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> SharingSettings:
        """Deserialize from a category -> bool mapping.

        Category keys are matched case-insensitively. Omitted categories are
        False and unknown keys are ignored.

        Raises:
            PreferencesCorruptError: If ``data`` is not a mapping or a
                recognised category holds a non-boolean value.
        """
        if not isinstance(data, Mapping):
            raise PreferencesCorruptError(f"Expected a mapping of categories, got {type(data).__name__}")

        values: dict[str, bool] = {}
        for key, value in data.items():
            recipient_type = RecipientType.parse(key)
            if recipient_type is None:
                continue
            if not isinstance(value, bool):
                raise PreferencesCorruptError(f"Category {key!r} must be a boolean, got {value!r}")
            values[recipient_type.value] = value
        return cls(**values)
