"""Turn an owner's toggles into sharing decisions.

A category contributes only when all three hold: the share type offers it,
the owner has it switched on, and the matching provider reports the
relationship. Categories are always visited in ``RecipientType`` order so
the cheap team lookup runs before the clan alliance expansion.

Providers live in other modules and may be missing, raise, or return
something unexpected. All of those count as "no relationship".
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from typing import Any

from .preferences import PreferencesManager
from .providers import RelationshipProviders
from .registry import ShareTypeEntry
from .types import RecipientType

logger = logging.getLogger(__name__)


def _call_provider(provider: Any, method: str, *args: Any) -> Any:
    """Invoke a provider method, returning None if it is absent or fails."""
    if provider is None:
        return None
    func = getattr(provider, method, None)
    if not callable(func):
        logger.debug(f"Provider {type(provider).__name__} has no {method}()")
        return None
    try:
        return func(*args)
    except Exception as e:
        logger.warning(f"Relationship provider {type(provider).__name__}.{method} failed: {e}")
        return None


def _as_bool(value: Any, method: str) -> bool:
    if isinstance(value, bool):
        return value
    if value is not None:
        logger.debug(f"{method}() returned {type(value).__name__}, expected bool")
    return False


def _as_ids(value: Any, method: str) -> list[str]:
    if value is None:
        return []
    if isinstance(value, (str, bytes)) or not isinstance(value, Iterable):
        logger.debug(f"{method}() returned {type(value).__name__}, expected a collection of ids")
        return []
    # Lazy iterables run provider code here, outside _call_provider
    try:
        return [str(member) for member in value if member is not None]
    except Exception as e:
        logger.warning(f"Relationship provider result from {method}() failed while iterating: {e}")
        return []


class RelationshipResolver:
    """Combines stored toggles with live provider lookups."""

    def __init__(self, preferences: PreferencesManager, providers: RelationshipProviders | None = None) -> None:
        self._preferences = preferences
        self.providers = providers or RelationshipProviders()

    # -------------------------------------------------------------------------
    # Pairwise checks
    # -------------------------------------------------------------------------

    def _same_team(self, owner_id: str, other_id: str) -> bool:
        members = _as_ids(_call_provider(self.providers.team, "find_team_members", owner_id), "find_team_members")
        return other_id in members

    def _has_friend(self, owner_id: str, other_id: str) -> bool:
        return _as_bool(_call_provider(self.providers.friends, "has_friend", owner_id, other_id), "has_friend")

    def _same_clan(self, owner_id: str, other_id: str) -> bool:
        return _as_bool(_call_provider(self.providers.clan, "is_clan_member", owner_id, other_id), "is_clan_member")

    def _is_ally(self, owner_id: str, other_id: str) -> bool:
        return _as_bool(_call_provider(self.providers.allies, "is_ally_player", owner_id, other_id), "is_ally_player")

    # -------------------------------------------------------------------------
    # Member expansion
    # -------------------------------------------------------------------------

    def _collect_team_members(self, owner_id: str, collect: set[str]) -> None:
        members = _as_ids(_call_provider(self.providers.team, "find_team_members", owner_id), "find_team_members")
        # The roster includes the owner; only teammates are recipients
        collect.update(member for member in members if member != owner_id)

    def _collect_friends(self, owner_id: str, collect: set[str]) -> None:
        collect.update(_as_ids(_call_provider(self.providers.friends, "get_friends", owner_id), "get_friends"))

    def _collect_clan_members(self, owner_id: str, collect: set[str]) -> None:
        collect.update(
            _as_ids(_call_provider(self.providers.clan, "get_clan_members", owner_id), "get_clan_members")
        )

    def _collect_clan_allies(self, owner_id: str, collect: set[str]) -> None:
        allies = self.providers.allies
        clan_names = _as_ids(_call_provider(allies, "get_clan_alliances", owner_id), "get_clan_alliances")
        for clan_name in clan_names:
            collect.update(_as_ids(_call_provider(allies, "get_clan_roster", clan_name), "get_clan_roster"))

    def _checks(self) -> dict[RecipientType, Callable[[str, str], bool]]:
        return {
            RecipientType.TEAM: self._same_team,
            RecipientType.FRIENDS: self._has_friend,
            RecipientType.CLAN: self._same_clan,
            RecipientType.ALLIES: self._is_ally,
        }

    def _collectors(self) -> dict[RecipientType, Callable[[str, set[str]], None]]:
        return {
            RecipientType.TEAM: self._collect_team_members,
            RecipientType.FRIENDS: self._collect_friends,
            RecipientType.CLAN: self._collect_clan_members,
            RecipientType.ALLIES: self._collect_clan_allies,
        }

    # -------------------------------------------------------------------------
    # Public API
    # -------------------------------------------------------------------------

    def is_sharing_with(self, entry: ShareTypeEntry, owner_id: str, other_id: str) -> bool:
        """Would ``owner_id`` currently share ``entry`` with ``other_id``?

        An owner always shares with themselves.
        """
        if owner_id == other_id:
            return True
        if not entry.any_enabled():
            return False

        settings = self._preferences.get_settings_for_read(entry, owner_id)
        checks = self._checks()
        for recipient_type in RecipientType:
            if not (entry.enabled(recipient_type) and settings.get(recipient_type)):
                continue
            if checks[recipient_type](owner_id, other_id):
                return True
        return False

    def collect_shared_with(self, entry: ShareTypeEntry, owner_id: str) -> set[str] | None:
        """Everyone ``owner_id`` currently shares ``entry`` with.

        Returns:
            A deduplicated set of identities, or None when the share type
            offers no categories at all (sharing disabled for the feature,
            as opposed to nobody currently matching)
        """
        if not entry.any_enabled():
            return None

        settings = self._preferences.get_settings_for_read(entry, owner_id)
        collectors = self._collectors()
        shared_with: set[str] = set()
        for recipient_type in RecipientType:
            if entry.enabled(recipient_type) and settings.get(recipient_type):
                collectors[recipient_type](owner_id, shared_with)
        return shared_with
