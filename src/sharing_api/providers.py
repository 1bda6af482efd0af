"""Relationship provider interfaces.

The broker does not know who is on whose team, who is friends with whom, or
which clans are allied. Other modules answer those questions through the
narrow protocols below. Every provider is optional: an absent provider
means "no relationship" for its category.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, fields
from typing import Any, Protocol, runtime_checkable

logger = logging.getLogger(__name__)


@runtime_checkable
class TeamProvider(Protocol):
    """Source of the live team roster."""

    def find_team_members(self, owner_id: str) -> Iterable[str] | None:
        """Return the full roster of the owner's team, or None if teamless."""
        ...


@runtime_checkable
class FriendsProvider(Protocol):
    def has_friend(self, owner_id: str, other_id: str) -> bool: ...

    def get_friends(self, owner_id: str) -> Iterable[str] | None: ...


@runtime_checkable
class ClanProvider(Protocol):
    def is_clan_member(self, owner_id: str, other_id: str) -> bool: ...

    def get_clan_members(self, owner_id: str) -> Iterable[str] | None: ...


@runtime_checkable
class AlliesProvider(Protocol):
    """Clan alliance lookups.

    Expanding allies is the most expensive query: the owner's alliances are
    resolved to clan names and then each clan's roster is fetched.
    """

    def is_ally_player(self, owner_id: str, other_id: str) -> bool: ...

    def get_clan_alliances(self, owner_id: str) -> Iterable[str] | None: ...

    def get_clan_roster(self, clan_name: str) -> Iterable[str] | None: ...


@dataclass
class RelationshipProviders:
    """The providers currently available, one optional slot per category.

    A single clans module typically fills both ``clan`` and ``allies``.
    """

    team: TeamProvider | None = None
    friends: FriendsProvider | None = None
    clan: ClanProvider | None = None
    allies: AlliesProvider | None = None

    def detach(self, module: Any) -> list[str]:
        """Clear every slot held by ``module``, e.g. after it unloads.

        Returns:
            Names of the cleared slots
        """
        cleared: list[str] = []
        if module is None:
            return cleared
        for slot in fields(self):
            if getattr(self, slot.name) is module:
                setattr(self, slot.name, None)
                cleared.append(slot.name)
        if cleared:
            logger.info(f"Detached relationship providers: {cleared}")
        return cleared
