"""Global test fixtures for the sharing_api test suite."""

from __future__ import annotations

from collections.abc import Iterable

import pytest

from sharing_api import (
    InMemoryPreferenceStorage,
    RelationshipProviders,
    SharingAPI,
    reset_sharing_api,
)
from sharing_api.core.config import CoreSettings, clear_config_cache

# ============================================================================
# Fake relationship providers
# ============================================================================


class FakeTeams:
    """Team roster source backed by a list of teams."""

    def __init__(self, teams: Iterable[Iterable[str]] = ()) -> None:
        self.teams = [set(team) for team in teams]
        self.calls = 0

    def find_team_members(self, owner_id: str) -> set[str] | None:
        self.calls += 1
        for team in self.teams:
            if owner_id in team:
                return set(team)
        return None


class FakeFriends:
    """Friends provider backed by a one-way friend map."""

    def __init__(self, friends: dict[str, list[str]] | None = None) -> None:
        self.friends = friends or {}

    def has_friend(self, owner_id: str, other_id: str) -> bool:
        return other_id in self.friends.get(owner_id, [])

    def get_friends(self, owner_id: str) -> list[str]:
        return list(self.friends.get(owner_id, []))


class FakeClans:
    """Clan provider that also answers alliance questions."""

    def __init__(
        self,
        clans: dict[str, list[str]] | None = None,
        alliances: dict[str, list[str]] | None = None,
    ) -> None:
        self.clans = clans or {}
        self.alliances = alliances or {}
        self.is_loaded = True

    def _clan_of(self, owner_id: str) -> str | None:
        for tag, members in self.clans.items():
            if owner_id in members:
                return tag
        return None

    def is_clan_member(self, owner_id: str, other_id: str) -> bool:
        tag = self._clan_of(owner_id)
        return tag is not None and other_id in self.clans[tag]

    def get_clan_members(self, owner_id: str) -> list[str]:
        tag = self._clan_of(owner_id)
        return list(self.clans.get(tag, [])) if tag else []

    def is_ally_player(self, owner_id: str, other_id: str) -> bool:
        return any(other_id in self.clans.get(ally, []) for ally in self.get_clan_alliances(owner_id))

    def get_clan_alliances(self, owner_id: str) -> list[str]:
        tag = self._clan_of(owner_id)
        return list(self.alliances.get(tag, [])) if tag else []

    def get_clan_roster(self, clan_name: str) -> list[str]:
        return list(self.clans.get(clan_name, []))


class FakeModule:
    """Stand-in for a feature module handle."""

    def __init__(self, name: str) -> None:
        self.name = name
        self.is_loaded = True

    def __repr__(self) -> str:
        return f"FakeModule({self.name!r})"


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture(autouse=True)
def _isolate_globals(monkeypatch):
    """Keep env config and the process-wide broker from leaking between tests."""
    for var in (
        "SHARING_API_SERVICE_NAME",
        "SHARING_API_DATA_DIR",
        "SHARING_API_STORAGE_BACKEND",
        "SHARING_API_CACHE_MAX_SIZE",
        "SHARING_API_LOG_LEVEL",
        "SHARING_API_LOG_FORMAT",
        "SHARING_API_LOG_FILE",
    ):
        monkeypatch.delenv(var, raising=False)
    clear_config_cache()
    reset_sharing_api()
    yield
    clear_config_cache()
    reset_sharing_api()


@pytest.fixture
def settings(tmp_path) -> CoreSettings:
    return CoreSettings(service_name="SharingAPI", data_dir=str(tmp_path), storage_backend="memory")


@pytest.fixture
def storage() -> InMemoryPreferenceStorage:
    return InMemoryPreferenceStorage()


@pytest.fixture
def teams() -> FakeTeams:
    return FakeTeams([["alice", "bob"], ["carol", "dave"]])


@pytest.fixture
def friends() -> FakeFriends:
    return FakeFriends({"alice": ["carol"], "bob": ["alice"]})


@pytest.fixture
def clans() -> FakeClans:
    return FakeClans(
        clans={"RED": ["alice", "erin"], "BLUE": ["frank", "grace"], "GREEN": ["heidi"]},
        alliances={"RED": ["BLUE"]},
    )


@pytest.fixture
def providers(teams, friends, clans) -> RelationshipProviders:
    return RelationshipProviders(team=teams, friends=friends, clan=clans, allies=clans)


@pytest.fixture
def make_module():
    """Factory for feature module handles."""
    return FakeModule


@pytest.fixture
def plugin() -> FakeModule:
    return FakeModule("Cupboards")


@pytest.fixture
def api(storage, providers, settings) -> SharingAPI:
    return SharingAPI(storage=storage, providers=providers, settings=settings)
