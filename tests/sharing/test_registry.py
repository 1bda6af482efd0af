"""Tests for ShareTypeEntry and ShareTypeRegistry."""

from sharing_api.lang import MessageCatalog
from sharing_api.registry import ShareTypeEntry, ShareTypeRegistry
from sharing_api.types import RecipientType, SharingSettings


class TestShareTypeEntry:
    """Tests for building entries from registration defaults."""

    def test_supplied_defaults_become_customizable(self, plugin):
        entry = ShareTypeEntry.create(plugin, "cupboard", {"team": True, "clan": False})

        assert entry.defaults == SharingSettings(team=True, clan=False)
        assert entry.enabled(RecipientType.TEAM)
        assert entry.enabled(RecipientType.CLAN)
        assert not entry.enabled(RecipientType.FRIENDS)
        assert not entry.enabled(RecipientType.ALLIES)

    def test_false_default_is_still_customizable(self, plugin):
        """Supplying False offers the category; omitting it does not."""
        entry = ShareTypeEntry.create(plugin, "box", {"friends": False})
        assert entry.enabled_types() == [RecipientType.FRIENDS]

    def test_no_defaults(self, plugin):
        entry = ShareTypeEntry.create(plugin, "turret", {})
        assert not entry.any_enabled()
        assert entry.enabled_types() == []

    def test_none_defaults(self, plugin):
        entry = ShareTypeEntry.create(plugin, "turret", None)
        assert not entry.any_enabled()

    def test_unknown_categories_ignored(self, plugin):
        entry = ShareTypeEntry.create(plugin, "box", {"Team": True, "guild": True})
        assert entry.enabled_types() == [RecipientType.TEAM]

    def test_non_boolean_default_not_offered(self, plugin):
        entry = ShareTypeEntry.create(plugin, "box", {"team": "false", "clan": 1, "friends": True})

        assert entry.enabled_types() == [RecipientType.FRIENDS]
        assert entry.defaults == SharingSettings(friends=True)

    def test_enabled_types_in_evaluation_order(self, plugin):
        entry = ShareTypeEntry.create(plugin, "box", {"allies": True, "team": False, "friends": True})
        assert entry.enabled_types() == [RecipientType.TEAM, RecipientType.FRIENDS, RecipientType.ALLIES]

    def test_message_keys(self, plugin):
        entry = ShareTypeEntry.create(plugin, "cupboard", {})
        assert entry.short_name_key == "cupboard.ShortName"
        assert entry.abbreviation_key == "cupboard.Abbreviation"


class TestShareTypeRegistry:
    """Tests for registering, replacing and unregistering share types."""

    def test_register_and_get(self, plugin):
        registry = ShareTypeRegistry()
        entry = registry.register("cupboard", plugin, {"team": True})

        assert registry.get("cupboard") is entry
        assert "cupboard" in registry
        assert len(registry) == 1

    def test_get_unknown(self):
        assert ShareTypeRegistry().get("nope") is None

    def test_reregister_replaces_without_merge(self, plugin):
        registry = ShareTypeRegistry()
        registry.register("cupboard", plugin, {"team": True, "friends": True})
        registry.register("cupboard", plugin, {"clan": True})

        entry = registry.get("cupboard")
        assert entry.enabled_types() == [RecipientType.CLAN]
        assert entry.defaults == SharingSettings(clan=True)
        assert len(registry) == 1

    def test_unregister_removes_only_owned(self, make_module):
        cupboards = make_module("Cupboards")
        turrets = make_module("Turrets")
        registry = ShareTypeRegistry()
        registry.register("cupboard", cupboards, {"team": True})
        registry.register("turret", turrets, {"team": True})

        removed = registry.unregister(cupboards)

        assert removed == ["cupboard"]
        assert registry.get("cupboard") is None
        assert registry.get("turret") is not None

    def test_unregister_removes_every_entry_of_module(self, plugin):
        registry = ShareTypeRegistry()
        registry.register("cupboard", plugin, {"team": True})
        registry.register("box", plugin, {"team": True})

        assert sorted(registry.unregister(plugin)) == ["box", "cupboard"]
        assert len(registry) == 0

    def test_unregister_unknown_module_is_noop(self, plugin, make_module):
        registry = ShareTypeRegistry()
        registry.register("cupboard", plugin, {"team": True})

        assert registry.unregister(make_module("Other")) == []
        assert len(registry) == 1

    def test_unregister_compares_identity(self, make_module):
        """Two distinct handles with equal names are different modules."""
        registry = ShareTypeRegistry()
        registry.register("cupboard", make_module("Same"), {"team": True})

        assert registry.unregister(make_module("Same")) == []

    def test_entries_in_registration_order(self, plugin):
        registry = ShareTypeRegistry()
        for name in ("c", "a", "b"):
            registry.register(name, plugin, {})
        assert [e.type_name for e in registry.entries()] == ["c", "a", "b"]


class TestResolveByDisplayName:
    """Tests for matching share types by localized names."""

    def _registry(self, plugin) -> tuple[ShareTypeRegistry, MessageCatalog]:
        registry = ShareTypeRegistry()
        registry.register("cupboard", plugin, {"team": True})
        catalog = MessageCatalog()
        catalog.register_messages({"cupboard.ShortName": "Cupboard", "cupboard.Abbreviation": "TC"}, plugin)
        catalog.register_messages({"cupboard.ShortName": "Armoire", "cupboard.Abbreviation": "AR"}, plugin, lang="fr")
        return registry, catalog

    def test_short_name_case_insensitive(self, plugin):
        registry, catalog = self._registry(plugin)
        assert registry.resolve_by_display_name("alice", "cUpBoArD", catalog).type_name == "cupboard"

    def test_abbreviation(self, plugin):
        registry, catalog = self._registry(plugin)
        assert registry.resolve_by_display_name("alice", "tc", catalog).type_name == "cupboard"

    def test_partial_name_does_not_match(self, plugin):
        registry, catalog = self._registry(plugin)
        assert registry.resolve_by_display_name("alice", "cup", catalog) is None

    def test_uses_owner_language(self, plugin):
        registry, catalog = self._registry(plugin)
        catalog.set_language("pierre", "fr")

        assert registry.resolve_by_display_name("pierre", "armoire", catalog).type_name == "cupboard"
        assert registry.resolve_by_display_name("alice", "armoire", catalog) is None

    def test_first_match_wins(self, make_module):
        first, second = make_module("A"), make_module("B")
        registry = ShareTypeRegistry()
        registry.register("one", first, {})
        registry.register("two", second, {})
        catalog = MessageCatalog()
        catalog.register_messages({"one.ShortName": "Box"}, first)
        catalog.register_messages({"two.ShortName": "box"}, second)

        assert registry.resolve_by_display_name("alice", "BOX", catalog).type_name == "one"

    def test_empty_name(self, plugin):
        registry, catalog = self._registry(plugin)
        assert registry.resolve_by_display_name("alice", "  ", catalog) is None
