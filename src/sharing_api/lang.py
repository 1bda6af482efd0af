"""Localized message catalog.

Messages are registered per module and language. Share types register their
own ``<type>.ShortName`` / ``<type>.Abbreviation``
messages under their owning module, which is what display-name matching
looks up.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

logger = logging.getLogger(__name__)

DEFAULT_LANGUAGE = "en"


class Lang:
    """Message keys used by the broker's own commands."""

    TEAM = "Team"
    FRIENDS = "Friends"
    CLAN = "Clan"
    ALLIES = "Allies"

    ENABLED = "Enabled"
    DISABLED = "Disabled"

    TOGGLE_SHARE_RESULT = "ToggleShareResult"

    ERROR_TOGGLE_SHARE_SYNTAX = "Error.ToggleShareSyntax"
    ERROR_UNRECOGNIZED_SHARE_TYPE = "Error.UnrecognizedShareType"
    ERROR_UNRECOGNIZED_RECIPIENT_TYPE = "Error.UnrecognizedRecipientType"
    ERROR_NO_SHARE_TYPES = "Error.NoShareTypes"
    ERROR_NO_EDIT_PERMISSIONS = "Error.NoEditPermissions"


DEFAULT_MESSAGES: dict[str, str] = {
    Lang.TEAM: "Team",
    Lang.FRIENDS: "Friends",
    Lang.CLAN: "Clan",
    Lang.ALLIES: "Allies",
    Lang.ENABLED: "Enabled",
    Lang.DISABLED: "Disabled",
    Lang.TOGGLE_SHARE_RESULT: "{0} {1}: {2}",
    Lang.ERROR_TOGGLE_SHARE_SYNTAX: "Syntax: toggleshare <cupboard|box|etc> <team|friends|clan|allies>",
    Lang.ERROR_UNRECOGNIZED_SHARE_TYPE: "Error: Unrecognized share type: {0}",
    Lang.ERROR_UNRECOGNIZED_RECIPIENT_TYPE: "Error: Unrecognized recipient type: {0}",
    Lang.ERROR_NO_SHARE_TYPES: "No share types available",
    Lang.ERROR_NO_EDIT_PERMISSIONS: "Error: Not allowed to edit that option.",
}


class MessageCatalog:
    """Per-module, per-language message store.

    Lookups fall back from the owner's language to English, then to the key
    itself, so a missing translation never breaks a command.
    """

    def __init__(self, broker_module: Any = None) -> None:
        self.broker_module = broker_module
        # (module id, language) -> key -> text
        self._messages: dict[tuple[int, str], dict[str, str]] = {}
        # Holding each module keeps its id from being reused while it has messages
        self._modules: dict[int, Any] = {}
        self._languages: dict[str, str] = {}
        self.register_messages(DEFAULT_MESSAGES, broker_module)

    def register_messages(self, messages: Mapping[str, str], module: Any, lang: str = DEFAULT_LANGUAGE) -> None:
        self._modules[id(module)] = module
        self._messages.setdefault((id(module), lang), {}).update(messages)

    def unregister_messages(self, module: Any) -> int:
        """Drop every message registered by ``module``.

        Returns:
            Number of languages removed
        """
        if self._modules.get(id(module)) is not module:
            return 0
        del self._modules[id(module)]
        stale = [key for key in self._messages if key[0] == id(module)]
        for key in stale:
            del self._messages[key]
        return len(stale)

    def set_language(self, owner_id: str, lang: str) -> None:
        self._languages[owner_id] = lang

    def get_language(self, owner_id: str) -> str:
        return self._languages.get(owner_id, DEFAULT_LANGUAGE)

    def get_message(self, key: str, module: Any, owner_id: str) -> str:
        for lang in (self.get_language(owner_id), DEFAULT_LANGUAGE):
            text = self._messages.get((id(module), lang), {}).get(key)
            if text is not None:
                return text
        logger.debug(f"No message for {key!r}")
        return key

    def format(self, key: str, owner_id: str, *args: Any) -> str:
        """Look up one of the broker's own messages and fill in ``args``."""
        message = self.get_message(key, self.broker_module, owner_id)
        return message.format(*args) if args else message
