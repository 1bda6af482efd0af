"""Player-facing ``listshares`` and ``toggleshare`` commands.

Handlers take the broker, the calling owner and the raw arguments, and
return the reply text. Parsing of the chat line and delivery of the reply
belong to the host.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING

from .lang import Lang
from .registry import ShareTypeEntry
from .types import RecipientType

if TYPE_CHECKING:
    from .api import SharingAPI

logger = logging.getLogger(__name__)


def _is_loaded(entry: ShareTypeEntry) -> bool:
    return bool(getattr(entry.module, "is_loaded", True))


def _short_name(api: SharingAPI, owner_id: str, entry: ShareTypeEntry) -> str:
    return api.localizer.get_message(entry.short_name_key, entry.module, owner_id)


def _category_name(api: SharingAPI, owner_id: str, recipient_type: RecipientType) -> str:
    return api.localizer.format(recipient_type.display_key, owner_id)


def parse_recipient_type(api: SharingAPI, owner_id: str, raw_name: str) -> RecipientType | None:
    """Match a category by its localized name, ignoring case."""
    wanted = raw_name.strip().lower()
    for recipient_type in RecipientType:
        if wanted == _category_name(api, owner_id, recipient_type).lower():
            return recipient_type
    return None


def cmd_list_shares(api: SharingAPI, owner_id: str) -> str:
    """List the caller's current settings for every available share type."""
    lines: list[str] = []
    for entry in api.registry.entries():
        if not _is_loaded(entry) or not entry.any_enabled():
            continue

        lines.append(_short_name(api, owner_id, entry))
        settings = api.preferences.get_settings_for_read(entry, owner_id)
        for recipient_type in entry.enabled_types():
            state = Lang.ENABLED if settings.get(recipient_type) else Lang.DISABLED
            lines.append(
                f" - {_category_name(api, owner_id, recipient_type)}: {api.localizer.format(state, owner_id)}"
            )

    if not lines:
        return api.localizer.format(Lang.ERROR_NO_SHARE_TYPES, owner_id)
    return "\n".join(lines)


def cmd_toggle_share(api: SharingAPI, owner_id: str, args: Sequence[str]) -> str:
    """Toggle one category of one share type.

    Usage:
        toggleshare <shareType> <team|friends|clan|allies>
    """
    if len(args) < 2:
        return api.localizer.format(Lang.ERROR_TOGGLE_SHARE_SYNTAX, owner_id)

    entry = api.resolve_share_type(owner_id, args[0])
    if entry is None:
        return api.localizer.format(Lang.ERROR_UNRECOGNIZED_SHARE_TYPE, owner_id, args[0])

    recipient_type = parse_recipient_type(api, owner_id, args[1])
    if recipient_type is None:
        return api.localizer.format(Lang.ERROR_UNRECOGNIZED_RECIPIENT_TYPE, owner_id, args[1])

    new_value = api.toggle_sharing(entry.type_name, owner_id, recipient_type)
    if new_value is None:
        return api.localizer.format(Lang.ERROR_NO_EDIT_PERMISSIONS, owner_id)

    logger.info(f"{owner_id} toggled {entry.type_name} {recipient_type.value} -> {new_value}")
    return api.localizer.format(
        Lang.TOGGLE_SHARE_RESULT,
        owner_id,
        _short_name(api, owner_id, entry),
        _category_name(api, owner_id, recipient_type),
        api.localizer.format(Lang.ENABLED if new_value else Lang.DISABLED, owner_id),
    )
