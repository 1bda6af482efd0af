# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Ourochronos Contributors

"""sharing_api - per-owner sharing preferences for independent features.

Features ("share types") register which recipient categories they offer
(team, friends, clan, allies) and their defaults. Owners toggle those
categories. The broker then answers "does this owner share with that
identity?" and "who does this owner share with?" by combining the stored
toggles with live answers from relationship providers.

Architecture:
  ShareTypeRegistry   share types and their customizable categories
    → PreferencesManager  cached, write-through owner preference records
    → RelationshipResolver  toggles × provider lookups → decision / recipient set
    → SharingAPI  entry points for feature modules

The broker only answers questions; enforcement stays with each feature.
"""

__version__ = "0.2.0"

from .api import SharingAPI, get_sharing_api, reset_sharing_api
from .lang import Lang, MessageCatalog
from .preferences import OwnerPreferences, PreferencesManager
from .providers import (
    AlliesProvider,
    ClanProvider,
    FriendsProvider,
    RelationshipProviders,
    TeamProvider,
)
from .registry import ShareTypeEntry, ShareTypeRegistry
from .resolver import RelationshipResolver
from .storage import (
    FilePreferenceStorage,
    InMemoryPreferenceStorage,
    PreferenceStorage,
    create_storage,
)
from .types import RecipientType, SharingSettings

__all__ = [
    # Facade
    "SharingAPI",
    "get_sharing_api",
    "reset_sharing_api",
    # Types
    "RecipientType",
    "SharingSettings",
    # Registry
    "ShareTypeEntry",
    "ShareTypeRegistry",
    # Preferences
    "OwnerPreferences",
    "PreferencesManager",
    # Storage
    "PreferenceStorage",
    "InMemoryPreferenceStorage",
    "FilePreferenceStorage",
    "create_storage",
    # Providers
    "TeamProvider",
    "FriendsProvider",
    "ClanProvider",
    "AlliesProvider",
    "RelationshipProviders",
    "RelationshipResolver",
    # Localization
    "Lang",
    "MessageCatalog",
]
