"""Settings and command-line argument snapshots consumed by the resolvers."""
from __future__ import annotations

from certflow.config.arguments import MainArguments
from certflow.config.errors import SettingsError
from certflow.config.settings import (
    CsrSettings,
    InstallationSettings,
    OrderSettings,
    Settings,
    SourceSettings,
    StoreSettings,
    ValidationSettings,
    load_settings,
)

__all__ = [
    "CsrSettings",
    "InstallationSettings",
    "MainArguments",
    "OrderSettings",
    "Settings",
    "SettingsError",
    "SourceSettings",
    "StoreSettings",
    "ValidationSettings",
    "load_settings",
]
