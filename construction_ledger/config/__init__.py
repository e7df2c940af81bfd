"""Configuration package."""

from construction_ledger.config.settings import (
    AppSettings,
    ProjectSettings,
    Settings,
    StorageSettings,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "AppSettings",
    "ProjectSettings",
    "Settings",
    "StorageSettings",
    "get_settings",
    "validate_all_settings",
]
