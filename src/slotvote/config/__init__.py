"""Configuration models and helpers."""

from __future__ import annotations

from .settings import (
    AccessSettings,
    AppSettings,
    LoggingSettings,
    SiteSettings,
    StorageSettings,
    SupabaseSettings,
    ThrottleSettings,
    get_settings,
)

__all__ = [
    "AccessSettings",
    "AppSettings",
    "LoggingSettings",
    "SiteSettings",
    "StorageSettings",
    "SupabaseSettings",
    "ThrottleSettings",
    "get_settings",
]
