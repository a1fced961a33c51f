"""Configuration package."""

from marketing_budget.config.settings import (
    AppSettings,
    AuditSettings,
    Settings,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "AppSettings",
    "AuditSettings",
    "Settings",
    "get_settings",
    "validate_all_settings",
]
