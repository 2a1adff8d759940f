"""Configuration package."""

from boutique_bill.config.settings import (
    AppSettings,
    AuthSettings,
    ExportSettings,
    Settings,
    ShopSettings,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "AppSettings",
    "AuthSettings",
    "ExportSettings",
    "Settings",
    "ShopSettings",
    "get_settings",
    "validate_all_settings",
]
