"""
Configuration Management for BoutiqueBill

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
Every tunable (currency, messaging endpoint, page layout, demo login)
is visible in one place and validated at startup.
"""

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ExportSettings(BaseSettings):
    """PDF export layout configuration."""

    model_config = SettingsConfigDict(
        env_prefix="EXPORT_",
        extra="ignore"
    )

    page_size: str = Field(
        default="A4",
        description="Page size of the exported document (A4 or LETTER)"
    )
    margin_mm: float = Field(
        default=10.0,
        ge=0.0,
        le=50.0,
        description="Fixed page margin in millimetres"
    )
    raster_width_px: int = Field(
        default=1240,
        ge=400,
        le=4000,
        description="Width of the rasterized preview image"
    )
    currency_label: str = Field(
        default="Rs.",
        description="Currency label used in the raster (bitmap fonts lack ₹)"
    )
    font_path: Optional[str] = Field(
        default=None,
        description="Optional TrueType font used to render the preview"
    )
    file_name_prefix: str = Field(
        default="Invoice",
        description="Prefix of the downloaded PDF file name"
    )

    @field_validator('page_size')
    @classmethod
    def validate_page_size(cls, v: str) -> str:
        """Only the page sizes the exporter knows about."""
        normalized = v.strip().upper()
        if normalized not in {"A4", "LETTER"}:
            raise ValueError(f"Unsupported page size: {v}. Allowed: A4, LETTER")
        return normalized

    @field_validator('font_path')
    @classmethod
    def validate_font_path(cls, v: Optional[str]) -> Optional[str]:
        """Warn if the font file doesn't exist (the default font is used instead)."""
        if v and not Path(v).exists():
            import warnings
            warnings.warn(
                f"Export font not found at {v}. "
                "The built-in font will be used."
            )
            return None
        return v


class AuthSettings(BaseSettings):
    """Demo login configuration."""

    model_config = SettingsConfigDict(
        env_prefix="AUTH_",
        extra="ignore"
    )

    demo_email: str = Field(
        default="user@example.com",
        description="The only accepted login email"
    )
    demo_password: str = Field(
        default="password",
        description="The only accepted login password"
    )
    storage_key: str = Field(
        default="boutique-bill-user",
        description="Key under which the logged-in user is stored"
    )
    storage_path: str = Field(
        default=".boutique_bill/local_storage.json",
        description="Path of the local key/value store"
    )
    persist_login: bool = Field(
        default=False,
        description=(
            "Keep the login in the JSON store at storage_path. It is shared by "
            "every browser using this server, so only enable it on a "
            "single-user machine"
        )
    )


class ShopSettings(BaseSettings):
    """Shop details prefilled on every new invoice."""

    model_config = SettingsConfigDict(
        env_prefix="SHOP_",
        extra="ignore"
    )

    default_name: str = Field(
        default="",
        description="Shop name prefilled on new invoices"
    )
    default_address: str = Field(
        default="",
        description="Shop address prefilled on new invoices"
    )


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Environment
    app_environment: str = Field(
        default="development",
        description="Application environment"
    )
    debug_mode: bool = Field(
        default=False,
        description="Enable debug mode"
    )

    # Money and messages
    currency_symbol: str = Field(
        default="₹",
        description="Currency symbol shown in previews and messages"
    )
    messaging_base_url: str = Field(
        default="https://wa.me",
        description="Base URL of the messaging deep link"
    )
    measurement_unit: str = Field(
        default="inches",
        description="Unit shown next to measurements"
    )

    # Images
    camera_enabled: bool = Field(
        default=True,
        description="Offer camera capture for reference images"
    )
    max_upload_size_mb: int = Field(
        default=10,
        ge=1,
        le=50,
        description="Maximum upload file size in MB"
    )
    supported_image_formats: str = Field(
        default="jpg,jpeg,png,webp",
        description="Comma-separated list of supported image formats"
    )
    max_image_dimension: int = Field(
        default=1024,
        ge=64,
        le=4096,
        description="Longest side of stored reference images"
    )

    # Validation thresholds
    future_date_tolerance_days: int = Field(
        default=7,
        description="How many days in the future an invoice date can be"
    )

    @field_validator('messaging_base_url')
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @property
    def supported_formats_list(self) -> list[str]:
        """Get supported formats as a list."""
        return [fmt.strip().lower() for fmt in self.supported_image_formats.split(",")]

    @property
    def max_upload_size_bytes(self) -> int:
        """Get max upload size in bytes."""
        return self.max_upload_size_mb * 1024 * 1024


class Settings(BaseSettings):
    """
    Root settings container.

    Aggregates all sub-settings for easy access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    @property
    def app(self) -> AppSettings:
        return AppSettings()

    @property
    def export(self) -> ExportSettings:
        return ExportSettings()

    @property
    def auth(self) -> AuthSettings:
        return AuthSettings()

    @property
    def shop(self) -> ShopSettings:
        return ShopSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Uses LRU cache to ensure settings are only loaded once.
    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}.
    Useful for the settings page.
    """
    results = {}

    settings = get_settings()

    for name in ("app", "export", "auth", "shop"):
        try:
            _ = getattr(settings, name)
            results[name] = True
        except Exception as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
