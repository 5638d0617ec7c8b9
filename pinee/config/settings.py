"""
Configuration Management for PINEE

Every tunable value comes from the environment (or a .env file) through
pydantic-settings, so it is validated once at startup instead of failing
deep inside a screen. Swipe geometry, the stored date format and the
balance range policy live next to the storage credentials.
"""

import warnings
from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class GoogleSheetsSettings(BaseSettings):
    """Where the dashboard keeps transactions and the audit trail."""

    model_config = SettingsConfigDict(
        env_prefix="GOOGLE_SHEETS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    credentials_path: str = Field(
        ...,
        description="Service account JSON key file"
    )
    spreadsheet_id: str = Field(
        ...,
        description="Key of the spreadsheet holding PINEE data"
    )
    transactions_sheet_name: str = "Transactions"
    audit_sheet_name: str = "AuditLog"

    @field_validator('credentials_path')
    @classmethod
    def warn_if_key_file_missing(cls, v: str) -> str:
        # Only a warning: the key may be mounted after the app starts
        if not Path(v).exists():
            warnings.warn(f"Service account key file {v} does not exist yet")
        return v


class AppSettings(BaseSettings):
    """Behavior of the app itself (PINEE_* variables)."""

    model_config = SettingsConfigDict(
        env_prefix="PINEE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    app_environment: str = "development"
    debug_mode: bool = Field(
        default=False,
        description="Human-readable console logs instead of JSON"
    )

    # Document parsing
    date_format: str = Field(
        default="%Y-%m-%d",
        description="strptime format of the 'date' field in stored documents"
    )
    default_title: str = Field(
        default="Sem título",
        description="Title used when a document has neither title nor description"
    )

    # Presentation
    currency_symbol: str = "R$"
    swipe_threshold: float = Field(
        default=50.0,
        gt=0,
        description="Leftward drag distance needed to open a swipe row"
    )
    swipe_reveal_width: float = Field(
        default=120.0,
        gt=0,
        description="Width revealed behind an open row (edit + delete buttons)"
    )

    # Periods and balance
    default_period: str = Field(
        default="monthly",
        pattern="^(daily|weekly|monthly|yearly|all_time)$",
        description="Period selected when the app starts; custom ranges are chosen in the app"
    )
    consolidation_applies_date_range: bool = Field(
        default=False,
        description=(
            "Restrict the consolidated balance to the provider's range. "
            "When False every parseable record counts (all-time balance)."
        )
    )

    # Export
    export_directory: str = Field(
        default="exports",
        description="Directory where CSV exports are written"
    )


class Settings(BaseSettings):
    """
    Entry point to all settings groups.

    Groups are built on access, so a dashboard without Google Sheets
    credentials can still read its app settings.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    @property
    def google_sheets(self) -> GoogleSheetsSettings:
        return GoogleSheetsSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """Shared Settings instance. Tests call get_settings.cache_clear() after changing env."""
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Check which settings groups load.

    Returns {"google_sheets": bool, "app": bool} plus a "<group>_error"
    message for each group that failed.
    """
    settings = get_settings()
    groups = {
        "google_sheets": lambda: settings.google_sheets,
        "app": lambda: settings.app,
    }

    results: dict = {}
    for name, load in groups.items():
        try:
            load()
            results[name] = True
        except Exception as e:
            results[name] = False
            results[f"{name}_error"] = str(e)
    return results
