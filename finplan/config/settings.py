"""
Configuration Management for finplan

Typed settings read from FINPLAN_* environment variables (pydantic-settings).

All tunables live here: report rounding, export layout, logging and the
size of the in-memory audit trail. Every field has a default, so the
package works with no environment at all.
"""

from decimal import ROUND_HALF_EVEN, ROUND_HALF_UP
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


ROUNDING_MODES = {
    "half_even": ROUND_HALF_EVEN,
    "half_up": ROUND_HALF_UP,
}


class ReportSettings(BaseSettings):
    """Monthly report configuration."""

    model_config = SettingsConfigDict(
        env_prefix="FINPLAN_REPORT_",
        extra="ignore"
    )

    percentage_places: int = Field(
        default=2,
        ge=0,
        le=6,
        description="Decimal places kept in category percentages"
    )
    percentage_rounding: str = Field(
        default="half_even",
        pattern="^(half_even|half_up)$",
        description="Rounding rule for category percentages"
    )

    @property
    def rounding_mode(self) -> str:
        """The decimal module constant for the configured rounding rule."""
        return ROUNDING_MODES[self.percentage_rounding]


class TransferSettings(BaseSettings):
    """JSON import/export configuration."""

    model_config = SettingsConfigDict(
        env_prefix="FINPLAN_TRANSFER_",
        extra="ignore"
    )

    export_indent: int = Field(
        default=2,
        ge=0,
        le=8,
        description="Indentation of exported JSON (0 = compact)"
    )


class AppSettings(BaseSettings):
    """
    Process-wide settings: logging and the audit trail.

    Read from FINPLAN_* variables and an optional .env file.
    """

    model_config = SettingsConfigDict(
        env_prefix="FINPLAN_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Logging
    debug_mode: bool = Field(
        default=False,
        description="Emit DEBUG audit lines regardless of log_level"
    )
    log_level: str = Field(
        default="INFO",
        description="Minimum level for local structured logs"
    )
    audit_trail_limit: int = Field(
        default=1000,
        ge=1,
        le=100000,
        description="Maximum number of audit events kept in memory"
    )

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Only allow standard logging level names."""
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in allowed:
            raise ValueError(f"Unsupported log level: {v}. Allowed: {sorted(allowed)}")
        return v.upper()

    @property
    def effective_log_level(self) -> str:
        """log_level, lowered to DEBUG when debug_mode is on."""
        return "DEBUG" if self.debug_mode else self.log_level


class Settings(BaseSettings):
    """
    Entry point to every settings section.

    Sections are rebuilt on each access, so they follow the environment.
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
    def report(self) -> ReportSettings:
        return ReportSettings()

    @property
    def transfer(self) -> TransferSettings:
        return TransferSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings sections load from the current environment.

    Returns a dict of {section_name: is_valid}, plus
    {section_name}_error entries holding the message of any failure.
    """
    results = {}
    settings = get_settings()

    for section in ("app", "report", "transfer"):
        try:
            getattr(settings, section)
            results[section] = True
        except Exception as e:
            results[section] = False
            results[f"{section}_error"] = str(e)

    return results
