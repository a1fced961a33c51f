"""
Configuration Management for Marketing Budget

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
The engine itself has no external services, so configuration covers
the audit trail (who acts by default, how hard we retry the sink) and
general application metadata.
"""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class AuditSettings(BaseSettings):
    """Audit trail configuration."""

    model_config = SettingsConfigDict(
        env_prefix="AUDIT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    default_user: str = Field(
        default="system",
        min_length=1,
        description="User name recorded when no acting user is supplied"
    )
    summary_max_fields: int = Field(
        default=4,
        ge=1,
        le=20,
        description="Maximum field clauses in a change summary"
    )

    # Sink retry policy
    sink_retry_attempts: int = Field(
        default=3,
        ge=1,
        le=10,
        description="Attempts made to write an entry to the audit sink"
    )
    sink_retry_wait_seconds: float = Field(
        default=0.5,
        ge=0.0,
        description="Base wait for exponential backoff between attempts"
    )
    sink_retry_max_wait_seconds: float = Field(
        default=5.0,
        ge=0.0,
        description="Upper bound on a single backoff wait"
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
    log_level: str = Field(
        default="INFO",
        description="Minimum level for structured log output"
    )

    # Export envelope metadata
    app_version: str = Field(
        default="1.0.0",
        description="Application version stamped on data exports"
    )
    export_version: str = Field(
        default="1.0",
        description="Format version of the data export envelope"
    )

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Only accept standard logging level names."""
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in allowed:
            raise ValueError(f"Unsupported log level: {v}. Allowed: {allowed}")
        return v.upper()


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
    def audit(self) -> AuditSettings:
        return AuditSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}.
    Useful for startup checks.
    """
    results = {}

    settings = get_settings()

    try:
        _ = settings.audit
        results["audit"] = True
    except Exception as e:
        results["audit"] = False
        results["audit_error"] = str(e)

    try:
        _ = settings.app
        results["app"] = True
    except Exception as e:
        results["app"] = False
        results["app_error"] = str(e)

    return results
