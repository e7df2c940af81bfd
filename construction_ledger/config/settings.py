"""
Configuration Management for the Construction Ledger

Uses pydantic-settings for type-safe configuration from environment variables
and a .env file in the working directory. Real environment variables win
over the file.

DESIGN DECISION: All configuration is centralized here.
The ledger itself takes plain values (a project, an adapter, seed data);
only the orchestrator reads settings, so tests never depend on the environment.
"""

from functools import lru_cache
from pathlib import Path
from typing import Literal, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageSettings(BaseSettings):
    """Key-value storage backend configuration."""

    model_config = SettingsConfigDict(
        env_prefix="LEDGER_STORAGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    backend: Literal["json", "memory"] = Field(
        default="json",
        description="Which key-value backend to use"
    )
    data_dir: Path = Field(
        default=Path("./data"),
        description="Directory holding one JSON document per collection"
    )

    # One stable key per collection
    stages_key: str = Field(
        default="construction-stages",
        min_length=1,
        description="Storage key for the stage collection"
    )
    expenses_key: str = Field(
        default="construction-expenses",
        min_length=1,
        description="Storage key for the expense collection"
    )
    payments_key: str = Field(
        default="construction-payments",
        min_length=1,
        description="Storage key for the payment log"
    )
    clients_key: str = Field(
        default="construction-clients",
        min_length=1,
        description="Storage key for the client list"
    )

    write_attempts: int = Field(
        default=3,
        ge=1,
        le=10,
        description="How many times a failed file write is attempted"
    )


class ProjectSettings(BaseSettings):
    """Reference data for the single tracked project."""

    model_config = SettingsConfigDict(
        env_prefix="LEDGER_PROJECT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    name: str = Field(
        default="PGK Construction",
        description="Project name"
    )
    engineer: str = Field(
        default="Er. P. Govindaraj",
        description="Engineer in charge"
    )
    per_sqft_rate: int = Field(
        default=1650,
        gt=0,
        description="Construction rate per square foot (INR)"
    )
    total_sqft: int = Field(
        default=625,
        gt=0,
        description="Built-up area in square feet"
    )
    total_cost: Optional[int] = Field(
        default=None,
        gt=0,
        description="Fixed construction budget; defaults to rate * area"
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
    log_level: str = Field(
        default="INFO",
        description="Minimum level for the structured log"
    )

    # Startup behaviour
    seed_on_first_run: bool = Field(
        default=True,
        description="Load the default stages and expenses when nothing is stored"
    )

    # Form validation thresholds
    future_date_tolerance_days: int = Field(
        default=0,
        ge=0,
        description="How many days in the future an entry date can be"
    )
    min_stage_name_length: int = Field(
        default=3,
        ge=1,
        description="Shortest accepted stage name"
    )

    @field_validator('log_level')
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        """Accept any case, store upper case."""
        level = v.strip().upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level


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
    def storage(self) -> StorageSettings:
        return StorageSettings()

    @property
    def project(self) -> ProjectSettings:
        return ProjectSettings()

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

    for name in ("storage", "project", "app"):
        try:
            getattr(settings, name)
            results[name] = True
        except Exception as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
