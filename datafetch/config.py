"""Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - Every setting has a default: the package works without any environment
    - get_settings() is cached (lru_cache) — single instance per process

Design Decisions:
    - DATAFETCH_ prefix: settings live inside a host application's environment
"""

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """datafetch settings from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="DATAFETCH_", env_file=".env", case_sensitive=False,
        extra="ignore",
    )

    # Conversion
    converter_strict: bool = False
    converter_from_attributes: bool = True

    # Scheduling
    scheduler_thread_name: str = "datafetch-scheduler"

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"

    @field_validator("log_format")
    @classmethod
    def check_log_format(cls, v: str) -> str:
        if v not in ("json", "text"):
            raise ValueError("log_format must be 'json' or 'text'")
        return v


@lru_cache
def get_settings() -> Settings:
    return Settings()
