"""
Centralized configuration management using Pydantic Settings.

Configuration is loaded from environment variables with sensible defaults.
"""

from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

PROBE_SYNC_ENV = "PROBE_SYNC"


class ApiConfig(BaseSettings):
    """Remote management service connection."""

    model_config = SettingsConfigDict(env_prefix="SYNC_BRIDGE_API_")

    base_url: str = Field(default="http://localhost/api", description="Base URL of the HTTP/JSON API")
    timeout: float = Field(default=30.0, description="HTTP timeout in seconds")

    @field_validator("base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")


class EventsConfig(BaseSettings):
    """Broadcast hub configuration."""

    model_config = SettingsConfigDict(env_prefix="SYNC_BRIDGE_EVENTS_")

    capacity: int = Field(default=16, ge=1, description="Buffered events per subscriber before lagging")


class ManagerConfig(BaseSettings):
    """Manager actions configuration.

    Built on demand by read_probe_sync_flag(), never held by Settings.
    """

    model_config = SettingsConfigDict(populate_by_name=True)

    # "1" selects the synchronous probe, unset skips probing
    probe_sync: Optional[str] = Field(default=None, validation_alias=PROBE_SYNC_ENV)


class Settings(BaseSettings):
    """Root settings object."""

    model_config = SettingsConfigDict(
        env_prefix="SYNC_BRIDGE_",
        env_file=".env",
        extra="ignore",
    )

    log_level: str = Field(default="INFO", description="Logging level")

    api: ApiConfig = Field(default_factory=ApiConfig)
    events: EventsConfig = Field(default_factory=EventsConfig)

    @field_validator("log_level")
    @classmethod
    def upper_log_level(cls, v: str) -> str:
        return v.upper()


def read_probe_sync_flag() -> Optional[str]:
    """Read the probe variant flag from the process environment.

    Not cached: the flag may change between calls.
    """
    return ManagerConfig().probe_sync


settings = Settings()
