from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Redaction
    safe_mode: bool = Field(
        default=True,
        alias="REDLINE_SAFE_MODE",
        description="Mask sensitive entity values in rendered text and table cells",
    )
    redact_person_names: bool = Field(
        default=False,
        alias="REDLINE_REDACT_PERSON_NAMES",
        description="Treat person_name entities as sensitive in addition to the base set",
    )

    # Aggregation
    aggregation_workers: int = Field(
        default=4,
        ge=1,
        alias="REDLINE_AGGREGATION_WORKERS",
        description="Thread pool size for per-document cell computation",
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings.

    Settings are read from environment variables and .env file once,
    then cached for the lifetime of the process. Logging is configured
    separately from REDLINE_LOG_LEVEL / REDLINE_LOG_FORMAT by
    :func:`redline.logging.configure`.
    """
    return Settings()
