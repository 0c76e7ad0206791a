"""
Configuration settings for the payments engine.

Uses Pydantic Settings to load environment variables (or a `.env` file) for
logging, the record error policy and the default report format. CLI options
override these values for a single run.
"""
from __future__ import annotations

from enum import Enum
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ErrorPolicy(str, Enum):
    """What the pipeline does with a record that raises `RecordError`."""

    SKIP = "skip"
    ABORT = "abort"


class Settings(BaseSettings):
    # Application
    app_env: str = Field("development", alias="APP_ENV")
    log_level: str = Field("WARNING", alias="LOG_LEVEL")
    log_json: bool = Field(False, alias="LOG_JSON")

    # Processing
    on_error: ErrorPolicy = Field(ErrorPolicy.SKIP, alias="ON_ERROR")
    strict_client_match: bool = Field(False, alias="STRICT_CLIENT_MATCH")

    # Output
    output_format: str = Field("csv", alias="OUTPUT_FORMAT")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Retrieve a cached instance of Settings to avoid repeated env parsing.
    """
    return Settings()


__all__ = ["ErrorPolicy", "Settings", "get_settings"]
