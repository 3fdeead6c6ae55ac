# moderation/service/config.py

"""Application configuration using Pydantic Settings.

Manages environment variables, defaults, and validation rules.
"""

import logging

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_ENDPOINT = "https://commentanalyzer.googleapis.com/v1alpha1/comments:analyze"


class Settings(BaseSettings):
    """Global client settings.

    Loads values from environment variables (prefix 'PERSPECTIVE_') or .env file.
    """

    model_config = SettingsConfigDict(
        env_prefix="PERSPECTIVE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Credentials & endpoint
    api_key: SecretStr = Field(
        default=SecretStr(""), description="API key sent as the 'key' query parameter."
    )

    endpoint: str = Field(
        default=DEFAULT_ENDPOINT, description="URL of the comments:analyze endpoint."
    )

    # Transport timeouts (seconds)
    connect_timeout: float = Field(default=10.0, gt=0.0)
    read_timeout: float = Field(default=25.0, gt=0.0)
    write_timeout: float = Field(default=25.0, gt=0.0)
    pool_timeout: float = Field(default=30.0, gt=0.0)

    # Request defaults
    default_language: str = Field(
        default="en", description="Language used when a request does not set one."
    )

    log_level: str = Field(default="INFO", description="Root logging level.")

    @field_validator("endpoint")
    @classmethod
    def default_blank_endpoint(cls, v: str) -> str:
        """Fall back to the public endpoint when the override is blank."""
        return v.strip() or DEFAULT_ENDPOINT

    @field_validator("default_language")
    @classmethod
    def validate_language(cls, v: str) -> str:
        """Ensure language code is not empty."""
        if not v.strip():
            raise ValueError("Default language cannot be empty")
        return v.strip()

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {v}")
        return level


# Singleton settings instance
settings = Settings()
