"""Settings loaded from the environment (prefix ``SWAGGER_DIFF_``) or ``.env``."""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_MODEL = "claude-sonnet-4-20250514"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="SWAGGER_DIFF_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Logging
    log_level: str = Field(default="warning")
    log_format: Literal["console", "json"] = Field(default="console")

    # Only the schema of this response code is compared
    success_status: str = Field(default="200")

    # Changelog summary
    llm_model: str = Field(default=DEFAULT_MODEL)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
