"""Configuration Management."""

from enum import Enum
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


class ReferencePolicy(str, Enum):
    """What a decode does with a reference key missing from the reference table."""

    NULL = "null"
    RAISE = "raise"


class Settings(BaseSettings):
    """Synchronization settings from environment."""

    model_config = SettingsConfigDict(
        env_prefix="UISYNC_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Ignore extra environment variables
    )

    # Logging
    log_level: str = Field(default="INFO", description="Log level")
    json_logs: bool = Field(default=False, description="Use JSON log format")

    # Session
    default_callback_interval: int = Field(
        default=500, gt=0, description="Poll interval (ms) when no task queue votes"
    )
    character_encoding: str = Field(default="UTF-8", description="Session character encoding")

    # Decoding
    missing_reference_policy: ReferencePolicy = Field(
        default=ReferencePolicy.NULL, description="Handling of unknown reference keys"
    )
    max_document_size: int = Field(
        default=512 * 1024, gt=0, description="Max inbound document size (bytes)"
    )
    max_tree_depth: int = Field(default=64, gt=0, description="Max inbound element nesting")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
