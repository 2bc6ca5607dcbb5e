"""Configuration Management."""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


class Settings(BaseSettings):
    """Library settings from environment."""

    model_config = SettingsConfigDict(
        env_prefix="SELFGEN_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Ignore extra environment variables
    )

    # Logging
    log_level: str = Field(default="INFO", description="Log level")
    json_logs: bool = Field(default=False, description="Use JSON log format")
    enable_tracing: bool = Field(default=False, description="Log spans around generation and repair")

    # Pipeline retries
    max_attempts: int = Field(default=3, ge=1, description="Attempts per pipeline stage")
    retry_delay: float = Field(default=0.25, ge=0.0, description="Delay before first retry (seconds)")
    retry_backoff: float = Field(default=2.0, ge=1.0, description="Multiplier applied per retry")

    # Context capture
    sibling_limit: int = Field(default=3, ge=0, description="Max sibling fragments in rich/full context")
    ancestor_limit: int = Field(default=5, ge=0, description="Max ancestors in full context")
    client_signature: str = Field(default="selfgen-python", description="Client signature reported in context")

    # Growth limits
    max_tree_nodes: int = Field(default=500, gt=0, description="Max nodes the live tree may hold")
    max_generation_depth: int = Field(default=5, ge=1, description="Max chained generative hops")

    # Caching
    cache_backend: Literal["memory", "lru", "http"] = Field(default="memory", description="Fragment cache backend")
    cache_max_size: int = Field(default=1000, gt=0, description="Max entries for the lru backend")
    coalesce_inflight: bool = Field(default=True, description="Share in-flight generations per cache key")

    # Persistent storage
    storage_url: str = Field(default="http://localhost:8000", description="Key-value storage service URL")
    storage_timeout: float = Field(default=5.0, gt=0, description="Storage request timeout")

    # Model
    gemini_api_key: str = Field(default="", description="Gemini API key")
    gemini_model: str = Field(default="gemini-2.0-flash-exp", description="Gemini model name")
    gemini_temperature: float = Field(default=0.2, ge=0.0, le=2.0, description="Model temperature")
    gemini_max_tokens: int = Field(default=8192, gt=0, description="Max output tokens")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
