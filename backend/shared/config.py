"""
Centralized configuration for the Tribunal backend.

All settings are loaded from environment variables with sensible defaults.
Provider keys keep their conventional names (e.g., OPENAI_API_KEY).
"""

from functools import lru_cache
from typing import Optional
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class PricingOverride(BaseModel):
    """Operator-supplied price for a backing model (USD per 1M tokens)."""

    input: float = Field(..., ge=0)
    output: float = Field(..., ge=0)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "Tribunal API"
    app_version: str = "0.1.0"
    debug: bool = False

    # Server
    host: str = "0.0.0.0"
    port: int = 8000
    reload: bool = False

    # CORS settings
    cors_origins: list[str] = ["http://localhost:5173", "http://localhost:3000"]
    cors_allow_credentials: bool = True
    cors_allow_methods: list[str] = ["*"]
    cors_allow_headers: list[str] = ["*"]

    # Rate limiting
    rate_limit_requests: int = 10
    rate_limit_window: int = 60  # seconds

    # LLM provider
    openai_api_key: str = ""
    openai_base_url: Optional[str] = None

    # Pricing overrides, e.g. PRICING_OVERRIDES='{"gpt-5.2": {"input": 2, "output": 15}}'
    pricing_overrides: dict[str, PricingOverride] = Field(default_factory=dict)

    # Safety
    moderation_model: str = "omni-moderation-latest"
    moderation_max_chars: int = Field(default=4000, ge=1)

    # Debate
    max_query_length: int = Field(default=2000, ge=1)
    delta_chunk_size: int = Field(default=80, ge=1)

    # Logging
    log_level: str = "INFO"
    log_truncate_length: int = Field(default=200, ge=50, le=1000)


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()
