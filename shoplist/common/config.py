"""
Application configuration using Pydantic Settings
Reads from environment variables (SHOPLIST_ prefix) and .env file
"""
from functools import lru_cache
from datetime import timedelta
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings from environment"""

    model_config = SettingsConfigDict(
        env_prefix="SHOPLIST_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Application
    environment: str = Field(default="development")
    log_level: str = Field(default="INFO")

    # Share-a-cart API
    share_a_cart_api_base: str = Field(default="https://share-a-cart.com/api/get/r/cart")
    fetch_timeout_seconds: float = Field(default=10.0, gt=0)
    # Refuse type coercion ("2" -> 2) when validating fetched carts
    strict_validation: bool = Field(default=False)

    # Storage
    storage_backend: str = Field(default="file")
    storage_path: str = Field(default=".shoplist")

    # Reconciliation
    # None keeps a persisted cart forever (no automatic re-fetch)
    state_max_age_hours: Optional[float] = Field(default=None, ge=0)

    # Raw cart cache (cart-cache-{id})
    cart_cache_enabled: bool = Field(default=True)
    cart_cache_ttl_seconds: int = Field(default=3600, ge=0)

    @property
    def state_max_age(self) -> Optional[timedelta]:
        """Staleness window for persisted cart states"""
        if self.state_max_age_hours is None:
            return None
        return timedelta(hours=self.state_max_age_hours)

    @property
    def cart_cache_ttl(self) -> timedelta:
        return timedelta(seconds=self.cart_cache_ttl_seconds)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v):
        """Validate log level"""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"LOG_LEVEL must be one of {valid_levels}")
        return v.upper()

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v):
        """Validate environment"""
        valid_envs = ["development", "staging", "production"]
        if v.lower() not in valid_envs:
            raise ValueError(f"ENVIRONMENT must be one of {valid_envs}")
        return v.lower()

    @field_validator("storage_backend")
    @classmethod
    def validate_storage_backend(cls, v):
        """Validate storage backend"""
        valid_backends = ["file", "memory"]
        if v.lower() not in valid_backends:
            raise ValueError(f"STORAGE_BACKEND must be one of {valid_backends}")
        return v.lower()


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()
