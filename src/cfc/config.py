"""Application settings via pydantic-settings."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables with CFC_ prefix."""

    model_config = SettingsConfigDict(
        env_prefix="CFC_",
        env_file=".env",
        case_sensitive=False,
    )

    # --- Core ---
    app_version: str = "0.1.0"
    debug: bool = False
    environment: str = "development"
    cors_origins: list[str] = ["http://localhost:3000"]
    rate_limit_requests: int = 100
    rate_limit_window_seconds: int = 60
    log_level: str = "INFO"
    log_format: str = "json"

    # --- Storage ---
    storage_backend: str = "redis"  # "redis" or "memory"
    storage_namespace: str = "cfc"
    redis_url: str = "redis://localhost:6379/0"

    # --- JWT ---
    jwt_secret_key: str = "cfc-development-signing-key-change-me-in-production"
    jwt_algorithm: str = "HS256"
    jwt_access_token_expire_minutes: int = 60 * 24
    jwt_issuer: str = "communityfoodconnect.ca"

    # --- Password ---
    password_min_length: int = 8
    password_max_length: int = 128

    # --- Admin ---
    admin_emails: list[str] = []

    # --- Deliveries / gamification ---
    max_active_requests: int = 3
    local_timezone: str = "America/Halifax"
    coupon_validity_days: int = 90

    # --- Seed data ---
    seed_on_startup: bool = False
    seed_version: str = "1.0.0"


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings()
