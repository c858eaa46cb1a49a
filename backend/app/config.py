"""
Application configuration loaded from environment variables.
"""
from functools import lru_cache
from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings from environment variables."""

    # Console MongoDB (admin accounts and registry, not the browsed database)
    mongo_uri: str = "mongodb://mongodb:27017"

    # Redis
    redis_host: str = "redis"
    redis_port: int = 6379

    # JWT Configuration
    jwt_secret_key: str = "CHANGE_ME_IN_PRODUCTION_USE_STRONG_SECRET"
    jwt_algorithm: str = "HS256"
    jwt_access_token_expire_minutes: int = 30

    # Rate Limiting
    login_rate_limit_attempts: int = 5
    login_rate_limit_window_seconds: int = 60
    user_lockout_threshold: int = 10
    user_lockout_duration_minutes: int = 30

    # Bootstrap admin created on startup when both are set
    bootstrap_admin_email: str | None = None
    bootstrap_admin_password: str | None = None

    # Browsed databases
    max_open_connections: int = Field(default=20, ge=1)
    server_selection_timeout_ms: int = 5000

    # Logging
    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        extra = "ignore"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
