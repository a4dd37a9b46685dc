"""
Application configuration using Pydantic Settings.

All configuration is loaded from environment variables, with an optional .env file
as a fallback. The database credentials live in DATABASE_URL and never in source.

Pydantic Settings automatically:
  1. Reads from environment variables (highest priority)
  2. Falls back to .env file values
  3. Uses defaults defined here (lowest priority)

Usage:
    from auth_lookup.config import settings
    print(settings.DATABASE_URL)
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Central configuration for the Auth & Lookup service."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # --- Application ---
    APP_NAME: str = "Auth & Lookup API"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # --- Server ---
    HOST: str = "0.0.0.0"
    PORT: int = 3000

    # --- Database ---
    # SQLite for local development; use postgresql+asyncpg://... in production
    DATABASE_URL: str = "sqlite+aiosqlite:///./data/auth_lookup.db"
    # Hosted PostgreSQL providers require TLS but hand out self-signed certs
    DATABASE_SSL: bool = False
    DB_POOL_SIZE: int = 5
    DB_MAX_OVERFLOW: int = 5
    # Runs Base.metadata.create_all at startup. Development only.
    CREATE_TABLES: bool = False

    # --- Password hashing ---
    # bcrypt cost factor: each increment doubles the hashing time
    BCRYPT_ROUNDS: int = 10

    # --- CORS ---
    ALLOWED_ORIGINS: list[str] = ["*"]


# Singleton: import this instance everywhere instead of creating new Settings()
settings = Settings()
