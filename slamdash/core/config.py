"""Application configuration loaded from environment variables."""

from functools import lru_cache
from typing import Literal

from pydantic import SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from slamdash.core.security import PASSWORD_MAX_LEN, PASSWORD_MIN_LEN

# Allowed URL schemes for DATABASE_URL (module-level so validators can use it).
VALID_DATABASE_URL_PREFIXES = (
    "sqlite://",
    "postgresql://",
    "postgresql+psycopg2://",
    "postgres://",
    "postgres+psycopg2://",
)

VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class Settings(BaseSettings):
    """Validated application settings from env and optional .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    APP_ENV: Literal["dev", "prod"] = "dev"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    API_V1_PREFIX: str = "/api/v1"

    # Development server (python -m slamdash.main); production runs uvicorn directly.
    SERVER_HOST: str = "127.0.0.1"
    SERVER_PORT: int = 8080

    # SQLite file next to the process by default; PostgreSQL for shared deployments.
    DATABASE_URL: str = "sqlite:///./slam.db"
    # Create missing tables at startup (dev convenience; use Alembic in prod).
    DB_CREATE_TABLES: bool = True

    # Fixed-window sessions: expiry is set once at issuance and never extended.
    SESSION_TTL_HOURS: int = 24
    SESSION_COOKIE_NAME: str = "session_id"
    # Set to True behind HTTPS so the browser only sends the cookie over TLS.
    SESSION_COOKIE_SECURE: bool = False
    # Purge of expired session rows (run via cron or CLI); storage hygiene only.
    SESSION_PURGE_ENABLED: bool = True

    BCRYPT_ROUNDS: int = 12

    # First administrator, created only when the users table is empty. Rotate the password.
    BOOTSTRAP_ADMIN_USERNAME: str = "admin"
    BOOTSTRAP_ADMIN_EMAIL: str = "admin@slam.local"
    BOOTSTRAP_ADMIN_PASSWORD: SecretStr = SecretStr("admin123")

    @field_validator("DATABASE_URL")
    @classmethod
    def validate_database_url(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("DATABASE_URL must be set and non-empty")
        if not any(v.strip().startswith(prefix) for prefix in VALID_DATABASE_URL_PREFIXES):
            raise ValueError(
                "DATABASE_URL must be a SQLite or PostgreSQL URL "
                "(e.g. sqlite:///./slam.db or postgresql+psycopg2://)"
            )
        return v.strip()

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = (v or "").strip().upper()
        if level not in VALID_LOG_LEVELS:
            raise ValueError(f"LOG_LEVEL must be one of {', '.join(VALID_LOG_LEVELS)}")
        return level

    @field_validator("SESSION_TTL_HOURS")
    @classmethod
    def validate_session_ttl_hours(cls, v: int) -> int:
        if v < 1 or v > 720:
            raise ValueError("SESSION_TTL_HOURS must be between 1 and 720 (1 hour to 30 days)")
        return v

    @field_validator("SESSION_COOKIE_NAME")
    @classmethod
    def validate_session_cookie_name(cls, v: str) -> str:
        name = (v or "").strip()
        if not name or not all(c.isalnum() or c in "-_" for c in name):
            raise ValueError(
                "SESSION_COOKIE_NAME must be non-empty and contain only letters, digits, '-' or '_'"
            )
        return name

    @field_validator("SERVER_PORT")
    @classmethod
    def validate_server_port(cls, v: int) -> int:
        if v < 1 or v > 65535:
            raise ValueError("SERVER_PORT must be between 1 and 65535")
        return v

    @field_validator("BCRYPT_ROUNDS")
    @classmethod
    def validate_bcrypt_rounds(cls, v: int) -> int:
        if v < 4 or v > 16:
            raise ValueError("BCRYPT_ROUNDS must be between 4 and 16")
        return v

    @field_validator("BOOTSTRAP_ADMIN_USERNAME", "BOOTSTRAP_ADMIN_EMAIL")
    @classmethod
    def validate_bootstrap_identity(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Bootstrap administrator username and email must be non-empty")
        return v.strip()

    @field_validator("BOOTSTRAP_ADMIN_PASSWORD")
    @classmethod
    def validate_bootstrap_password(cls, v: SecretStr) -> SecretStr:
        if not (PASSWORD_MIN_LEN <= len(v.get_secret_value()) <= PASSWORD_MAX_LEN):
            raise ValueError(
                f"BOOTSTRAP_ADMIN_PASSWORD must be {PASSWORD_MIN_LEN}-{PASSWORD_MAX_LEN} characters"
            )
        return v


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance (safe to call from dependencies)."""
    return Settings()
