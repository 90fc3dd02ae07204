"""Application configuration and settings management."""
from functools import lru_cache
from pathlib import Path
from typing import List

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

PACKAGE_DIR = Path(__file__).resolve().parent.parent


class Settings(BaseSettings):
    """Global application settings loaded from environment variables or .env."""

    model_config = SettingsConfigDict(
        env_file=(PACKAGE_DIR / ".." / ".env"),
        env_file_encoding="utf-8",
        env_prefix="MSGA_",
        extra="ignore",
        env_nested_delimiter="__",
    )

    app_name: str = "MSGA"
    secret_key: str = "change-me"
    encryption_key: str | None = None

    # Database
    database_url: str = "sqlite+aiosqlite:///./msga.db"

    # Security
    jwt_algorithm: str = "HS256"
    jwt_expire_minutes: int = 60
    allowed_origins: List[str] = ["http://localhost:3001"]
    route_prefix: str = ""

    # Rate limiting (requests per window, per client IP)
    auth_rate_limit: int = 5
    general_rate_limit: int = 100
    rate_limit_window_seconds: int = 60

    # Webhooks
    webhook_timeout_seconds: float = 10.0

    # Version endpoint
    client_info_file: Path = PACKAGE_DIR / "client.json"

    log_level: str = "INFO"

    @field_validator("allowed_origins", mode="before")
    @classmethod
    def _split_origins(cls, value: List[str] | str) -> List[str]:
        if isinstance(value, str):
            return [item.strip() for item in value.split(",") if item.strip()]
        return value

    @field_validator("route_prefix")
    @classmethod
    def _normalize_prefix(cls, value: str) -> str:
        value = value.strip().rstrip("/")
        if value and not value.startswith("/"):
            value = f"/{value}"
        return value


@lru_cache
def get_settings() -> Settings:
    """Return memoized settings instance."""

    return Settings()
