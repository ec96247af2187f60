"""Configuration from environment (no hardcoded secrets)."""

from pathlib import Path
from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Backend settings from env."""

    model_config = SettingsConfigDict(env_prefix="FILES_MANAGER_", extra="ignore")

    # Storage
    folder_path: Path = Path("/tmp/files_manager")
    db_path: Path = Path("/data/files_manager.db")

    # Token cache
    redis_url: str = "redis://localhost:6379/0"
    token_ttl_seconds: int = 24 * 60 * 60
    token_key_prefix: str = "auth_"

    # First user (bootstrap); the credential store has no signup route
    bootstrap_user_email: str = ""
    bootstrap_user_password: str = ""

    # CORS: set as comma-separated string in env so pydantic-settings does not try to JSON-decode it
    cors_origins: str = "http://localhost:5000"

    @property
    def cors_origins_list(self) -> List[str]:
        """CORS origins as a list (split on comma)."""
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()] or [
            "http://localhost:5000"
        ]

    @property
    def database_url(self) -> str:
        """SQLAlchemy async URL for the metadata store."""
        return f"sqlite+aiosqlite:///{self.db_path}"

    # Server
    port: int = 5000
    rate_limit_enabled: bool = True

    # Logging (empty log_file = stderr only; level DEBUG|INFO|WARNING|ERROR)
    log_level: str = "INFO"
    log_file: str = ""


def get_settings() -> Settings:
    """Return application settings."""
    return Settings()
