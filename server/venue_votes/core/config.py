import logging
import sys
from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

# Look for .env in project root (parent of server/)
_env_file = Path(__file__).resolve().parent.parent.parent.parent / ".env"

# server/ directory, used to resolve the default data and static locations
_server_dir = Path(__file__).resolve().parent.parent.parent


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=_env_file, extra="ignore")

    # Environment
    env: Literal["development", "production"] = "development"

    # Server
    host: str = "0.0.0.0"
    port: int = 3000  # PaaS platforms set PORT env var

    # Database - empty means a SQLite file named votes.db inside data_dir
    database_url: str = ""
    data_dir: str = ""  # defaults to server/data/

    # Static frontend, mounted at / when the directory exists
    static_dir: str = ""  # defaults to server/public/

    # Trusted proxy IPs/CIDRs for X-Real-IP / X-Forwarded-For (comma-separated)
    # Empty = trust the direct connection only
    trusted_proxies: str = "127.0.0.1,::1"

    # CORS - comma-separated origins or "*" for all (dev only)
    cors_origins: str = "*"

    # Rate limiting (disabled by default in dev, enable in prod)
    rate_limit_enabled: bool | None = None  # None = auto (disabled in dev, enabled in prod)
    vote_rate_limit_per_minute: int = 30

    log_level: str = "INFO"

    @property
    def resolved_data_dir(self) -> str:
        """Return data directory, defaulting to server/data/ if not set."""
        if self.data_dir:
            return self.data_dir
        return str(_server_dir / "data")

    @property
    def resolved_static_dir(self) -> str:
        """Return static directory, defaulting to server/public/ if not set."""
        if self.static_dir:
            return self.static_dir
        return str(_server_dir / "public")

    @property
    def resolved_database_url(self) -> str:
        """Return the SQLAlchemy URL, falling back to <data_dir>/votes.db."""
        if self.database_url:
            url = self.database_url
            # Heroku-style postgres:// is not accepted by SQLAlchemy 2.x
            if url.startswith("postgres://"):
                url = url.replace("postgres://", "postgresql://", 1)
            return url
        return f"sqlite:///{Path(self.resolved_data_dir) / 'votes.db'}"

    @property
    def is_rate_limit_enabled(self) -> bool:
        """Check if rate limiting is enabled (auto-detect based on env if not set)."""
        if self.rate_limit_enabled is not None:
            return self.rate_limit_enabled
        return self.is_production

    @property
    def is_production(self) -> bool:
        return self.env == "production"


def validate_settings(settings: Settings) -> None:
    """Validate settings, logging warnings and exiting on fatal errors."""
    errors = []

    if settings.is_production:
        if settings.cors_origins == "*":
            errors.append(
                "CORS_ORIGINS should not be '*' in production - "
                "set to your frontend domain (e.g., https://votes.example.com)"
            )
        if not settings.database_url:
            logging.warning(
                "DATABASE_URL not set - votes are stored in %s", settings.resolved_data_dir
            )

    if errors:
        for error in errors:
            logging.error("Configuration error: %s", error)
        sys.exit(1)


@lru_cache
def get_settings() -> Settings:
    settings = Settings()
    validate_settings(settings)
    return settings
