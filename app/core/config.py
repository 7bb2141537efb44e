"""
Configuration module - loads all env vars using pydantic-settings.
This is the SINGLE SOURCE OF TRUTH for all config values.
"""

from functools import lru_cache
from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # PostgreSQL (resources, companies, bookmarks, profiles)
    postgres_host: str = "localhost"
    postgres_port: int = 5432
    postgres_user: str = "portal_user"
    postgres_password: str = "password"
    postgres_db: str = "placement_portal"

    # MongoDB (resource_analytics event log)
    mongodb_uri: str = "mongodb://localhost:27017"
    mongodb_db: str = "placement_events"
    mongodb_timeout_ms: int = 2000

    # JWT verification - tokens are issued by the external auth provider
    jwt_secret_key: str = "change-this-secret"
    jwt_algorithm: str = "HS256"
    jwt_audience: str = "authenticated"

    # Resource browser / analytics
    analytics_top_n: int = 5
    collapse_empty_folder_segments: bool = False

    # Logging
    log_level: str = "INFO"
    log_file: Optional[str] = None

    # App
    debug: bool = True

    @property
    def postgres_url(self) -> str:
        """Construct PostgreSQL connection URL"""
        return (
            f"postgresql://{self.postgres_user}:{self.postgres_password}"
            f"@{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"
        )

    # Pydantic v2 config
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8"
    )


@lru_cache()
def get_settings() -> Settings:
    return Settings()
