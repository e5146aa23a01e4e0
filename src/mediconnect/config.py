"""Configuration and environment loading for MediConnect."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Supabase
    supabase_url: str
    supabase_key: str

    # Server
    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = False

    # Identity defaults
    default_location: str = "India"

    # Routing
    login_path: str = "/login"

    # Demo behaviour: let any signed-in user promote themselves to admin
    allow_self_role_elevation: bool = False

    # Toast feed
    notification_history: int = 50


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
