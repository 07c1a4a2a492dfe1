"""
Configuration management for the Xtream client.
Uses pydantic-settings for environment variable loading.
"""
from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Client settings loaded from environment variables."""
    
    # API Configuration
    app_name: str = "Xtream Client"
    app_version: str = "0.1.0"
    debug: bool = False
    
    # Server Configuration
    host: str = "127.0.0.1"
    port: int = 8000
    cors_origins: list[str] = ["*"]
    
    # Rate Limiting (login route only)
    rate_limit_per_minute: int = 60
    
    # Authentication
    auth_timeout_seconds: float = 10.0
    auth_retry_interval_seconds: float = 1.0
    login_max_retries: int = 2
    startup_max_retries: int = 0
    
    # Catalog / EPG requests (None = transport default)
    catalog_timeout_seconds: Optional[float] = None
    short_epg_limit: int = 2
    epg_prefetch_limit: int = 20
    
    # Durable credential slot
    credentials_db_path: str = "data/credentials.db"
    
    # Login messages language: "en" or "tr"
    locale: str = "en"
    
    user_agent: str = "xtreamclient/0.1.0"
    
    model_config = SettingsConfigDict(env_prefix="XTREAM_", env_file=".env")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
