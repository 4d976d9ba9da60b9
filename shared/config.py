"""Shared configuration for the API and the scheduler."""
from typing import List
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # MongoDB Configuration
    mongo_url: str = "mongodb://localhost:27017"
    mongo_db_name: str = "news_aggregator"

    # GNews Configuration
    gnews_api_key: str = ""
    gnews_base_url: str = "https://gnews.io/api/v4"
    gnews_language: str = "en"
    gnews_timeout: int = 10

    # API Configuration
    api_host: str = "0.0.0.0"
    api_port: int = 5000
    api_debug: bool = False
    cors_origins: List[str] = ["http://localhost:5173"]

    log_level: str = "INFO"

    # Scheduler Configuration (seconds)
    scheduler_enabled: bool = True
    trending_refresh_interval: float = 60 * 60
    like_sync_interval: float = 12 * 60 * 60
    stats_cleanup_interval: float = 24 * 60 * 60
    startup_sync_delay: float = 5.0

    # Feeds
    trending_default_limit: int = 10
    recommendation_fallback_limit: int = 10
    search_page_size: int = 10

    class Config:
        env_file = ".env"
        case_sensitive = False


settings = Settings()
