"""
Application configuration management using Pydantic Settings.
Handles environment variables and default values for the service.
"""

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.
    """

    # API Configuration
    api_host: str = Field(default="0.0.0.0", description="API host address")
    api_port: int = Field(default=8000, description="API port")
    api_debug: bool = Field(default=False, description="Enable debug mode")
    api_reload: bool = Field(default=False, description="Enable auto-reload")

    # Upstream price feed
    price_feed_url: str = Field(
        default="https://api.spot-hinta.fi/TodayAndDayForward",
        description="spot-hinta.fi feed covering today and the following day"
    )
    request_timeout: float = Field(default=10.0, gt=0, description="Feed request timeout in seconds")

    # Cache storage
    store_path: str = Field(default="spotprices.db", description="SQLite file backing the blob store")
    cache_key: str = Field(default="spot_prices", description="Blob key of the persisted cache record")
    cache_expiry_days: int = Field(default=2, ge=0, description="Discard cached records older than this many days")

    # Local time
    timezone: str = Field(default="Europe/Helsinki", description="Timezone the hourly series are indexed in")
    tomorrow_publish_hour: int = Field(default=14, ge=0, le=23, description="Hour tomorrow's prices are published")
    tomorrow_publish_minute: int = Field(default=15, ge=0, le=59, description="Minute tomorrow's prices are published")
    display_locale: str = Field(default="fi_FI", description="Default locale for formatted times")

    # Scheduler Configuration
    refresh_interval_minutes: int = Field(default=15, gt=0, description="Background refresh period")

    # Logging Configuration
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(default="json", description="Log format (json/text)")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        env_prefix = "SPOTPRICES_"


# Global settings instance
settings = Settings()
