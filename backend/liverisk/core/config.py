"""
Application Configuration

All settings loaded from environment variables.
"""

from functools import lru_cache
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings from environment variables."""

    # Application
    app_name: str = "LiveRisk Backend"
    app_version: str = "0.1.0"
    debug: bool = False
    environment: str = "development"
    log_level: str = "INFO"

    # Server
    host: str = "0.0.0.0"
    port: int = 8000

    # CORS (Frontend URL)
    allowed_origins: list[str] = ["http://localhost:3000"]

    # Engine capacities
    history_capacity: int = 500  # prices kept per instrument
    quote_capacity: int = 20  # recent quotes kept per instrument
    tick_queue_size: int = 1000
    subscriber_queue_size: int = 100
    activity_log_capacity: int = 200
    shutdown_drain_timeout: float = 5.0  # seconds

    # Metrics
    return_window: int = 60
    trading_days: int = 252
    var_z_score: float = 2.33  # ~1st percentile of N(0, 1)
    loss_lookback: int = 5

    # Suggestion rules
    loss_threshold: float = -1.5  # percent
    var_dollar_threshold: float = 40.0
    stable_band: float = 0.5  # percent, exclusive on both sides
    max_stable_suggestions: int = 3

    # Mock tick feed
    enable_mock_feed: bool = True
    mock_feed_interval_ms: int = 800
    mock_feed_max_change_pct: float = 1.5
    mock_feed_seed: int | None = None

    # Reference data (insertion order is the display order)
    instrument_seeds: dict[str, float] = {
        "AAPL": 175.12,
        "MSFT": 360.80,
        "TSLA": 250.30,
        "GOOGL": 132.45,
    }
    alternatives: dict[str, list[str]] = {
        "AAPL": ["MSFT", "GOOGL"],
        "MSFT": ["AAPL", "GOOGL"],
        "TSLA": ["NIO", "RIVN"],
        "GOOGL": ["META", "AAPL"],
    }
    default_alternatives: list[str] = ["SPY", "QQQ"]

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
