"""Application configuration loaded from environment variables."""

from __future__ import annotations

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    app_name: str = "venue-pulse"
    debug: bool = False
    log_level: str = "INFO"

    # Batch refresh
    batch_chunk_size: int = 10
    notable_threshold: float = 7.0

    # Community signals
    rate_limit_window_minutes: int = 60
    consensus_window_minutes: int = 60
    rescore_queue_enabled: bool = True

    # Scoring
    rich_telemetry_confidence: float = 0.95
    venue_timezone: str = "UTC"

    # External busyness (SerpAPI)
    serpapi_api_key: str = ""
    serpapi_base_url: str = "https://serpapi.com/search.json"
    provider_timeout_seconds: float = 10.0
    busyness_cache_ttl_seconds: int = 300

    model_config = {"env_prefix": "PULSE_"}


settings = Settings()
