"""Dashboard configuration, overridable through ``CRAWLDASH_*`` environment variables."""

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_API_BASE_URL = "http://localhost:8080/api"
DEFAULT_STORAGE_PATH = Path.home() / ".crawldash" / "storage.json"


class DashboardSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="CRAWLDASH_")

    api_base_url: str = Field(
        default=DEFAULT_API_BASE_URL,
        description="Crawler backend origin including the /api prefix",
    )
    storage_path: Path = Field(
        default=DEFAULT_STORAGE_PATH,
        description="JSON file used as durable client storage",
    )
    token_storage_key: str = Field(default="authToken", min_length=1)

    # The backend silently falls back to 20 for limits above 100.
    page_size: int = Field(default=100, ge=1, le=100)
    search_debounce_seconds: float = Field(default=0.5, ge=0)
    bulk_concurrency: int = Field(
        default=5,
        ge=1,
        description="Maximum start-crawl calls in flight during a bulk start",
    )
    request_timeout: Optional[float] = Field(
        default=None,
        gt=0,
        description="Per-request timeout in seconds; None leaves it to the transport",
    )
    log_level: str = "INFO"


@lru_cache
def get_settings() -> DashboardSettings:
    """Return the process-wide settings, read from the environment once."""
    return DashboardSettings()
