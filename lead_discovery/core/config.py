"""Application configuration helpers."""

import logging
import os
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

PROVIDER_GOOGLE_PLACES = "google_places"
PROVIDER_SERPAPI = "serpapi"
SUPPORTED_PROVIDERS = (PROVIDER_GOOGLE_PLACES, PROVIDER_SERPAPI)


class ConfigError(RuntimeError):
    """Raised when mandatory configuration is missing or invalid."""


@dataclass(frozen=True)
class Settings:
    google_api_key: str = ""
    serpapi_api_key: str = ""
    search_provider: str = PROVIDER_GOOGLE_PLACES
    provider_timeout_seconds: float = 10.0
    provider_max_pages: int = 3
    provider_page_delay_seconds: float = 2.0
    clip_to_bounding_box: bool = True
    worker_port: int = 9000
    session_workers: int = 4


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Load settings from environment variables with sensible defaults."""
    load_dotenv()

    google_api_key = os.getenv("GOOGLE_API_KEY", "")
    serpapi_api_key = os.getenv("SERPAPI_API_KEY", "")
    search_provider = os.getenv("SEARCH_PROVIDER", PROVIDER_GOOGLE_PLACES).strip().lower()
    provider_timeout_seconds = float(os.getenv("PROVIDER_TIMEOUT_SECONDS", "10"))
    provider_max_pages = int(os.getenv("PROVIDER_MAX_PAGES", "3"))
    provider_page_delay_seconds = float(os.getenv("PROVIDER_PAGE_DELAY_SECONDS", "2.0"))
    clip_to_bounding_box = _env_bool("CLIP_TO_BOUNDING_BOX", True)
    worker_port = int(os.getenv("WORKER_PORT", "9000"))
    session_workers = int(os.getenv("SESSION_WORKERS", "4"))

    if search_provider not in SUPPORTED_PROVIDERS:
        logger.warning("SEARCH_PROVIDER=%s is not supported; expected one of %s.", search_provider, SUPPORTED_PROVIDERS)
    if search_provider == PROVIDER_GOOGLE_PLACES and not google_api_key:
        logger.warning("GOOGLE_API_KEY is not configured; Google Places requests will fail.")
    if search_provider == PROVIDER_SERPAPI and not serpapi_api_key:
        logger.warning("SERPAPI_API_KEY is not configured; SerpAPI requests will fail.")

    return Settings(
        google_api_key=google_api_key,
        serpapi_api_key=serpapi_api_key,
        search_provider=search_provider,
        provider_timeout_seconds=provider_timeout_seconds,
        provider_max_pages=provider_max_pages,
        provider_page_delay_seconds=provider_page_delay_seconds,
        clip_to_bounding_box=clip_to_bounding_box,
        worker_port=worker_port,
        session_workers=session_workers,
    )
