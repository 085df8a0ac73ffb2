"""Place search provider adapters."""

from lead_discovery.core.config import PROVIDER_GOOGLE_PLACES, PROVIDER_SERPAPI, ConfigError, Settings
from lead_discovery.discovery.searcher import PlaceSearchProvider
from lead_discovery.vendors.google_places import GooglePlacesProvider
from lead_discovery.vendors.serpapi_maps import SerpApiMapsProvider


def build_provider(settings: Settings) -> PlaceSearchProvider:
    """Instantiate the provider selected by ``SEARCH_PROVIDER``."""
    if settings.search_provider == PROVIDER_GOOGLE_PLACES:
        if not settings.google_api_key:
            raise ConfigError("GOOGLE_API_KEY must be set to use the google_places provider.")
        return GooglePlacesProvider(
            settings.google_api_key,
            timeout=settings.provider_timeout_seconds,
            max_pages=settings.provider_max_pages,
            page_delay=settings.provider_page_delay_seconds,
        )
    if settings.search_provider == PROVIDER_SERPAPI:
        if not settings.serpapi_api_key:
            raise ConfigError("SERPAPI_API_KEY must be set to use the serpapi provider.")
        return SerpApiMapsProvider(settings.serpapi_api_key, timeout=settings.provider_timeout_seconds)
    raise ConfigError(f"Unsupported SEARCH_PROVIDER: {settings.search_provider}")
