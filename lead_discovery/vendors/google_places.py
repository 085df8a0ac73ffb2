"""Client utilities for the Google Places Nearby Search API."""

import logging
import time
from typing import Any, Dict, List, Optional

import requests

from lead_discovery.discovery.errors import ProviderCallError
from lead_discovery.etl.transform import from_google_place

logger = logging.getLogger(__name__)
_SESSION = requests.Session()
_BASE_URL = "https://maps.googleapis.com/maps/api/place"

MAX_RADIUS_METERS = 5000


class GooglePlacesError(ProviderCallError):
    """Raised when the Places API returns a non-successful response."""


def nearby_search(
    lat: float,
    lng: float,
    radius_meters: float,
    keyword: str,
    api_key: str,
    pagetoken: Optional[str] = None,
    timeout: float = 10,
) -> Dict[str, Any]:
    if pagetoken:
        params = {"pagetoken": pagetoken, "key": api_key}
    else:
        params = {
            "location": f"{lat},{lng}",
            "radius": int(min(radius_meters, MAX_RADIUS_METERS)),
            "keyword": keyword,
            "key": api_key,
        }
    try:
        response = _SESSION.get(f"{_BASE_URL}/nearbysearch/json", params=params, timeout=timeout)
        response.raise_for_status()
        payload = response.json()
    except (requests.RequestException, ValueError) as exc:
        raise GooglePlacesError(f"nearby_search request failed: {exc}") from exc

    status = payload.get("status")
    if status not in {"OK", "ZERO_RESULTS"}:
        logger.error("nearby_search failed: status=%s, error_message=%s", status, payload.get("error_message"))
        raise GooglePlacesError(payload.get("error_message") or status)
    return payload


class GooglePlacesProvider:
    """Place search provider backed by Nearby Search, following result pages."""

    def __init__(self, api_key: str, *, timeout: float = 10, max_pages: int = 3, page_delay: float = 2.0) -> None:
        if not api_key:
            raise ValueError("GOOGLE_API_KEY is required")
        self._api_key = api_key
        self._timeout = timeout
        self._max_pages = max(1, max_pages)
        self._page_delay = page_delay

    def search_nearby(self, lat: float, lng: float, radius_meters: float, keyword: str) -> List[Dict[str, Any]]:
        records: List[Dict[str, Any]] = []
        page_token = None
        processed_pages = 0

        while processed_pages < self._max_pages:
            payload = nearby_search(
                lat,
                lng,
                radius_meters,
                keyword,
                api_key=self._api_key,
                pagetoken=page_token,
                timeout=self._timeout,
            )
            results = payload.get("results", [])
            logger.debug("Fetched %d results on page %d", len(results), processed_pages + 1)
            records.extend(from_google_place(result) for result in results)

            processed_pages += 1
            page_token = payload.get("next_page_token")
            if not page_token:
                break
            # A fresh page token is rejected until Google has activated it.
            time.sleep(self._page_delay)

        return records
