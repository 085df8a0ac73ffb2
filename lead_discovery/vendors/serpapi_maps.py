"""SerpAPI Google Maps helpers used as an alternative nearby search provider.

SerpAPI charges per request and has no radius parameter: the search area is
expressed through the ``ll`` map viewport (``@lat,lng,zoomz``), so the zoom
is derived from the diameter of the search circle.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List

from serpapi import GoogleSearch

from lead_discovery.discovery.errors import ProviderCallError
from lead_discovery.etl.transform import from_serpapi_place
from lead_discovery.vendors.google_places import MAX_RADIUS_METERS

logger = logging.getLogger(__name__)

METERS_PER_DEGREE = 111_111
# (minimum span in degrees, zoom level), widest first.
_ZOOM_TABLE = ((0.5, 10), (0.2, 11), (0.1, 12), (0.05, 13), (0.02, 14))
_MAX_ZOOM = 15


def zoom_for_radius(radius_meters: float) -> int:
    span = 2 * min(radius_meters, MAX_RADIUS_METERS) / METERS_PER_DEGREE
    for min_span, zoom in _ZOOM_TABLE:
        if span > min_span:
            return zoom
    return _MAX_ZOOM


def build_serpapi_params(lat: float, lng: float, radius_meters: float, keyword: str, api_key: str) -> Dict[str, Any]:
    """Construct SerpAPI request parameters for the Google Maps engine."""
    if not keyword or not keyword.strip():
        raise ValueError("Keyword must be provided for SerpAPI lookups.")

    return {
        "engine": "google_maps",
        "q": keyword.strip(),
        "ll": f"@{lat},{lng},{zoom_for_radius(radius_meters)}z",
        "type": "search",
        "api_key": api_key,
    }


class SerpApiMapsProvider:
    def __init__(self, api_key: str, *, timeout: float = 10) -> None:
        if not api_key:
            raise ValueError("SERPAPI_API_KEY is required")
        self._api_key = api_key
        self._timeout = timeout

    def search_nearby(self, lat: float, lng: float, radius_meters: float, keyword: str) -> List[Dict[str, Any]]:
        params = build_serpapi_params(lat, lng, radius_meters, keyword, self._api_key)
        logger.info("Calling SerpAPI for keyword=%s ll=%s", keyword, params["ll"])

        search = GoogleSearch(params)
        search.timeout = self._timeout
        data = search.get_dict()
        if not data:
            raise ProviderCallError("SerpAPI returned an empty payload.")
        if "error" in data:
            # A query with no matches is reported as an error by SerpAPI.
            if "hasn't returned any results" in str(data["error"]):
                return []
            raise ProviderCallError(f"SerpAPI returned an error response: {data['error']}")

        records = []
        for raw in _extract_items(data):
            if not isinstance(raw, dict):
                continue
            record = from_serpapi_place(raw)
            if not record["id"] or not record["name"]:
                logger.debug("Skipping SerpAPI item without place_id or title: %s", raw.get("title"))
                continue
            records.append(record)
        return records


def _extract_items(data: Dict[str, Any]) -> Iterable[Any]:
    """SerpAPI sometimes returns local_results as a list or nested dict."""
    local_results = data.get("local_results")
    if isinstance(local_results, list):
        return local_results
    if isinstance(local_results, dict):
        for key in ("places", "results", "local_results"):
            maybe = local_results.get(key)
            if isinstance(maybe, list):
                return maybe
    place_results = data.get("place_results")
    if isinstance(place_results, dict):
        return [place_results]
    if isinstance(place_results, list):
        return place_results
    return []
