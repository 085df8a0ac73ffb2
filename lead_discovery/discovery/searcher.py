"""Single point-radius search against a place search provider."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Protocol

from lead_discovery.discovery.models import BoundingBox, Candidate, SearchPoint

logger = logging.getLogger(__name__)


class PlaceSearchProvider(Protocol):
    def search_nearby(self, lat: float, lng: float, radius_meters: float, keyword: str) -> List[Dict[str, Any]]:
        ...


def search_point(
    provider: PlaceSearchProvider,
    point: SearchPoint,
    category: str,
    *,
    bounds: Optional[BoundingBox] = None,
) -> List[Candidate]:
    """Run one nearby search and translate the records into candidates.

    Failures never propagate: they are logged and yield an empty list so the
    session loop can move on to the next point.
    """
    try:
        records = provider.search_nearby(point.lat, point.lng, point.radius_meters, category)
        candidates = [_to_candidate(record, category) for record in records or []]
    except Exception as exc:  # noqa: BLE001
        logger.error(
            "Nearby search failed for category=%s at (%.5f, %.5f) r=%.0fm: %s",
            category,
            point.lat,
            point.lng,
            point.radius_meters,
            exc,
        )
        return []

    results: List[Candidate] = []
    for candidate in candidates:
        if candidate is None:
            continue
        if bounds is not None and candidate.lat is not None and candidate.lng is not None:
            if not bounds.contains(candidate.lat, candidate.lng):
                logger.debug("Skipping %s outside bounding box", candidate.id)
                continue
        results.append(candidate)

    logger.info(
        "Nearby search for category=%s at (%.5f, %.5f) returned %d candidates",
        category,
        point.lat,
        point.lng,
        len(results),
    )
    return results


def _to_candidate(record: Dict[str, Any], category: str) -> Optional[Candidate]:
    place_id = record.get("id")
    if not place_id:
        logger.debug("Skipping record without id: %s", record)
        return None

    return Candidate(
        id=str(place_id),
        name=record.get("name") or "",
        formatted_address=record.get("formatted_address"),
        category=category,
        rating=_optional_float(record.get("rating")),
        relevance_score=int(record.get("relevance_score") or 0),
        lat=_optional_float(record.get("lat")),
        lng=_optional_float(record.get("lng")),
        user_ratings_total=record.get("user_ratings_total"),
    )


def _optional_float(value: Any) -> Optional[float]:
    return float(value) if value is not None else None
