"""Utilities for transforming provider responses into place records."""

import logging
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

BASE_RELEVANCE = 10
POPULAR_REVIEW_THRESHOLD = 100
POPULAR_BONUS = 5


def relevance_score(rating: Optional[float], user_ratings_total: Optional[int]) -> int:
    """Score a place: 10, plus its rating, plus 5 when it has more than 100 reviews."""
    score = float(BASE_RELEVANCE)
    if rating:
        score += rating
    if user_ratings_total and user_ratings_total > POPULAR_REVIEW_THRESHOLD:
        score += POPULAR_BONUS
    # Round half up; the builtin round() rounds half to even.
    return int(score + 0.5)


def from_google_place(result: Dict[str, Any]) -> Dict[str, Any]:
    """Normalise one Nearby Search result."""
    location = (result.get("geometry") or {}).get("location") or {}
    rating = _safe_float(result.get("rating"))
    reviews = _safe_int(result.get("user_ratings_total"))
    return {
        "id": result.get("place_id"),
        "name": _strip_or_none(result.get("name")) or "",
        "formatted_address": _strip_or_none(result.get("formatted_address") or result.get("vicinity")),
        "rating": rating,
        "user_ratings_total": reviews,
        "relevance_score": relevance_score(rating, reviews),
        "lat": _safe_float(location.get("lat")),
        "lng": _safe_float(location.get("lng")),
    }


def from_serpapi_place(raw: Dict[str, Any]) -> Dict[str, Any]:
    """Normalise one SerpAPI Google Maps local result."""
    gps = raw.get("gps_coordinates") or {}
    rating = _safe_float(raw.get("rating"))
    reviews = _safe_int(raw.get("reviews_count") or raw.get("reviews"))
    return {
        "id": _strip_or_none(raw.get("place_id")),
        "name": (raw.get("title") or raw.get("name") or "").strip(),
        "formatted_address": _strip_or_none(raw.get("address")),
        "rating": rating,
        "user_ratings_total": reviews,
        "relevance_score": relevance_score(rating, reviews),
        "lat": _safe_float(gps.get("latitude")),
        "lng": _safe_float(gps.get("longitude")),
    }


def _strip_or_none(value: Any) -> Optional[str]:
    if value is None:
        return None
    value_str = str(value).strip()
    return value_str or None


def _safe_float(value: Any) -> Optional[float]:
    try:
        if value is None:
            return None
        return float(value)
    except (TypeError, ValueError):
        return None


def _safe_int(value: Any) -> Optional[int]:
    if value is None:
        return None
    if isinstance(value, (int, float)):
        return int(value)

    if isinstance(value, str):
        digits = "".join(ch for ch in value if ch.isdigit())
        if digits:
            return int(digits)
    return None
