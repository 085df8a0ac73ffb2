"""Value objects and session state shared by the discovery engine."""

from __future__ import annotations

import enum
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Mapping, Optional, Tuple

from lead_discovery.discovery.errors import PreconditionError


@dataclass(frozen=True)
class LatLng:
    lat: float
    lng: float


@dataclass(frozen=True)
class BoundingBox:
    """Rectangle in lat/lng space delimiting the search area."""

    southwest: LatLng
    northeast: LatLng

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "BoundingBox":
        """Build a box from ``{"southwest": {"lat", "lng"}, "northeast": {...}}``."""
        try:
            sw = payload["southwest"]
            ne = payload["northeast"]
            return cls(
                southwest=LatLng(lat=float(sw["lat"]), lng=float(sw["lng"])),
                northeast=LatLng(lat=float(ne["lat"]), lng=float(ne["lng"])),
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise PreconditionError(f"bounding box is malformed: {exc}") from exc

    def validate(self) -> None:
        sw, ne = self.southwest, self.northeast
        for corner in (sw, ne):
            if not -90.0 <= corner.lat <= 90.0 or not -180.0 <= corner.lng <= 180.0:
                raise PreconditionError(f"coordinate out of range: {corner}")
        if sw.lat > ne.lat or sw.lng > ne.lng:
            raise PreconditionError("southwest corner must not lie north or east of the northeast corner")
        if sw.lat == ne.lat or sw.lng == ne.lng:
            raise PreconditionError("bounding box has zero width or height")

    def contains(self, lat: float, lng: float) -> bool:
        return (
            self.southwest.lat <= lat <= self.northeast.lat
            and self.southwest.lng <= lng <= self.northeast.lng
        )


@dataclass(frozen=True)
class SearchPoint:
    lat: float
    lng: float
    radius_meters: float


@dataclass(frozen=True)
class GridConfiguration:
    category: str
    search_points: Tuple[SearchPoint, ...]
    total_points: int
    density: int
    base_radius_meters: float
    spacing_meters: float


@dataclass(frozen=True)
class Candidate:
    """A business returned by one nearby search, tagged with the category that found it."""

    id: str
    name: str
    formatted_address: Optional[str]
    category: str
    rating: Optional[float] = None
    relevance_score: int = 0
    lat: Optional[float] = None
    lng: Optional[float] = None
    user_ratings_total: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class SessionState(str, enum.Enum):
    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"
    ABORTED = "aborted"


@dataclass(frozen=True)
class SearchSessionSnapshot:
    collected: Tuple[Candidate, ...]
    in_progress: bool
    progress_percent: float
    current_point_index: int
    total_points_for_current_category: int
    current_category: Optional[str]
    state: SessionState

    def to_dict(self) -> Dict[str, Any]:
        return {
            "collected": [candidate.to_dict() for candidate in self.collected],
            "in_progress": self.in_progress,
            "progress_percent": self.progress_percent,
            "current_point_index": self.current_point_index,
            "total_points_for_current_category": self.total_points_for_current_category,
            "current_category": self.current_category,
            "state": self.state.value,
        }


@dataclass
class SearchSession:
    """Mutable aggregate owned by a single orchestrator; readers only see snapshots."""

    collected: Tuple[Candidate, ...] = ()
    in_progress: bool = False
    progress_percent: float = 0.0
    current_point_index: int = 0
    total_points_for_current_category: int = 0
    current_category: Optional[str] = None
    state: SessionState = field(default=SessionState.IDLE)

    def snapshot(self) -> SearchSessionSnapshot:
        return SearchSessionSnapshot(
            collected=self.collected,
            in_progress=self.in_progress,
            progress_percent=self.progress_percent,
            current_point_index=self.current_point_index,
            total_points_for_current_category=self.total_points_for_current_category,
            current_category=self.current_category,
            state=self.state,
        )
