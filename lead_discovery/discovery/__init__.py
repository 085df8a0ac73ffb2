"""Grid planning, point search, dedup and session orchestration."""

from lead_discovery.discovery.aggregator import merge_candidates
from lead_discovery.discovery.errors import PreconditionError, ProviderCallError, SessionAbortedError
from lead_discovery.discovery.grid import plan_grid
from lead_discovery.discovery.models import (
    BoundingBox,
    Candidate,
    GridConfiguration,
    LatLng,
    SearchPoint,
    SearchSessionSnapshot,
    SessionState,
)
from lead_discovery.discovery.searcher import PlaceSearchProvider, search_point
from lead_discovery.discovery.session import SearchSessionOrchestrator

__all__ = [
    "BoundingBox",
    "Candidate",
    "GridConfiguration",
    "LatLng",
    "PlaceSearchProvider",
    "PreconditionError",
    "ProviderCallError",
    "SearchPoint",
    "SearchSessionOrchestrator",
    "SearchSessionSnapshot",
    "SessionAbortedError",
    "SessionState",
    "merge_candidates",
    "plan_grid",
    "search_point",
]
