"""Sequential control loop for one lead discovery session."""

from __future__ import annotations

import logging
import threading
from typing import Callable, Iterable, Iterator, Optional, Tuple

from lead_discovery.discovery.aggregator import merge_candidates
from lead_discovery.discovery.errors import PreconditionError, SessionAbortedError
from lead_discovery.discovery.grid import plan_grid
from lead_discovery.discovery.models import (
    BoundingBox,
    SearchSession,
    SearchSessionSnapshot,
    SessionState,
)
from lead_discovery.discovery.searcher import PlaceSearchProvider, search_point

logger = logging.getLogger(__name__)

PROGRESS_FLOOR = 5.0


class SearchSessionOrchestrator:
    """Drive categories and grid points one at a time and publish snapshots.

    The orchestrator is the only writer of its ``SearchSession``. Consumers
    receive frozen ``SearchSessionSnapshot`` objects, one after every point and
    a final one when the session completes or is cancelled.

    Progress is computed per category (``5 + index / total * 95``), so it
    restarts near 5% at the beginning of each category sweep.
    """

    def __init__(self, provider: PlaceSearchProvider, *, clip_to_bounding_box: bool = True) -> None:
        self._provider = provider
        self._clip_to_bounding_box = clip_to_bounding_box
        self._cancel_event = threading.Event()
        self._active = False

    @property
    def is_running(self) -> bool:
        """True while a snapshot stream is being consumed."""
        return self._active

    def start_session(self, box: BoundingBox, categories: Iterable[str]) -> Iterator[SearchSessionSnapshot]:
        """Validate inputs and return the snapshot stream for a new session.

        Raises ``PreconditionError`` before any search when the box is
        malformed or no usable category is given.
        """
        box.validate()
        selected = _normalise_categories(categories)
        if self._active:
            raise RuntimeError("a session is already running on this orchestrator")

        self._cancel_event.clear()
        logger.info("Starting discovery session: categories=%s box=%s", list(selected), box)
        return self._run(box, selected)

    def cancel_session(self) -> None:
        """Ask the running session to stop before its next nearby search."""
        logger.info("Cancellation requested")
        self._cancel_event.set()

    def run_to_completion(
        self,
        box: BoundingBox,
        categories: Iterable[str],
        on_snapshot: Optional[Callable[[SearchSessionSnapshot], None]] = None,
    ) -> SearchSessionSnapshot:
        """Drain a new session and return its final snapshot.

        ``on_snapshot`` is called with every published snapshot, final one included.
        """
        last: Optional[SearchSessionSnapshot] = None
        for snapshot in self.start_session(box, categories):
            if on_snapshot is not None:
                on_snapshot(snapshot)
            last = snapshot
        if last is None:
            raise RuntimeError("session ended without publishing a snapshot")
        return last

    def _run(self, box: BoundingBox, categories: Tuple[str, ...]) -> Iterator[SearchSessionSnapshot]:
        self._active = True
        session = SearchSession(in_progress=True, state=SessionState.RUNNING)
        bounds = box if self._clip_to_bounding_box else None
        try:
            try:
                for category in categories:
                    grid = plan_grid(box, category)
                    session.current_category = category
                    session.current_point_index = 0
                    session.total_points_for_current_category = grid.total_points

                    for point in grid.search_points:
                        self._raise_if_cancelled()
                        incoming = search_point(self._provider, point, category, bounds=bounds)
                        session.collected = merge_candidates(session.collected, incoming)
                        session.current_point_index += 1
                        session.progress_percent = _category_progress(
                            session.current_point_index, session.total_points_for_current_category
                        )
                        yield session.snapshot()

                    logger.info(
                        "Finished category=%s: points=%d collected=%d",
                        category,
                        grid.total_points,
                        len(session.collected),
                    )
            except SessionAbortedError:
                logger.info("Session aborted with %d candidates collected", len(session.collected))
                _finish(session, SessionState.ABORTED)
            else:
                logger.info("Session completed with %d candidates collected", len(session.collected))
                _finish(session, SessionState.COMPLETED)
            yield session.snapshot()
        finally:
            # Consumer stopped iterating early.
            if session.in_progress:
                _finish(session, SessionState.ABORTED)
            self._active = False

    def _raise_if_cancelled(self) -> None:
        if self._cancel_event.is_set():
            raise SessionAbortedError("session cancelled by caller")


def _normalise_categories(categories: Iterable[str]) -> Tuple[str, ...]:
    if categories is None or isinstance(categories, str):
        raise PreconditionError("categories must be a collection of strings")
    selected = []
    for category in categories:
        if not isinstance(category, str) or not category.strip():
            raise PreconditionError(f"invalid category: {category!r}")
        selected.append(category.strip())
    if not selected:
        raise PreconditionError("at least one category is required")
    return tuple(selected)


def _category_progress(index: int, total: int) -> float:
    if total <= 0:
        return PROGRESS_FLOOR
    return PROGRESS_FLOOR + (index / total) * (100.0 - PROGRESS_FLOOR)


def _finish(session: SearchSession, state: SessionState) -> None:
    session.state = state
    session.in_progress = False
    session.progress_percent = 100.0
