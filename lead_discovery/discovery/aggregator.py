"""Merge candidate batches into one collection keyed by provider id."""

from __future__ import annotations

import logging
from typing import Iterable, List, Sequence, Set, Tuple

from lead_discovery.discovery.models import Candidate

logger = logging.getLogger(__name__)


def merge_candidates(existing: Sequence[Candidate], incoming: Iterable[Candidate]) -> Tuple[Candidate, ...]:
    """Append incoming candidates whose id has not been seen yet.

    Ids are global across categories: the first category to find a business
    keeps it, later matches are dropped.
    """
    seen: Set[str] = {candidate.id for candidate in existing}
    merged: List[Candidate] = list(existing)
    dropped = 0
    for candidate in incoming:
        if candidate.id in seen:
            dropped += 1
            continue
        seen.add(candidate.id)
        merged.append(candidate)

    if dropped:
        logger.debug("Dropped %d duplicate candidates", dropped)
    return tuple(merged)
