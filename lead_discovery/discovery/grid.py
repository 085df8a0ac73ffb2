"""Hexagonal search lattice sized to a bounding box."""

from __future__ import annotations

import logging
import math
from typing import List

from lead_discovery.discovery.models import BoundingBox, GridConfiguration, SearchPoint

logger = logging.getLogger(__name__)

METERS_PER_DEGREE = 111_111
MAX_DENSITY = 4
MAX_RADIUS_METERS = 5000
DENSITY_CELL_METERS = 2000


def plan_grid(box: BoundingBox, category: str) -> GridConfiguration:
    """Compute the search points for one category over ``box``.

    Uses an equirectangular approximation, so boxes are assumed to be
    continental, non-polar and not crossing the antimeridian. The lattice is
    at most ``MAX_DENSITY`` x ``MAX_DENSITY`` and each point searches at most
    ``MAX_RADIUS_METERS`` around itself. Odd rows are shifted east by half a
    spacing so neighbouring rows interlock.

    Only the northeast bound is used to discard points: row and column offsets
    are never negative, so nothing can land south or west of the box.
    """
    box.validate()
    sw, ne = box.southwest, box.northeast

    lng_scale = math.cos(math.radians(sw.lat))
    lat_meters = (ne.lat - sw.lat) * METERS_PER_DEGREE
    lng_meters = (ne.lng - sw.lng) * METERS_PER_DEGREE * lng_scale

    area_size = lat_meters * lng_meters
    density = min(math.ceil(math.sqrt(area_size) / DENSITY_CELL_METERS), MAX_DENSITY)

    area_radius = min(lat_meters, lng_meters) / 2
    base_radius = min(area_radius / density, MAX_RADIUS_METERS)
    spacing = base_radius * math.sqrt(3)

    rows = min(math.ceil(lat_meters / spacing), density)
    cols = min(math.ceil(lng_meters / spacing), density)

    lat_step = spacing / METERS_PER_DEGREE
    lng_step = spacing / (METERS_PER_DEGREE * lng_scale)

    points: List[SearchPoint] = []
    for row in range(rows):
        offset = 0.5 if row % 2 == 1 else 0.0
        for col in range(cols):
            lat = sw.lat + row * lat_step
            lng = sw.lng + (col + offset) * lng_step
            if lat > ne.lat or lng > ne.lng:
                continue
            points.append(SearchPoint(lat=lat, lng=lng, radius_meters=base_radius))

    logger.info(
        "Planned grid for category=%s: density=%d rows=%d cols=%d points=%d radius=%.0fm",
        category,
        density,
        rows,
        cols,
        len(points),
        base_radius,
    )

    return GridConfiguration(
        category=category,
        search_points=tuple(points),
        total_points=len(points),
        density=density,
        base_radius_meters=base_radius,
        spacing_meters=spacing,
    )
