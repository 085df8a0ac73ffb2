import sys
from pathlib import Path

import pytest

# Ensure `lead_discovery` is importable when running pytest from a source checkout.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from lead_discovery.discovery.models import BoundingBox, LatLng  # noqa: E402


@pytest.fixture
def single_point_box():
    """About 1.1km x 0.8km near Toronto: density 1, one search point."""
    return BoundingBox(southwest=LatLng(43.60, -79.40), northeast=LatLng(43.61, -79.39))


@pytest.fixture
def four_point_box():
    """About 3.3km square on the equator: density 2, a 2x2 lattice."""
    return BoundingBox(southwest=LatLng(0.0, 0.0), northeast=LatLng(0.03, 0.03))
