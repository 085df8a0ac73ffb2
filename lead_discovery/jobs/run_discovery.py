"""CLI job that runs one lead discovery session and writes the leads as JSON."""

import argparse
import dataclasses
import json
import logging
import sys
from typing import List, Optional, Sequence

from lead_discovery.core.config import SUPPORTED_PROVIDERS, ConfigError, get_settings
from lead_discovery.discovery.errors import PreconditionError
from lead_discovery.discovery.models import BoundingBox, LatLng, SearchSessionSnapshot
from lead_discovery.discovery.session import SearchSessionOrchestrator
from lead_discovery.vendors import build_provider

logger = logging.getLogger(__name__)


def parse_lat_lng(value: str) -> LatLng:
    try:
        lat_raw, lng_raw = value.split(",")
        return LatLng(lat=float(lat_raw), lng=float(lng_raw))
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"expected LAT,LNG but got {value!r}") from exc


def run_discovery_job(
    *,
    box: BoundingBox,
    categories: Sequence[str],
    provider_name: Optional[str] = None,
    clip_to_bounding_box: Optional[bool] = None,
) -> SearchSessionSnapshot:
    settings = get_settings()
    if provider_name:
        settings = dataclasses.replace(settings, search_provider=provider_name)
    if clip_to_bounding_box is None:
        clip_to_bounding_box = settings.clip_to_bounding_box

    provider = build_provider(settings)
    orchestrator = SearchSessionOrchestrator(provider, clip_to_bounding_box=clip_to_bounding_box)

    last = orchestrator.run_to_completion(box, categories, on_snapshot=_log_progress)
    logger.info("Completed discovery: state=%s leads=%d", last.state.value, len(last.collected))
    return last


def _log_progress(snapshot: SearchSessionSnapshot) -> None:
    logger.info(
        "[%s] point %d/%d progress=%.1f%% collected=%d",
        snapshot.current_category,
        snapshot.current_point_index,
        snapshot.total_points_for_current_category,
        snapshot.progress_percent,
        len(snapshot.collected),
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Discover leads inside a bounding box")
    parser.add_argument("--sw", dest="southwest", type=parse_lat_lng, required=True, help="Southwest corner LAT,LNG")
    parser.add_argument("--ne", dest="northeast", type=parse_lat_lng, required=True, help="Northeast corner LAT,LNG")
    parser.add_argument(
        "--category",
        dest="categories",
        action="append",
        required=True,
        help="Business category to search; repeat for several, searched in the given order",
    )
    parser.add_argument(
        "--provider",
        dest="provider",
        choices=SUPPORTED_PROVIDERS,
        default=get_settings().search_provider,
        help="Place search provider",
    )
    parser.add_argument("--output", dest="output", help="Write leads to this file instead of stdout")
    parser.add_argument(
        "--no-clip",
        dest="clip_to_bounding_box",
        action="store_false",
        default=None,
        help="Keep results that fall outside the bounding box",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s - %(message)s")
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        snapshot = run_discovery_job(
            box=BoundingBox(southwest=args.southwest, northeast=args.northeast),
            categories=args.categories,
            provider_name=args.provider,
            clip_to_bounding_box=args.clip_to_bounding_box,
        )
    except (PreconditionError, ConfigError) as exc:
        logger.error("Cannot start discovery: %s", exc)
        raise SystemExit(2) from exc

    leads = [candidate.to_dict() for candidate in snapshot.collected]
    if args.output:
        with open(args.output, "w", encoding="utf-8") as fh:
            json.dump(leads, fh, ensure_ascii=False, indent=2)
        logger.info("Wrote %d leads to %s", len(leads), args.output)
    else:
        json.dump(leads, sys.stdout, ensure_ascii=False, indent=2)
        sys.stdout.write("\n")


if __name__ == "__main__":
    main()
