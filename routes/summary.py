"""
Purpose: Whole-trip views across day documents.
What it does:
- trip_summary: totals shown on the itinerary header (miles, riding/rest days, endpoints)
- stitch_paths: joins per-day paths into one overview line for the trip map
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Sequence

from routing.coordinates import GeoPoint, Path
from routes.models import RouteDocument


@dataclass(frozen=True)
class TripSummary:
    total_days: int
    riding_days: int
    rest_days: int
    total_miles: int
    start_location: str = ""
    end_location: str = ""


def trip_summary(documents: Iterable[RouteDocument]) -> TripSummary:
    """
    A day counts as a riding day when it has a positive estimated distance.
    """
    ordered = sorted(documents, key=lambda document: document.day)
    total_miles = sum(document.estimated_distance or 0 for document in ordered)
    riding_days = sum(1 for document in ordered if (document.estimated_distance or 0) > 0)

    return TripSummary(
        total_days=len(ordered),
        riding_days=riding_days,
        rest_days=len(ordered) - riding_days,
        total_miles=int(round(total_miles)),
        start_location=ordered[0].start_name if ordered else "",
        end_location=ordered[-1].end_name if ordered else "",
    )


def stitch_paths(paths: Iterable[Sequence[GeoPoint]]) -> Path:
    """
    Concatenate paths in order. When a path starts where the previous one
    ended, the shared point is kept once.
    """
    stitched: List[GeoPoint] = []
    for path in paths:
        if not path:
            continue
        if stitched and stitched[-1] == path[0]:
            stitched.extend(path[1:])
        else:
            stitched.extend(path)
    return stitched
