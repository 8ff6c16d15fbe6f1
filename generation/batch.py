"""
Purpose: Maintenance passes over every stored day of a collection.
What it does:
- resimplify_collection: re-run simplification on stored geometry (e.g. after
  lowering the tolerance or point cap) without calling the provider again
- geometry_report: per-day stored coordinate counts and estimated document size

Rule: Uses stored geometry only. No provider calls.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Optional

from routing.coordinates import to_storage
from routing.simplify import simplify_to_limit
from routes.models import RouteDocument
from routes.policy import PipelinePolicy, default_policy

logger = logging.getLogger(__name__)

# rough size of one {lat, lng} entry in a stored document
BYTES_PER_COORDINATE = 50


@dataclass(frozen=True)
class DayReduction:
    day: int
    before: int
    after: int

    @property
    def reduction_percent(self) -> int:
        return round((1 - self.after / self.before) * 100) if self.before else 0


@dataclass
class BatchReport:
    days: List[DayReduction] = field(default_factory=list)
    skipped_days: List[int] = field(default_factory=list)

    @property
    def total_before(self) -> int:
        return sum(day.before for day in self.days)

    @property
    def total_after(self) -> int:
        return sum(day.after for day in self.days)

    @property
    def reduction_percent(self) -> int:
        before = self.total_before
        return round((1 - self.total_after / before) * 100) if before else 0

    @property
    def estimated_kb_before(self) -> int:
        return round(self.total_before * BYTES_PER_COORDINATE / 1024)

    @property
    def estimated_kb_after(self) -> int:
        return round(self.total_after * BYTES_PER_COORDINATE / 1024)


@dataclass(frozen=True)
class DayGeometryStats:
    day: int
    coordinates: int
    estimated_bytes: int
    dropped_points: int = 0


def resimplify_collection(store, collection: str, policy: Optional[PipelinePolicy] = None,
                          dry_run: bool = False) -> BatchReport:
    """
    Simplify every stored day with geometry and write back only the path.
    Days without geometry are skipped. Store errors propagate.
    """
    policy = policy or default_policy()
    report = BatchReport()

    for day in store.list_days(collection):
        document = RouteDocument.from_storage(store.get(collection, day) or {}, day=day)
        if not document.route_geometry:
            logger.info("day%d: No geometry, skipping", day)
            report.skipped_days.append(day)
            continue

        before = len(document.route_geometry)
        simplified = simplify_to_limit(document.route_geometry, policy.tolerance_degrees, policy.max_points)
        reduction = DayReduction(day=day, before=before, after=len(simplified))
        report.days.append(reduction)
        logger.info("day%d: %d → %d points (%d%% reduction)",
                    day, reduction.before, reduction.after, reduction.reduction_percent)

        if not dry_run:
            store.set(collection, day, {
                "routeGeometry": {"type": "LineString", "coordinates": to_storage(simplified)},
                "updatedAt": datetime.now(timezone.utc).isoformat(),
            })

    return report


def geometry_report(store, collection: str) -> List[DayGeometryStats]:
    stats: List[DayGeometryStats] = []
    for day in store.list_days(collection):
        document = RouteDocument.from_storage(store.get(collection, day) or {}, day=day)
        count = len(document.route_geometry or [])
        stats.append(DayGeometryStats(
            day=day,
            coordinates=count,
            estimated_bytes=count * BYTES_PER_COORDINATE,
            dropped_points=document.dropped_points,
        ))
    return stats
