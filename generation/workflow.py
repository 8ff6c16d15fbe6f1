"""
Purpose: Orchestrator for route generation (the "glue").
What it does:
Accepts a RouteSpec for one day, calls the directions provider, simplifies the
returned path, computes display metrics and writes geometry + metrics to the
day's document in a single store write.

Failure rules:
- invalid RouteSpec    -> RouteValidationError, before any network call
- provider failure     -> DirectionsError subclass, document untouched
- write failure        -> GeneratedNotSavedError (generation worked, nothing is live)

No retries here; the editor retries by pressing Generate again.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Optional

from routing.directions_client import DirectionsClient
from routing.metrics import route_metrics
from routing.simplify import simplify_to_limit
from routes.models import GeneratedGeometry, RouteDocument, RouteSpec
from routes.policy import PipelinePolicy, collection_path, default_policy
from routes.store import DocumentStore, StorageError

logger = logging.getLogger(__name__)


class GeneratedNotSavedError(StorageError):
    """
    The route was generated but the document write failed.
    The new geometry is attached so the editor can see it, but it is not live.
    """
    def __init__(self, message: str, geometry: GeneratedGeometry):
        super().__init__(message)
        self.geometry = geometry


@dataclass(frozen=True)
class GenerationResult:
    document: RouteDocument
    geometry: GeneratedGeometry


class GenerationWorkflow:
    """
    Generates and stores one day's route geometry at a time.

    Different days can run in parallel: the workflow keeps no per-run state.
    Serializing runs for the same day is the editing surface's job.
    """
    def __init__(self, client: DirectionsClient, store: DocumentStore,
                 policy: Optional[PipelinePolicy] = None,
                 collection: Optional[str] = None,
                 clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc)):
        self.client = client
        self.store = store
        self.policy = policy or default_policy()
        self.collection = collection or collection_path()
        self.clock = clock

    def build_geometry(self, spec: RouteSpec) -> GeneratedGeometry:
        """
        Validate, fetch, simplify and measure. No storage access.
        """
        spec.validate()
        points = spec.points()

        if len(points) > self.policy.max_coordinates_per_request:
            result = self.client.fetch_route_chunked(points, self.policy.max_coordinates_per_request)
        else:
            result = self.client.fetch_route(points)

        original_count = len(result.path)
        simplified = simplify_to_limit(result.path, self.policy.tolerance_degrees, self.policy.max_points)
        metrics = route_metrics(result.distance_m, result.duration_s)

        reduction = round((1 - len(simplified) / original_count) * 100) if original_count else 0
        logger.info("Day %d route simplified: %d → %d points (%d%% reduction)",
                    spec.day, original_count, len(simplified), reduction)

        return GeneratedGeometry(
            path=simplified,
            distance_miles=metrics.distance_miles,
            estimated_time=metrics.estimated_time,
            source_point_count=original_count,
        )

    def load_document(self, day: int) -> RouteDocument:
        """The stored document, or a fresh empty one when the day is new."""
        data = self.store.get(self.collection, day)
        if data is None:
            return RouteDocument.empty(day)
        return RouteDocument.from_storage(data, day=day)

    def generate(self, spec: RouteSpec) -> GenerationResult:
        """
        Run the full pipeline for one day and persist the result.
        """
        spec.validate()
        # read before the provider call, a store outage should not cost a directions request
        current = self.load_document(spec.day)
        geometry = self.build_geometry(spec)

        updated = current.with_geometry(spec, geometry, now=self.clock())

        try:
            # one write for geometry + metrics together
            self.store.set(self.collection, spec.day, updated.geometry_fields(), merge=True)
        except StorageError as e:
            logger.error("Day %d generated but not saved: %s", spec.day, e)
            raise GeneratedNotSavedError(f"Route for day {spec.day} generated but not saved: {e}", geometry) from e

        logger.info("Day %d saved: %d mi, %s", spec.day, geometry.distance_miles, geometry.estimated_time)
        return GenerationResult(document=updated, geometry=geometry)
