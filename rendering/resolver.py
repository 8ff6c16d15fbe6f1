"""
Purpose: Pick the geometry a map should draw for a day (render-time fallback chain).
What it does:
Tries geometry sources in strict priority order and returns the first non-empty path:

  1. stored     - the document's saved path, only if every stored point was well-formed
  2. live       - a fresh directions fetch for [start, *waypoints, end] (unsimplified)
  3. straight   - [start, *waypoints, end] with no road-snapping

A rest day (start == end) draws no line at all and skips every tier.

Never raises for bad data or provider failures; the viewer always gets a
renderable path or a deliberate empty one. Failures are logged and fall through.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterable, List, Optional, Sequence, Tuple

from routing.coordinates import Path
from routing.directions_client import DirectionsClient, DirectionsError
from routes.models import RouteDocument
from routes.policy import PipelinePolicy, default_policy
from routes.summary import stitch_paths

logger = logging.getLogger(__name__)


class GeometrySource(str, Enum):
    NONE = "none"
    STORED = "stored"
    LIVE = "live"
    STRAIGHT_LINE = "straight_line"


@dataclass(frozen=True)
class RenderedRoute:
    path: Path
    source: GeometrySource


# A tier looks at the document and returns a path, or an empty list to pass.
Tier = Callable[[RouteDocument], Path]


class RenderingResolver:
    """
    Ordered list of (source, tier) pairs, tried until one yields a path.

    Extra tiers go in before the straight-line fallback, which stays last
    so the chain always ends with something drawable.
    """
    def __init__(self, client: Optional[DirectionsClient] = None,
                 policy: Optional[PipelinePolicy] = None,
                 extra_tiers: Iterable[Tuple[GeometrySource, Tier]] = ()):
        self.client = client
        self.policy = policy or default_policy()
        self.extra_tiers = list(extra_tiers)

    # --- tiers ---

    def stored_tier(self, document: RouteDocument) -> Path:
        if not document.route_geometry:
            return []
        if document.dropped_points:
            logger.warning("Day %d stored geometry has %d malformed points, not using it",
                           document.day, document.dropped_points)
            return []
        if not all(point.is_valid() for point in document.route_geometry):
            logger.warning("Day %d stored geometry has invalid points, not using it", document.day)
            return []
        return list(document.route_geometry)

    def live_tier(self, document: RouteDocument) -> Path:
        if self.client is None:
            return []
        points = document.spec().points()
        try:
            if len(points) > self.policy.max_coordinates_per_request:
                result = self.client.fetch_route_chunked(points, self.policy.max_coordinates_per_request)
            else:
                result = self.client.fetch_route(points)
        except (DirectionsError, ValueError) as e:
            logger.warning("Day %d directions failed, using straight lines: %s", document.day, e)
            return []
        return list(result.path)

    def straight_line_tier(self, document: RouteDocument) -> Path:
        return document.spec().points()

    def tiers(self, allow_network: bool = True) -> List[Tuple[GeometrySource, Tier]]:
        chain: List[Tuple[GeometrySource, Tier]] = [(GeometrySource.STORED, self.stored_tier)]
        if allow_network:
            chain.append((GeometrySource.LIVE, self.live_tier))
        chain.extend(self.extra_tiers)
        chain.append((GeometrySource.STRAIGHT_LINE, self.straight_line_tier))
        return chain

    # --- public API ---

    def resolve(self, document: RouteDocument, allow_network: bool = True) -> RenderedRoute:
        """
        Path to draw for this day.

        allow_network=False skips the live fetch, for a first paint that must
        not wait on the provider; call again with the default to upgrade.
        """
        if not document.start.is_set() or not document.end.is_set() or document.start == document.end:
            # rest day or unconfigured day: location marker only
            return RenderedRoute(path=[], source=GeometrySource.NONE)

        for source, tier in self.tiers(allow_network):
            path = tier(document)
            if path:
                logger.debug("Day %d rendering %d points from %s", document.day, len(path), source.value)
                return RenderedRoute(path=path, source=source)

        # straight line is never empty for a configured day
        return RenderedRoute(path=[], source=GeometrySource.NONE)

    def resolve_trip(self, documents: Sequence[RouteDocument], allow_network: bool = False) -> Path:
        """
        One overview line for the whole trip, days in order, joints not repeated.
        Rest days contribute nothing.
        """
        ordered = sorted(documents, key=lambda document: document.day)
        return stitch_paths(self.resolve(document, allow_network).path for document in ordered)
