"""
Purpose: Domain models for the Routes capability.
What it does:
- Defines core data structures:
- RouteSpec (day, start, end, waypoints) - the editor's input to generation
- GeneratedGeometry (simplified path, miles, time, source point count) - generation output
- POI (id, name, coordinates, category, description, phone, hours)
- RouteDocument - the persisted aggregate, one per day

Defines enums/constants:
- POICategory = gas | restaurant | poi | viewpoint | photo | border | emergency

Defines the stored JSON shape (camelCase keys, {lat, lng} objects) and how to
read it back tolerantly from a partially-written document.

Rule: No provider calls, no generation logic. Models only.
"""
from __future__ import annotations

import math
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional

from routing.coordinates import (
    CoordinateError,
    GeoPoint,
    Path,
    from_storage,
    to_storage,
)

UNSET = GeoPoint(lat=0.0, lng=0.0)


class RouteValidationError(ValueError):
    """Raised when a RouteSpec is not ready for generation. The message is shown to the editor."""
    pass


class POICategory(str, Enum):
    GAS = "gas"
    RESTAURANT = "restaurant"
    POI = "poi"
    VIEWPOINT = "viewpoint"
    PHOTO = "photo"
    BORDER = "border"
    EMERGENCY = "emergency"

    @classmethod
    def parse(cls, value: Any) -> POICategory:
        # unknown categories display as a general point of interest
        try:
            return cls(value)
        except ValueError:
            return cls.POI


def document_id(day: int) -> str:
    return f"day{day}"


def _point_or_unset(data: Any) -> GeoPoint:
    try:
        return GeoPoint.from_storage(data)
    except CoordinateError:
        return UNSET


def _optional_int(value: Any) -> Optional[int]:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
        return None
    return int(round(value))


def _text(value: Any) -> str:
    return value if isinstance(value, str) else ""


@dataclass(frozen=True)
class RouteSpec:
    """
    Editor-supplied input to generation for one day.
    Waypoints are traversed in listed order between start and end.
    """
    day: int
    start: GeoPoint
    end: GeoPoint
    waypoints: List[GeoPoint] = field(default_factory=list)

    def points(self) -> List[GeoPoint]:
        """
        [start, *waypoints, end], with empty (0, 0) waypoint rows left out.
        Only exact (0, 0) is empty; a waypoint on the equator or meridian is kept.
        """
        return [self.start, *[wp for wp in self.waypoints if wp.is_set()], self.end]

    def validate(self) -> None:
        """
        Fail fast before any network call. Raises RouteValidationError.
        """
        if isinstance(self.day, bool) or not isinstance(self.day, int) or self.day < 1:
            raise RouteValidationError(f"Day must be a positive integer, got {self.day!r}")

        for label, point in (("Start", self.start), ("End", self.end)):
            if not point.is_valid():
                raise RouteValidationError(f"{label} coordinates are not valid: {point.lat}, {point.lng}")
            if not point.is_set():
                raise RouteValidationError("Start and end coordinates are required")

        for index, waypoint in enumerate(self.waypoints, start=1):
            if not waypoint.is_valid():
                raise RouteValidationError(
                    f"Waypoint {index} coordinates are not valid: {waypoint.lat}, {waypoint.lng}"
                )

    def is_stationary(self) -> bool:
        """Rest day: start and end are the same place."""
        return self.start == self.end


@dataclass(frozen=True)
class GeneratedGeometry:
    """
    Output of one generation run.
    """
    path: Path
    distance_miles: int
    estimated_time: str

    # pre-simplification length, for diagnostics
    source_point_count: int = 0


@dataclass(frozen=True)
class POI:
    id: str
    name: str
    coordinates: GeoPoint
    category: POICategory = POICategory.POI
    description: str = ""
    phone: Optional[str] = None
    hours: Optional[str] = None

    def to_storage(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "coordinates": self.coordinates.to_storage(),
            "category": self.category.value,
            "description": self.description,
        }
        if self.phone:
            data["phone"] = self.phone
        if self.hours:
            data["hours"] = self.hours
        return data

    @classmethod
    def from_storage(cls, data: Mapping[str, Any]) -> Optional[POI]:
        """None when the record has no usable coordinates."""
        if not isinstance(data, Mapping):
            return None
        try:
            coordinates = GeoPoint.from_storage(data.get("coordinates"))
        except CoordinateError:
            return None
        return cls(
            id=str(data.get("id", "")),
            name=_text(data.get("name")),
            coordinates=coordinates,
            category=POICategory.parse(data.get("category")),
            description=_text(data.get("description")),
            phone=data.get("phone") or None,
            hours=data.get("hours") or None,
        )


@dataclass
class RouteDocument:
    """
    The persisted record of one day's route. Exactly one per day index.

    Geometry and metrics fields are written only by the generation workflow;
    text fields and POIs are edited directly (last write wins).
    """
    day: int
    start: GeoPoint = UNSET
    end: GeoPoint = UNSET
    start_name: str = ""
    end_name: str = ""
    waypoints: List[GeoPoint] = field(default_factory=list)

    route_geometry: Optional[Path] = None
    estimated_distance: Optional[int] = None
    estimated_time: Optional[str] = None

    # stored geometry points that failed to parse on load
    dropped_points: int = 0

    pois: List[POI] = field(default_factory=list)

    title: str = ""
    description: str = ""
    ride_summary: str = ""
    updated_at: Optional[datetime] = None

    @staticmethod # Factory for a day that is referenced for the first time
    def empty(day: int) -> RouteDocument:
        return RouteDocument(day=day)

    @property
    def id(self) -> str:
        return document_id(self.day)

    def spec(self) -> RouteSpec:
        return RouteSpec(day=self.day, start=self.start, end=self.end, waypoints=list(self.waypoints))

    def with_geometry(self, spec: RouteSpec, geometry: GeneratedGeometry,
                      now: Optional[datetime] = None) -> RouteDocument:
        """Copy with the spec's coordinates plus the generated path and metrics."""
        return replace(
            self,
            start=spec.start,
            end=spec.end,
            waypoints=list(spec.waypoints),
            route_geometry=list(geometry.path),
            dropped_points=0,
            estimated_distance=geometry.distance_miles,
            estimated_time=geometry.estimated_time,
            updated_at=now or datetime.now(timezone.utc),
        )

    # --- storage shape ---

    def geometry_fields(self) -> Dict[str, Any]:
        """The fields one generation run writes, together."""
        return {
            "day": self.day,
            "startCoordinates": self.start.to_storage(),
            "endCoordinates": self.end.to_storage(),
            "waypoints": to_storage(self.waypoints),
            "routeGeometry": (
                {"type": "LineString", "coordinates": to_storage(self.route_geometry)}
                if self.route_geometry is not None else None
            ),
            "estimatedDistance": self.estimated_distance,
            "estimatedTime": self.estimated_time,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }

    def to_storage(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "day": self.day,
            "startName": self.start_name,
            "endName": self.end_name,
            "pois": [poi.to_storage() for poi in self.pois],
            "title": self.title,
            "description": self.description,
            "rideSummary": self.ride_summary,
        }
        data.update(self.geometry_fields())
        # absent rather than null, for documents that were never generated
        for key in ("routeGeometry", "estimatedDistance", "estimatedTime", "updatedAt"):
            if data[key] is None:
                del data[key]
        return data

    @classmethod
    def from_storage(cls, data: Mapping[str, Any], day: Optional[int] = None) -> RouteDocument:
        """
        Tolerant read: missing fields take empty defaults, malformed geometry
        points and POIs are dropped rather than failing the whole document.
        """
        stored_day = _optional_int(data.get("day"))
        document = cls.empty(day if day is not None else (stored_day or 0))

        document.start = _point_or_unset(data.get("startCoordinates"))
        document.end = _point_or_unset(data.get("endCoordinates"))
        document.start_name = _text(data.get("startName"))
        document.end_name = _text(data.get("endName"))
        document.waypoints = from_storage(data.get("waypoints"))

        geometry = data.get("routeGeometry")
        if isinstance(geometry, Mapping) and "coordinates" in geometry:
            items = geometry.get("coordinates")
            document.route_geometry = from_storage(items)
            if isinstance(items, (list, tuple)):
                document.dropped_points = len(items) - len(document.route_geometry)

        document.estimated_distance = _optional_int(data.get("estimatedDistance"))
        estimated_time = data.get("estimatedTime")
        document.estimated_time = estimated_time if isinstance(estimated_time, str) else None

        pois = data.get("pois")
        if not isinstance(pois, (list, tuple)):
            pois = []
        document.pois = [poi for poi in (POI.from_storage(item) for item in pois) if poi]
        document.title = _text(data.get("title"))
        document.description = _text(data.get("description"))
        document.ride_summary = _text(data.get("rideSummary"))
        document.updated_at = _parse_timestamp(data.get("updatedAt"))
        return document


def _parse_timestamp(value: Any) -> Optional[datetime]:
    if isinstance(value, datetime):
        return value
    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value)
        except ValueError:
            return None
    return None

