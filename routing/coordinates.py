"""
Purpose: Coordinate model for route geometry.
What it does:
- Defines GeoPoint (lat, lng) and the Path type (ordered list of GeoPoint)
- Converts between the two wire shapes:
    [lng, lat]        GeoJSON pair, used by the directions provider and the map layer
    {"lat", "lng"}    keyed object, used by the document store (no nested arrays there)
- Reads stored paths defensively: a malformed point is dropped, not fatal.

Rule: No HTTP calls, no storage calls. Conversion only.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from numbers import Real
from typing import Any, Iterable, List, Mapping, Optional, Sequence, Tuple

LngLat = Tuple[float, float]


class CoordinateError(ValueError):
    """Raised when a coordinate is not a finite, in-range lat/lng pair."""
    pass


def _is_number(value: Any) -> bool:
    # bool is a subclass of int, but True is not a latitude
    return isinstance(value, Real) and not isinstance(value, bool) and math.isfinite(value)


def is_valid_lat_lng(lat: Any, lng: Any) -> bool:
    return (
        _is_number(lat)
        and _is_number(lng)
        and -90.0 <= lat <= 90.0
        and -180.0 <= lng <= 180.0
    )


@dataclass(frozen=True)
class GeoPoint:
    """
    A latitude/longitude pair in degrees.

    Use GeoPoint.new(...) for untrusted input; the plain constructor does not validate.
    """
    lat: float
    lng: float

    @classmethod
    def new(cls, lat: Any, lng: Any) -> GeoPoint:
        if not is_valid_lat_lng(lat, lng):
            raise CoordinateError(f"invalid coordinate lat={lat!r}, lng={lng!r}")
        return cls(lat=float(lat), lng=float(lng))

    def is_set(self) -> bool:
        """(0, 0) is how an editor form stores an empty coordinate."""
        return not (self.lat == 0 and self.lng == 0)

    def is_valid(self) -> bool:
        return is_valid_lat_lng(self.lat, self.lng)

    # --- wire shapes ---

    def to_pair(self) -> List[float]:
        return [self.lng, self.lat]

    @classmethod
    def from_pair(cls, pair: Sequence[Any]) -> GeoPoint:
        if isinstance(pair, (str, bytes)) or len(pair) < 2:
            raise CoordinateError(f"not a [lng, lat] pair: {pair!r}")
        return cls.new(lat=pair[1], lng=pair[0])

    def to_storage(self) -> dict:
        return {"lat": self.lat, "lng": self.lng}

    @classmethod
    def from_storage(cls, data: Mapping[str, Any]) -> GeoPoint:
        if not isinstance(data, Mapping):
            raise CoordinateError(f"not a {{lat, lng}} object: {data!r}")
        return cls.new(lat=data.get("lat"), lng=data.get("lng"))


Path = List[GeoPoint]


def _parse_stored_point(item: Any) -> Optional[GeoPoint]:
    try:
        if isinstance(item, Mapping):
            return GeoPoint.from_storage(item)
        # older documents kept GeoJSON pairs
        if isinstance(item, (list, tuple)):
            return GeoPoint.from_pair(item)
    except CoordinateError:
        return None
    return None


def to_storage(path: Iterable[GeoPoint]) -> List[dict]:
    return [point.to_storage() for point in path]


def from_storage(items: Any) -> Path:
    """
    Read a stored coordinate list back into a Path.

    Elements that are not a well-formed pair of finite numbers are dropped,
    so one bad point costs one point and not the whole route.
    """
    if not isinstance(items, (list, tuple)):
        return []
    path: Path = []
    for item in items:
        point = _parse_stored_point(item)
        if point is not None:
            path.append(point)
    return path


def is_well_formed_storage(items: Any) -> bool:
    """True when every stored element parses (nothing would be dropped)."""
    if not isinstance(items, (list, tuple)):
        return False
    return all(_parse_stored_point(item) is not None for item in items)


def to_pairs(path: Iterable[GeoPoint]) -> List[List[float]]:
    return [point.to_pair() for point in path]


def from_pairs(pairs: Iterable[Sequence[Any]]) -> Path:
    """Strict: the provider's geometry must be entirely valid."""
    return [GeoPoint.from_pair(pair) for pair in pairs]


def path_bounds(path: Sequence[GeoPoint]) -> Optional[Tuple[float, float, float, float]]:
    """
    Viewport box (min_lat, min_lng, max_lat, max_lng) for fitting the map, or None for an empty path.
    """
    if not path:
        return None
    lats = [point.lat for point in path]
    lngs = [point.lng for point in path]
    return (min(lats), min(lngs), max(lats), max(lngs))
