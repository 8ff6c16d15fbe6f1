"""
Purpose: Path simplification (Douglas-Peucker point elimination).
What it does:
- Reduces a dense provider path to a subsequence within a tolerance (degrees)
- Keeps first and last point, always
- Deterministic: same path + same tolerance -> same output

The line is handed to shapely as (lng, lat) coordinates, so distances are
planar in degree space, which is what a tolerance in degrees means.
0.0005 degrees is roughly 50 m of deviation at mid-latitudes.

Rule: Pure functions. No HTTP, no storage.
"""

from __future__ import annotations

import math
from typing import List, Sequence

from shapely.geometry import LineString, Point

from routing.coordinates import GeoPoint, Path

DEFAULT_TOLERANCE_DEGREES = 0.0005


def perpendicular_distance(point: GeoPoint, start: GeoPoint, end: GeoPoint) -> float:
    """
    Distance from point to the segment start-end, in degrees.
    A zero-length segment measures to its single point.
    """
    if start == end:
        return Point(point.lng, point.lat).distance(Point(start.lng, start.lat))
    return Point(point.lng, point.lat).distance(LineString([(start.lng, start.lat), (end.lng, end.lat)]))


def _kept_indexes(path: Sequence[GeoPoint], coords) -> List[int]:
    # shapely returns coordinate tuples; walk the input to find which points they are
    indexes: List[int] = []
    cursor = 0
    for lng, lat in coords:
        while cursor < len(path) and (path[cursor].lng, path[cursor].lat) != (lng, lat):
            cursor += 1
        if cursor == len(path):
            break
        indexes.append(cursor)
        cursor += 1

    if not indexes or indexes[0] != 0:
        indexes.insert(0, 0)
    if indexes[-1] != len(path) - 1:
        indexes.append(len(path) - 1)
    return indexes


def simplify(path: Sequence[GeoPoint], tolerance: float = DEFAULT_TOLERANCE_DEGREES) -> Path:
    """
    Douglas-Peucker simplification (GEOS, via shapely).

    Every discarded point lies within `tolerance` of the kept segment that
    replaces it. Paths of two points or fewer come back unchanged.
    """
    if tolerance < 0 or math.isnan(tolerance):
        raise ValueError("tolerance must be >= 0")
    if len(path) <= 2:
        return list(path)

    line = LineString([(point.lng, point.lat) for point in path])
    simplified = line.simplify(tolerance, preserve_topology=False)
    return [path[i] for i in _kept_indexes(path, simplified.coords)]


def simplify_to_limit(path: Sequence[GeoPoint], tolerance: float = DEFAULT_TOLERANCE_DEGREES,
                      max_points: int = 1000) -> Path:
    """
    Simplify at `tolerance`, then keep doubling the tolerance until the result
    fits in max_points. Returns the simplified path (still a subsequence).
    """
    if max_points < 2:
        raise ValueError("max_points must be >= 2")

    simplified = simplify(path, tolerance)
    current = tolerance
    while len(simplified) > max_points:
        # zero tolerance cannot grow by doubling
        current = current * 2 if current > 0 else DEFAULT_TOLERANCE_DEGREES
        simplified = simplify(path, current)
    return simplified
