import math
from typing import List, Optional

import pytest

from routing.coordinates import GeoPoint
from routing.directions_client import DirectionsResult
from routes.store import InMemoryDocumentStore

COLLECTION = "events/testevent/routes"


class MockDirections:
    """
    Stands in for DirectionsClient. Returns a canned result (or raises a canned error)
    and records every call so tests can assert on network use.
    """
    def __init__(self, result: Optional[DirectionsResult] = None, error: Optional[Exception] = None):
        self.result = result
        self.error = error
        self.calls: List[List[GeoPoint]] = []
        self.chunked_calls: List[List[GeoPoint]] = []

    def _answer(self, points):
        if self.error is not None:
            raise self.error
        if self.result is not None:
            return self.result
        # default: echo the points back as the road path
        return DirectionsResult(path=list(points), distance_m=1000.0, duration_s=60.0)

    def fetch_route(self, points):
        if len(points) < 2:
            raise ValueError("At least two points are required to fetch a route.")
        self.calls.append(list(points))
        return self._answer(points)

    def fetch_route_chunked(self, points, max_coordinates=25):
        self.chunked_calls.append(list(points))
        return self._answer(points)

    @property
    def call_count(self) -> int:
        return len(self.calls) + len(self.chunked_calls)


def wiggly_path(start: GeoPoint, end: GeoPoint, count: int = 500,
                amplitude: float = 0.0002, waves: int = 12) -> List[GeoPoint]:
    """Points from start to end with a sideways sine wiggle, like a road along a valley."""
    points = []
    for i in range(count):
        t = i / (count - 1)
        wiggle = amplitude * math.sin(t * waves * 2 * math.pi)
        points.append(GeoPoint(
            lat=start.lat + t * (end.lat - start.lat) + wiggle,
            lng=start.lng + t * (end.lng - start.lng) + wiggle,
        ))
    return points


@pytest.fixture
def baja_start():
    return GeoPoint(lat=30.0, lng=-115.0)


@pytest.fixture
def baja_end():
    return GeoPoint(lat=30.5, lng=-115.5)


@pytest.fixture
def store():
    return InMemoryDocumentStore()
