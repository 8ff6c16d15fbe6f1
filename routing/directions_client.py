#Purpose: The directions provider "adapter/client".
#Sole responsibility: talk to the driving-directions API via HTTP and return normalized outputs.
#Encapsulates provider-specific details:
#coordinate formatting (lng,lat;lng,lat)
#URL construction (/directions/v5/mapbox/{profile}/...)
#timeouts and error mapping (no retries here, the caller decides)
#parsing response JSON into our Path / distance / duration shape
#It should not simplify, compute display metrics or touch storage.


from dotenv import load_dotenv
import logging
import os
from dataclasses import dataclass
from typing import Any, Dict, Optional, Sequence

import requests

from routing.coordinates import CoordinateError, GeoPoint, Path, from_pairs

# Read provider settings from environment
# Example in .env:
# MAPBOX_BASE_URL=https://api.mapbox.com
# MAPBOX_TOKEN=pk.xxxx
load_dotenv()
BASE_URL = os.getenv("MAPBOX_BASE_URL", "https://api.mapbox.com")
ACCESS_TOKEN = os.getenv("MAPBOX_TOKEN")

# provider limit on coordinates per request
MAX_COORDINATES = 25

logger = logging.getLogger(__name__)


class DirectionsError(Exception):
    """Base class for directions provider failures."""
    pass


class ProviderUnavailable(DirectionsError):
    """Timeout, connection failure, non-2xx response or unreadable body."""
    pass


class NoRouteFound(DirectionsError):
    """The provider answered but has no route between the points."""
    pass


class InvalidRequest(DirectionsError):
    """The provider rejected the coordinates or request parameters."""
    pass


@dataclass(frozen=True)
class DirectionsResult:
    """
    Normalized provider output: road-snapped path plus raw metrics.
    """
    path: Path
    distance_m: float
    duration_s: float


class DirectionsClient:
    """
    Directions Adapter / Client

    Sole responsibility:
    - Talk to the provider via HTTP
    - Convert internal GeoPoint -> provider "lng,lat"
    - Return a DirectionsResult or raise a DirectionsError subclass

    """
    def __init__(self, profile: str = "driving", timeout: float = 5,
                 access_token: Optional[str] = None, base_url: Optional[str] = None,
                 session: Optional[requests.Session] = None):
        self.base_url = (base_url or BASE_URL).rstrip("/")
        self.access_token = access_token or ACCESS_TOKEN
        self.timeout = timeout #seconds to wait for the provider before giving up
        self.profile = profile #driving, driving-traffic, walking, cycling
        self.http = session or requests

        if not self.access_token:
            raise ValueError("Directions access token not set. Please set MAPBOX_TOKEN in the .env file.")

        #----------------
        # Internal helpers for coordinate formatting and response parsing
        #----------------
    def format_coordinates(self, points: Sequence[GeoPoint]) -> str:
        """Convert list of GeoPoint to provider format 'lng,lat;lng,lat;...'"""
        return ';'.join(f"{_degrees(point.lng)},{_degrees(point.lat)}" for point in points)

    def _parse_route(self, data: Dict[str, Any]) -> DirectionsResult:
        routes = data.get("routes") or []
        if data.get("code") == "NoRoute" or not routes:
            raise NoRouteFound(data.get("message") or "No route found between these points")

        route = routes[0] #first route is the recommended one
        try:
            coordinates = route["geometry"]["coordinates"]
            path = from_pairs(coordinates)
            distance_m = float(route["distance"])
            duration_s = float(route["duration"])
        except (KeyError, TypeError, ValueError, CoordinateError) as e:
            raise ProviderUnavailable(f"Unreadable route in provider response: {e}") from e

        if not path:
            raise NoRouteFound("Provider returned an empty geometry")
        return DirectionsResult(path=path, distance_m=distance_m, duration_s=duration_s)

        #----------------
        # Public methods
        #----------------
    def fetch_route(self, points: Sequence[GeoPoint]) -> DirectionsResult:
        """
        calls the directions endpoint with the points in caller order
        (start, waypoints..., end) and returns the road-snapped path.

        Returns:
            DirectionsResult(path, distance_m, duration_s)

        Raises:
            ValueError: fewer than 2 points (caller error, not a provider failure)
            ProviderUnavailable / NoRouteFound / InvalidRequest
        """
        if len(points) < 2:
            raise ValueError("At least two points are required to fetch a route.")

        coordinates = self.format_coordinates(points)
        url = f"{self.base_url}/directions/v5/mapbox/{self.profile}/{coordinates}"

        try:
            response = self.http.get(
                url,
                params={
                    "geometries": "geojson",
                    "overview": "full", # full detail, the caller simplifies
                    "access_token": self.access_token,
                },
                timeout=self.timeout,
            )
        except requests.Timeout as e:
            raise ProviderUnavailable(f"Directions request timed out after {self.timeout}s") from e
        except requests.RequestException as e:
            raise ProviderUnavailable(f"Directions request failed: {e}") from e

        if response.status_code in (400, 422):
            raise InvalidRequest(f"Directions request rejected ({response.status_code}): {_error_message(response)}")
        if not 200 <= response.status_code < 300:
            raise ProviderUnavailable(f"Directions API error: {response.status_code}")

        try:
            data = response.json()
        except ValueError as e:
            raise ProviderUnavailable("Directions API returned a non-JSON body") from e
        if not isinstance(data, dict):
            raise ProviderUnavailable("Directions API returned an unexpected body")

        result = self._parse_route(data)
        logger.debug("Directions %d points -> %d path points, %.0fm, %.0fs",
                     len(points), len(result.path), result.distance_m, result.duration_s)
        return result

        #----------------
        # multi-request routing
        #----------------
    def fetch_route_chunked(self, points: Sequence[GeoPoint],
                            max_coordinates: int = MAX_COORDINATES) -> DirectionsResult:
        """
        Same as fetch_route, for point lists longer than the provider accepts.

        Splits into windows of max_coordinates that overlap by one point,
        joins the paths without repeating the joint and sums the metrics.
        """
        if max_coordinates < 2:
            raise ValueError("max_coordinates must be >= 2")
        if len(points) <= max_coordinates:
            return self.fetch_route(points)

        path: Path = []
        distance_m = 0.0
        duration_s = 0.0
        for start in range(0, len(points) - 1, max_coordinates - 1):
            chunk = points[start:start + max_coordinates]
            if len(chunk) < 2:
                break
            result = self.fetch_route(chunk)
            # avoid duplicating the connection point
            path.extend(result.path[1:] if path else result.path)
            distance_m += result.distance_m
            duration_s += result.duration_s

        return DirectionsResult(path=path, distance_m=distance_m, duration_s=duration_s)


def _error_message(response: requests.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text[:200]
    if isinstance(body, dict):
        return str(body.get("message") or body.get("code") or body)
    return str(body)


def _degrees(value: float) -> str:
    # fixed point, the path syntax does not accept 1e-05
    return f"{value:.6f}".rstrip("0").rstrip(".")
