#Marks routing as a package.
#Re-exports the public APIs (DirectionsClient, simplify, route_metrics, GeoPoint)
#so other modules import from routing without knowing internal file names.
#No business logic.

from .coordinates import GeoPoint, CoordinateError, from_storage, to_storage
from .directions_client import (
    DirectionsClient,
    DirectionsError,
    DirectionsResult,
    InvalidRequest,
    NoRouteFound,
    ProviderUnavailable,
)
from .simplify import simplify, simplify_to_limit
from .metrics import route_metrics, RouteMetrics

__all__ = [
           "GeoPoint",
           "CoordinateError",
           "from_storage",
           "to_storage",
           "DirectionsClient",
           "DirectionsError",
           "DirectionsResult",
           "InvalidRequest",
           "NoRouteFound",
           "ProviderUnavailable",
           "simplify",
           "simplify_to_limit",
           "route_metrics",
           "RouteMetrics",
           ]
