#Purpose: Route metrics for display.
#Converts raw provider outputs (meters, seconds) into what the itinerary shows:
#distance in whole miles
#estimated time as "Xh Ym" or "Ym"
#Keeps unit conversion and formatting separate from route computation.

from __future__ import annotations

import math
from dataclasses import dataclass

METERS_PER_MILE = 1609.34


@dataclass(frozen=True)
class RouteMetrics:
    distance_miles: int
    estimated_time: str


def _round_half_up(value: float) -> int:
    # round() is banker's rounding; 2.5 miles should show as 3
    return int(math.floor(value + 0.5))


def _check(name: str, value: float) -> None:
    if value is None or not math.isfinite(value) or value < 0:
        raise ValueError(f"{name} must be a finite non-negative number, got {value!r}")


def distance_miles(distance_m: float) -> int:
    _check("distance_m", distance_m)
    return max(0, _round_half_up(distance_m / METERS_PER_MILE))


def format_duration(duration_s: float) -> str:
    """
    "2h 5m" when there is at least one hour, else "45m".

    Minutes are rounded, and 60 rounded minutes carry into the hour
    (7199s is "2h 0m", never "1h 60m").
    """
    _check("duration_s", duration_s)
    hours = int(duration_s // 3600)
    minutes = _round_half_up((duration_s % 3600) / 60)
    if minutes >= 60:
        hours += 1
        minutes -= 60
    if hours > 0:
        return f"{hours}h {minutes}m"
    return f"{minutes}m"


def route_metrics(distance_m: float, duration_s: float) -> RouteMetrics:
    return RouteMetrics(
        distance_miles=distance_miles(distance_m),
        estimated_time=format_duration(duration_s),
    )
