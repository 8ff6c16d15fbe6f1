import math

import pytest

from routing.metrics import distance_miles, format_duration, route_metrics


def test_scenario_thirty_miles_ninety_minutes():
    metrics = route_metrics(distance_m=48280, duration_s=5400)

    assert metrics.distance_miles == 30
    assert metrics.estimated_time == "1h 30m"


def test_minutes_carry_into_hour():
    """
    1h 59m 59s rounds to 60 minutes, which must show as the next hour.
    """
    assert route_metrics(distance_m=0, duration_s=7199).estimated_time == "2h 0m"
    assert format_duration(7199) != "1h 60m"


def test_minutes_carry_without_prior_hour():
    # 59.5 minutes
    assert format_duration(3570) == "1h 0m"


@pytest.mark.parametrize("seconds, expected", [
    (0, "0m"),
    (29, "0m"),
    (30, "1m"),
    (59, "1m"),
    (2700, "45m"),
    (3600, "1h 0m"),
    (3629, "1h 0m"),
    (5400, "1h 30m"),
    (22500, "6h 15m"),
])
def test_format_duration(seconds, expected):
    assert format_duration(seconds) == expected


def test_distance_rounds_to_nearest_mile():
    assert distance_miles(0) == 0
    assert distance_miles(800) == 0
    assert distance_miles(805) == 1
    assert distance_miles(160934) == 100


@pytest.mark.parametrize("bad", [-1, math.nan, math.inf])
def test_invalid_inputs_rejected(bad):
    with pytest.raises(ValueError):
        route_metrics(distance_m=bad, duration_s=60)
    with pytest.raises(ValueError):
        route_metrics(distance_m=1000, duration_s=bad)
