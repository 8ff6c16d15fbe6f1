import pytest

from routing.coordinates import GeoPoint
from routing.simplify import perpendicular_distance, simplify, simplify_to_limit
from tests.conftest import wiggly_path


def _discarded_within_tolerance(original, simplified, tolerance):
    """
    Walk the original alongside the simplified path: every point between two
    kept neighbours must sit within tolerance of the segment joining them.
    """
    kept_indexes = []
    cursor = 0
    for point in simplified:
        while original[cursor] != point:
            cursor += 1
        kept_indexes.append(cursor)
        cursor += 1

    for a, b in zip(kept_indexes, kept_indexes[1:]):
        for i in range(a + 1, b):
            assert perpendicular_distance(original[i], original[a], original[b]) <= tolerance
    return kept_indexes


def test_collinear_points_collapse_to_endpoints():
    path = [GeoPoint(lat=0.0, lng=float(i)) for i in range(10)]

    assert simplify(path, 0.0005) == [path[0], path[-1]]


def test_spike_above_tolerance_is_kept():
    path = [GeoPoint(0.0, 0.0), GeoPoint(0.0, 1.0), GeoPoint(0.01, 2.0), GeoPoint(0.0, 3.0), GeoPoint(0.0, 4.0)]

    # neighbours sit 0.005 off the chords through the spike
    assert simplify(path, 0.006) == [path[0], path[2], path[4]]
    assert simplify(path, 0.02) == [path[0], path[4]]


def test_subsequence_and_bound_on_wiggly_road(baja_start, baja_end):
    original = wiggly_path(baja_start, baja_end, count=800, amplitude=0.003, waves=9)
    tolerance = 0.0005

    simplified = simplify(original, tolerance)

    assert simplified[0] == original[0]
    assert simplified[-1] == original[-1]
    assert 2 < len(simplified) < len(original)
    kept = _discarded_within_tolerance(original, simplified, tolerance)
    assert kept == sorted(kept)


def test_deterministic(baja_start, baja_end):
    original = wiggly_path(baja_start, baja_end, count=600, amplitude=0.002)

    assert simplify(original, 0.0005) == simplify(original, 0.0005)


@pytest.mark.parametrize("path", [
    [],
    [GeoPoint(30.0, -115.0)],
    [GeoPoint(30.0, -115.0), GeoPoint(30.5, -115.5)],
])
def test_short_paths_unchanged(path):
    assert simplify(path, 0.0005) == path
    assert simplify(path, 10.0) == path


def test_zero_tolerance_keeps_every_bend():
    path = [GeoPoint(0.0, 0.0), GeoPoint(0.001, 1.0), GeoPoint(0.0, 2.0)]

    assert simplify(path, 0.0) == path


def test_negative_tolerance_rejected():
    with pytest.raises(ValueError):
        simplify([GeoPoint(0, 0), GeoPoint(0, 1), GeoPoint(0, 2)], -0.1)


def test_perpendicular_distance_of_degenerate_segment_is_point_distance():
    a = GeoPoint(0.0, 0.0)

    assert perpendicular_distance(GeoPoint(3.0, 4.0), a, a) == pytest.approx(5.0)


def test_perpendicular_distance_beyond_segment_end_measures_to_endpoint():
    a, b = GeoPoint(0.0, 0.0), GeoPoint(0.0, 1.0)

    assert perpendicular_distance(GeoPoint(0.0, 2.0), a, b) == pytest.approx(1.0)


def test_long_paths_do_not_hit_recursion_limit():
    path = [GeoPoint(lat=(i % 2) * 0.01, lng=i * 0.001) for i in range(1500)]

    simplified = simplify(path, 0.0005)

    assert len(simplified) == len(path)


def test_simplify_to_limit_caps_point_count(baja_start, baja_end):
    original = wiggly_path(baja_start, baja_end, count=500, amplitude=0.01, waves=40)
    assert len(simplify(original, 0.0005)) > 50

    capped = simplify_to_limit(original, 0.0005, max_points=50)

    assert len(capped) <= 50
    assert capped[0] == original[0] and capped[-1] == original[-1]
    assert simplify_to_limit(original, 0.0005, max_points=50) == capped


def test_simplify_to_limit_leaves_small_results_alone():
    path = [GeoPoint(0.0, 0.0), GeoPoint(0.01, 2.0), GeoPoint(0.0, 4.0)]

    assert simplify_to_limit(path, 0.0005, max_points=10) == path


def test_simplify_to_limit_rejects_impossible_cap():
    with pytest.raises(ValueError):
        simplify_to_limit([GeoPoint(0, 0), GeoPoint(0, 1)], 0.0005, max_points=1)


def test_result_is_made_of_the_input_points(baja_start, baja_end):
    original = wiggly_path(baja_start, baja_end, count=800)

    simplified = simplify(original, 0.0005)

    assert all(any(point is source for source in original) for point in simplified)


def test_closed_loop_keeps_both_ends():
    loop = [GeoPoint(0.0, 0.0), GeoPoint(0.0, 1.0), GeoPoint(1.0, 1.0), GeoPoint(1.0, 0.0), GeoPoint(0.0, 0.0)]

    simplified = simplify(loop, 10.0)

    assert simplified[0] is loop[0]
    assert simplified[-1] is loop[-1]
    assert len(simplified) >= 2
