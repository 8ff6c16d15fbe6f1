from datetime import datetime, timezone

import pytest

from routing.coordinates import GeoPoint
from routes.models import (
    POI,
    GeneratedGeometry,
    POICategory,
    RouteDocument,
    RouteSpec,
    RouteValidationError,
    document_id,
)


def _document():
    return RouteDocument(
        day=3,
        start=GeoPoint(30.0, -115.0),
        end=GeoPoint(30.5, -115.5),
        start_name="Rancho Meling",
        end_name="Laguna Ojo de Liebre",
        waypoints=[GeoPoint(30.2, -115.2)],
        route_geometry=[GeoPoint(30.0, -115.0), GeoPoint(30.2, -115.2), GeoPoint(30.5, -115.5)],
        estimated_distance=30,
        estimated_time="1h 30m",
        pois=[POI(id="p1", name="Pemex", coordinates=GeoPoint(30.1, -115.1),
                  category=POICategory.GAS, description="Last fuel", hours="6-22")],
        title="Into the desert",
        description="Big riding day.",
        ride_summary="Mostly highway",
        updated_at=datetime(2026, 3, 21, 12, 0, tzinfo=timezone.utc),
    )


def test_document_storage_shape():
    data = _document().to_storage()

    assert data["day"] == 3
    assert data["startCoordinates"] == {"lat": 30.0, "lng": -115.0}
    assert data["waypoints"] == [{"lat": 30.2, "lng": -115.2}]
    assert data["routeGeometry"]["type"] == "LineString"
    assert data["routeGeometry"]["coordinates"][1] == {"lat": 30.2, "lng": -115.2}
    assert data["estimatedDistance"] == 30
    assert data["pois"][0] == {
        "id": "p1", "name": "Pemex", "coordinates": {"lat": 30.1, "lng": -115.1},
        "category": "gas", "description": "Last fuel", "hours": "6-22",
    }
    # storage format has no nested arrays
    assert all(isinstance(item, dict) for item in data["routeGeometry"]["coordinates"])


def test_document_round_trip():
    document = _document()

    assert RouteDocument.from_storage(document.to_storage()) == document


def test_empty_document_omits_geometry_fields():
    data = RouteDocument.empty(7).to_storage()

    assert "routeGeometry" not in data
    assert "estimatedDistance" not in data
    assert data["startCoordinates"] == {"lat": 0.0, "lng": 0.0}
    assert document_id(7) == "day7"


def test_tolerant_load_of_partial_document():
    data = {
        "startCoordinates": {"lat": "x"},
        "endCoordinates": {"lat": 30.5, "lng": -115.5},
        "waypoints": [{"lat": 30.2, "lng": -115.2}, {"lat": None}],
        "routeGeometry": {"type": "LineString", "coordinates": [
            {"lat": 30.0, "lng": -115.0}, {"lat": float("nan"), "lng": 1.0}, {"lat": 30.5, "lng": -115.5},
        ]},
        "estimatedDistance": "lots",
        "pois": [
            {"id": "a", "name": "Bakery", "coordinates": {"lat": 30.1, "lng": -115.1}, "category": "bakery"},
            {"id": "b", "name": "Nowhere"},
        ],
    }

    document = RouteDocument.from_storage(data, day=4)

    assert document.day == 4
    assert not document.start.is_set()
    assert document.end == GeoPoint(30.5, -115.5)
    assert document.waypoints == [GeoPoint(30.2, -115.2)]
    assert document.route_geometry == [GeoPoint(30.0, -115.0), GeoPoint(30.5, -115.5)]
    assert document.dropped_points == 1
    assert document.estimated_distance is None
    assert [poi.id for poi in document.pois] == ["a"]
    assert document.pois[0].category == POICategory.POI


@pytest.mark.parametrize("pois", [5, True, "gas station", {"id": "a"}])
def test_corrupt_pois_field_loads_as_no_pois(pois):
    document = RouteDocument.from_storage({
        "day": 4,
        "startCoordinates": {"lat": 30.0, "lng": -115.0},
        "endCoordinates": {"lat": 30.5, "lng": -115.5},
        "pois": pois,
    })

    assert document.pois == []
    assert document.end == GeoPoint(30.5, -115.5)
    assert document.title == ""


def test_spec_points_skip_unset_waypoints():
    spec = RouteSpec(
        day=1,
        start=GeoPoint(30.0, -115.0),
        end=GeoPoint(30.5, -115.5),
        waypoints=[GeoPoint(30.1, -115.1), GeoPoint(0.0, 0.0), GeoPoint(30.3, -115.3)],
    )

    assert spec.points() == [
        GeoPoint(30.0, -115.0), GeoPoint(30.1, -115.1), GeoPoint(30.3, -115.3), GeoPoint(30.5, -115.5),
    ]


def test_spec_points_keep_waypoints_on_the_equator_or_meridian():
    on_equator, on_meridian = GeoPoint(0.0, -78.5), GeoPoint(51.48, 0.0)
    spec = RouteSpec(day=1, start=GeoPoint(-0.2, -78.5), end=GeoPoint(51.5, -0.1),
                     waypoints=[on_equator, on_meridian])

    assert spec.points() == [spec.start, on_equator, on_meridian, spec.end]


@pytest.mark.parametrize("spec, message", [
    (RouteSpec(day=1, start=GeoPoint(0.0, 0.0), end=GeoPoint(30.5, -115.5)), "required"),
    (RouteSpec(day=1, start=GeoPoint(30.0, -115.0), end=GeoPoint(0.0, 0.0)), "required"),
    (RouteSpec(day=0, start=GeoPoint(30.0, -115.0), end=GeoPoint(30.5, -115.5)), "Day"),
    (RouteSpec(day=1, start=GeoPoint(95.0, -115.0), end=GeoPoint(30.5, -115.5)), "Start"),
    (RouteSpec(day=1, start=GeoPoint(30.0, -115.0), end=GeoPoint(30.5, -115.5),
               waypoints=[GeoPoint(30.2, float("nan"))]), "Waypoint 1"),
])
def test_spec_validation(spec, message):
    with pytest.raises(RouteValidationError, match=message):
        spec.validate()


def test_with_geometry_keeps_text_fields_and_replaces_geometry():
    document = _document()
    spec = RouteSpec(day=3, start=GeoPoint(31.0, -116.0), end=GeoPoint(31.5, -116.5))
    geometry = GeneratedGeometry(path=[GeoPoint(31.0, -116.0), GeoPoint(31.5, -116.5)],
                                 distance_miles=42, estimated_time="2h 0m", source_point_count=300)
    now = datetime(2026, 3, 1, tzinfo=timezone.utc)

    updated = document.with_geometry(spec, geometry, now=now)

    assert updated.route_geometry == geometry.path
    assert updated.estimated_distance == 42
    assert updated.start == GeoPoint(31.0, -116.0)
    assert updated.waypoints == []
    assert updated.title == document.title
    assert updated.pois == document.pois
    assert updated.updated_at == now
    # original untouched
    assert document.estimated_distance == 30
