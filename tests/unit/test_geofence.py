"""
Unit tests for polygon geofence validation.
"""

import pytest
from pydantic import ValidationError

from linref_engine.geofence import (
    GeofenceConfig,
    GeofenceValidator,
    GeoPoint,
    PolygonZone,
    RejectionReason,
    ValidationMode,
    Vertex,
    coerce_geo_point,
    coerce_vertices,
    is_point_in_polygon,
)
from linref_engine.geofence.validator import (
    MSG_LOCATION_REQUIRED,
    MSG_NO_BOUNDARY,
    MSG_OUTSIDE,
    MSG_UNVERIFIED,
    MSG_VERIFIED,
)


def square(low, high):
    """Axis-aligned square as (lat, lng) pairs."""
    return [(low, low), (low, high), (high, high), (high, low)]


@pytest.fixture
def validator():
    return GeofenceValidator()


@pytest.fixture
def unit_square():
    return square(0, 10)


@pytest.fixture
def l_shape():
    """Concave polygon: a strip lat 0-5 plus a column lng 0-5."""
    return [(0, 0), (0, 10), (5, 10), (5, 5), (10, 5), (10, 0)]


# ---------------------------------------------------------------------------
# Ray casting
# ---------------------------------------------------------------------------


class TestIsPointInPolygon:

    def test_inside(self, unit_square):
        assert is_point_in_polygon(5, 5, coerce_vertices(unit_square))

    def test_outside(self, unit_square):
        assert not is_point_in_polygon(15, 15, coerce_vertices(unit_square))

    def test_winding_order_irrelevant(self, unit_square):
        vertices = coerce_vertices(list(reversed(unit_square)))
        assert is_point_in_polygon(5, 5, vertices)
        assert not is_point_in_polygon(15, 5, vertices)

    def test_concave(self, l_shape):
        vertices = coerce_vertices(l_shape)
        assert is_point_in_polygon(7, 2, vertices)
        assert is_point_in_polygon(2, 7, vertices)
        assert not is_point_in_polygon(7, 7, vertices)

    def test_empty_polygon(self):
        assert not is_point_in_polygon(5, 5, [])


class TestCoercion:

    def test_vertex_forms(self):
        vertices = coerce_vertices([
            Vertex(lat=1, lng=2),
            {"lat": 3, "lng": 4},
            (5, 6),
        ])
        assert [(v.lat, v.lng) for v in vertices] == [(1, 2), (3, 4), (5, 6)]

    def test_no_vertices(self):
        assert coerce_vertices(None) == []

    def test_geo_point_from_strings(self):
        point = coerce_geo_point("23.05", " 90.05 ")
        assert (point.lat, point.lng) == (23.05, 90.05)

    def test_zero_is_a_location(self):
        point = coerce_geo_point(0, 0)
        assert (point.lat, point.lng) == (0, 0)

    @pytest.mark.parametrize("lat, lng", [
        (None, 90),
        (23, None),
        ("", "90"),
        ("23", "  "),
    ])
    def test_missing(self, lat, lng):
        assert coerce_geo_point(lat, lng) is None

    @pytest.mark.parametrize("lat, lng", [
        ("north", "90"),
        (95, 90),
        ("23", "200"),
        ([23], 90),
    ])
    def test_unusable_raises(self, lat, lng):
        with pytest.raises(ValueError):
            coerce_geo_point(lat, lng)

    def test_vertex_mapping_missing_key(self):
        with pytest.raises(ValidationError):
            coerce_vertices([{"lat": 1}])

    def test_vertex_range_checked(self):
        with pytest.raises(ValidationError):
            Vertex(lat=91, lng=0)


# ---------------------------------------------------------------------------
# Single polygon
# ---------------------------------------------------------------------------


class TestValidate:

    def test_inside_accepted(self, validator, unit_square):
        outcome = validator.validate(GeoPoint(lat=5, lng=5), unit_square)

        assert outcome.accepted
        assert outcome.verified
        assert outcome.status == "success"
        assert outcome.status_code == 200
        assert outcome.message == MSG_VERIFIED

    def test_outside_rejected(self, validator, unit_square):
        outcome = validator.validate(GeoPoint(lat=15, lng=15), unit_square)

        assert not outcome.accepted
        assert outcome.status == "error"
        assert outcome.reason == RejectionReason.OUTSIDE_BOUNDARY
        assert outcome.status_code == 403
        assert outcome.message == MSG_OUTSIDE

    def test_missing_point_rejected(self, validator, unit_square):
        outcome = validator.validate(None, unit_square, allow_without_location=False)

        assert not outcome.accepted
        assert outcome.reason == RejectionReason.LOCATION_REQUIRED
        assert outcome.status_code == 422
        assert outcome.message == MSG_LOCATION_REQUIRED

    def test_missing_point_allowed(self, validator, unit_square):
        outcome = validator.validate(None, unit_square, allow_without_location=True)

        assert outcome.accepted
        assert not outcome.verified
        assert outcome.message == MSG_UNVERIFIED

    def test_missing_point_checked_before_polygon(self, validator):
        outcome = validator.validate(None, [], allow_without_location=True)
        assert outcome.accepted

    @pytest.mark.parametrize("polygon", [None, []])
    def test_no_boundary(self, validator, polygon):
        outcome = validator.validate(GeoPoint(lat=5, lng=5), polygon)

        assert not outcome.accepted
        assert outcome.reason == RejectionReason.NO_BOUNDARY_CONFIGURED
        assert outcome.message == MSG_NO_BOUNDARY

    def test_self_intersecting_polygon_warns(self, validator, caplog):
        bowtie = [(0, 0), (10, 10), (0, 10), (10, 0)]
        validator.validate(GeoPoint(lat=5, lng=1), bowtie)
        assert "not a simple ring" in caplog.text


# ---------------------------------------------------------------------------
# Configurations with several zones
# ---------------------------------------------------------------------------


class TestValidateConfig:

    @pytest.fixture
    def zones(self):
        return [
            PolygonZone(id="office", name="Site Office", points=coerce_vertices(square(0, 10))),
            PolygonZone(id="yard", name="Yard", points=coerce_vertices(square(20, 30))),
        ]

    def test_any_mode_names_zone(self, validator, zones):
        config = GeofenceConfig(polygons=zones)
        outcome = validator.validate_config(config, GeoPoint(lat=25, lng=25))

        assert outcome.accepted
        assert outcome.zone == "Yard"
        assert outcome.message == "Location verified within Yard."

    def test_any_mode_outside_all(self, validator, zones):
        config = GeofenceConfig(polygons=zones)
        outcome = validator.validate_config(config, GeoPoint(lat=15, lng=15))
        assert outcome.reason == RejectionReason.OUTSIDE_BOUNDARY

    def test_all_mode(self, validator):
        config = GeofenceConfig(
            polygons=[
                PolygonZone(name="A", points=coerce_vertices(square(0, 10))),
                PolygonZone(name="B", points=coerce_vertices(square(5, 15))),
            ],
            validation_mode=ValidationMode.ALL,
        )

        assert validator.validate_config(config, GeoPoint(lat=7, lng=7)).accepted
        assert not validator.validate_config(config, GeoPoint(lat=2, lng=2)).accepted

    def test_inactive_zone_ignored(self, validator, zones):
        zones[1] = PolygonZone(name="Yard", points=zones[1].points, is_active=False)
        config = GeofenceConfig(polygons=zones)
        outcome = validator.validate_config(config, GeoPoint(lat=25, lng=25))
        assert outcome.reason == RejectionReason.OUTSIDE_BOUNDARY

    def test_only_inactive_zones(self, validator, zones):
        config = GeofenceConfig(
            polygons=[PolygonZone(name="Old", points=zones[0].points, is_active=False)]
        )
        outcome = validator.validate_config(config, GeoPoint(lat=5, lng=5))
        assert outcome.reason == RejectionReason.NO_BOUNDARY_CONFIGURED

    def test_unnamed_zone_uses_generic_message(self, validator):
        config = GeofenceConfig(polygons=[PolygonZone(points=coerce_vertices(square(0, 10)))])
        outcome = validator.validate_config(config, GeoPoint(lat=5, lng=5))
        assert outcome.message == MSG_VERIFIED
        assert outcome.zone is None

    def test_single_polygon_checked_with_zones(self, validator, zones):
        config = GeofenceConfig(polygon=coerce_vertices(square(40, 50)), polygons=zones)
        assert validator.validate_config(config, GeoPoint(lat=45, lng=45)).accepted

    def test_missing_point_policy(self, validator, zones):
        config = GeofenceConfig(polygons=zones, allow_without_location=True)
        outcome = validator.validate_config(config, None)
        assert outcome.accepted
        assert not outcome.verified


class TestValidateRequest:

    @pytest.fixture
    def attendance_config(self):
        """Attendance type config as stored by the application."""
        return {
            "polygon": [
                {"lat": -1, "lng": -1},
                {"lat": -1, "lng": 1},
                {"lat": 1, "lng": 1},
                {"lat": 1, "lng": -1},
            ],
            "allow_without_location": False,
        }

    def test_string_coordinates(self, validator, attendance_config):
        assert validator.validate_request(attendance_config, "0.5", "-0.5").accepted

    def test_zero_coordinates_validated(self, validator, attendance_config):
        outcome = validator.validate_request(attendance_config, 0, 0)
        assert outcome.accepted
        assert outcome.verified

    def test_blank_coordinates(self, validator, attendance_config):
        outcome = validator.validate_request(attendance_config, "", "")
        assert outcome.reason == RejectionReason.LOCATION_REQUIRED

    def test_blank_coordinates_allowed(self, validator, attendance_config):
        attendance_config["allow_without_location"] = True
        outcome = validator.validate_request(attendance_config)
        assert outcome.accepted
        assert outcome.message == MSG_UNVERIFIED

    def test_outside(self, validator, attendance_config):
        outcome = validator.validate_request(attendance_config, "5", "5")
        assert outcome.status_code == 403

    def test_empty_config(self, validator):
        outcome = validator.validate_request({}, 5, 5)
        assert outcome.reason == RejectionReason.NO_BOUNDARY_CONFIGURED

    def test_accepts_model(self, validator, attendance_config):
        config = GeofenceConfig(**attendance_config)
        assert validator.validate_request(config, 0.5, 0.5).accepted

    def test_malformed_config(self, validator):
        with pytest.raises(ValidationError):
            validator.validate_request({"polygon": [{"lat": "north", "lng": 0}]}, 0, 0)

    @pytest.mark.parametrize("lat, lng", [("95", "0"), ("north", "0"), (0, 181)])
    def test_unusable_coordinates_rejected(self, validator, attendance_config, lat, lng):
        outcome = validator.validate_request(attendance_config, lat, lng)

        assert not outcome.accepted
        assert outcome.reason == RejectionReason.OUTSIDE_BOUNDARY
        assert outcome.status_code == 403

    def test_unusable_coordinates_not_treated_as_missing(self, validator, attendance_config):
        attendance_config["allow_without_location"] = True
        outcome = validator.validate_request(attendance_config, "95", "0")

        assert not outcome.accepted
        assert outcome.reason == RejectionReason.OUTSIDE_BOUNDARY

    def test_unusable_coordinates_without_boundary(self, validator):
        outcome = validator.validate_request({"allow_without_location": True}, "95", "0")
        assert outcome.reason == RejectionReason.NO_BOUNDARY_CONFIGURED

    def test_vertex_missing_lng(self, validator):
        with pytest.raises(ValidationError):
            validator.validate(GeoPoint(lat=0, lng=0), [{"lat": 0}, {"lat": 1, "lng": 1}, {"lat": 1, "lng": 0}])
