"""
Polygon geofence validation.

Checks whether a reported GPS point lies inside a configured polygon
boundary using the even-odd ray casting rule. Missing location data is a
policy decision (``allow_without_location``), not an error.
"""

import logging
from typing import Any, Iterable, List, Mapping, Optional, Sequence, Union

from .models import (
    GeofenceConfig,
    GeoPoint,
    PolygonZone,
    RejectionReason,
    ValidationMode,
    ValidationOutcome,
    Vertex,
)

logger = logging.getLogger(__name__)

VertexLike = Union[Vertex, Mapping[str, float], Sequence[float]]

MSG_UNVERIFIED = "Attendance recorded without location validation (location access denied)."
MSG_LOCATION_REQUIRED = (
    "Location coordinates are required for polygon validation. "
    "Please enable location access and try again."
)
MSG_NO_BOUNDARY = "No polygon boundary configured for this attendance type."
MSG_OUTSIDE = "You are not within the allowed location boundary."
MSG_VERIFIED = "Location verified within polygon boundary."

HTTP_FORBIDDEN = 403
HTTP_UNPROCESSABLE = 422


def _to_vertex(vertex: VertexLike) -> Vertex:
    if isinstance(vertex, Vertex):
        return vertex
    if isinstance(vertex, Mapping):
        return Vertex(**vertex)
    lat, lng = vertex
    return Vertex(lat=lat, lng=lng)


def coerce_vertices(polygon: Optional[Iterable[VertexLike]]) -> List[Vertex]:
    """Convert Vertex objects, {"lat", "lng"} mappings or (lat, lng) pairs."""
    if not polygon:
        return []
    return [_to_vertex(vertex) for vertex in polygon]


def is_point_in_polygon(lat: float, lng: float, polygon: Sequence[Vertex]) -> bool:
    """Check if a point is inside a polygon using ray casting.

    The polygon is a closed ring; the last vertex connects back to the first.
    Convexity and winding order do not matter. Results for self-intersecting
    polygons are undefined.

    Args:
        lat: Point latitude (y)
        lng: Point longitude (x)
        polygon: Polygon vertices

    Returns:
        True if the point is inside
    """
    x = lng
    y = lat
    inside = False

    j = len(polygon) - 1
    for i in range(len(polygon)):
        vi = polygon[i]
        vj = polygon[j]
        if (vi.lat > y) != (vj.lat > y) and (
            x < (vj.lng - vi.lng) * (y - vi.lat) / (vj.lat - vi.lat) + vi.lng
        ):
            inside = not inside
        j = i

    return inside


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def coerce_geo_point(lat: Any, lng: Any) -> Optional[GeoPoint]:
    """Build a GeoPoint from request-supplied values.

    Strings and numbers are accepted. None or a blank string for either
    coordinate means no location was supplied.

    Raises:
        ValueError: If the coordinates are supplied but unparseable or out of
            range (pydantic.ValidationError for the latter)
    """
    if _is_blank(lat) or _is_blank(lng):
        return None

    try:
        lat, lng = float(lat), float(lng)
    except TypeError as e:
        raise ValueError(f"Unusable coordinates lat={lat!r} lng={lng!r}") from e

    return GeoPoint(lat=lat, lng=lng)


def _warn_if_invalid(zone: PolygonZone) -> None:
    shape = zone.to_shapely()
    if shape is not None and not shape.is_valid:
        logger.warning(
            f"Polygon {zone.name or zone.id or '<unnamed>'} is not a simple ring; "
            f"containment results are undefined"
        )


def _missing_location(allow_without_location: bool) -> ValidationOutcome:
    if allow_without_location:
        return ValidationOutcome.success(MSG_UNVERIFIED, verified=False)
    return ValidationOutcome.error(
        RejectionReason.LOCATION_REQUIRED,
        MSG_LOCATION_REQUIRED,
        status_code=HTTP_UNPROCESSABLE,
    )


def _no_boundary() -> ValidationOutcome:
    return ValidationOutcome.error(
        RejectionReason.NO_BOUNDARY_CONFIGURED,
        MSG_NO_BOUNDARY,
        status_code=HTTP_UNPROCESSABLE,
    )


def _outside() -> ValidationOutcome:
    return ValidationOutcome.error(
        RejectionReason.OUTSIDE_BOUNDARY,
        MSG_OUTSIDE,
        status_code=HTTP_FORBIDDEN,
    )


class GeofenceValidator:
    """Validates GPS points against polygon boundaries."""

    def validate(
        self,
        point: Optional[GeoPoint],
        polygon: Optional[Iterable[VertexLike]],
        allow_without_location: bool = False,
    ) -> ValidationOutcome:
        """Validate a point against a single polygon.

        Args:
            point: Reported position, or None if absent
            polygon: Boundary vertices
            allow_without_location: Accept (unverified) when point is absent

        Returns:
            ValidationOutcome
        """
        if point is None:
            return _missing_location(allow_without_location)

        vertices = coerce_vertices(polygon)
        if not vertices:
            return _no_boundary()

        _warn_if_invalid(PolygonZone(points=vertices))

        if not is_point_in_polygon(point.lat, point.lng, vertices):
            logger.debug(f"Point ({point.lat}, {point.lng}) outside boundary")
            return _outside()

        return ValidationOutcome.success(MSG_VERIFIED)

    def validate_config(
        self,
        config: GeofenceConfig,
        point: Optional[GeoPoint],
    ) -> ValidationOutcome:
        """Validate a point against every active zone of a configuration.

        In "any" mode the point must lie in at least one zone; in "all" mode
        it must lie in every zone.

        Args:
            config: Geofence configuration
            point: Reported position, or None if absent

        Returns:
            ValidationOutcome naming the matched zone where there is one
        """
        if point is None:
            return _missing_location(config.allow_without_location)

        zones = config.active_zones()
        if not zones:
            return _no_boundary()

        # Legacy single-polygon configs keep the single-polygon behavior
        if len(zones) == 1 and not config.polygons:
            return self.validate(point, zones[0].points, config.allow_without_location)

        matched = []
        for zone in zones:
            _warn_if_invalid(zone)
            if is_point_in_polygon(point.lat, point.lng, zone.points):
                matched.append(zone)

        if config.validation_mode == ValidationMode.ALL.value:
            if len(matched) != len(zones):
                return _outside()
            return ValidationOutcome.success(
                "Location verified within all configured boundaries."
            )

        if not matched:
            return _outside()

        name = matched[0].name
        if name:
            return ValidationOutcome.success(f"Location verified within {name}.", zone=name)
        return ValidationOutcome.success(MSG_VERIFIED)

    def validate_request(
        self,
        config: Union[GeofenceConfig, Mapping[str, Any]],
        lat: Any = None,
        lng: Any = None,
    ) -> ValidationOutcome:
        """Validate request-supplied coordinates against a raw configuration.

        Args:
            config: GeofenceConfig or the attendance type's config dict
            lat: Latitude from the request (string, number, or missing)
            lng: Longitude from the request (string, number, or missing)

        Returns:
            ValidationOutcome; supplied but unusable coordinates are
            rejected as outside the boundary

        Raises:
            pydantic.ValidationError: If config is malformed
        """
        if not isinstance(config, GeofenceConfig):
            config = GeofenceConfig(**config)

        try:
            point = coerce_geo_point(lat, lng)
        except ValueError as e:
            logger.info(f"Rejecting unusable coordinates lat={lat!r} lng={lng!r}: {e}")
            if not config.active_zones():
                return _no_boundary()
            return _outside()

        return self.validate_config(config, point)
