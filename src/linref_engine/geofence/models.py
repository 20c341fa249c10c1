"""
Pydantic models for geofence configuration and validation outcomes.
"""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field
from shapely.geometry import Polygon


class Vertex(BaseModel):
    """Polygon vertex."""
    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)


class GeoPoint(Vertex):
    """Reported GPS position."""


class PolygonZone(BaseModel):
    """Named polygon boundary."""

    id: Optional[str] = None
    name: Optional[str] = None
    points: List[Vertex] = Field(default_factory=list)
    is_active: bool = True

    def to_shapely(self) -> Optional[Polygon]:
        """Build a shapely Polygon (x=lng, y=lat), or None if fewer than 3 points."""
        if len(self.points) < 3:
            return None
        return Polygon([(point.lng, point.lat) for point in self.points])


class ValidationMode(str, Enum):
    """How multiple polygons combine."""
    ANY = "any"
    ALL = "all"


class GeofenceConfig(BaseModel):
    """Polygon section of an attendance type configuration.

    ``polygon`` is the single-boundary form; ``polygons`` holds named zones.
    When both are given, the single polygon is checked as an extra unnamed
    zone.
    """

    polygon: List[Vertex] = Field(default_factory=list)
    polygons: List[PolygonZone] = Field(default_factory=list)
    validation_mode: ValidationMode = ValidationMode.ANY
    allow_without_location: bool = False

    class Config:
        """Pydantic config."""
        use_enum_values = True

    def active_zones(self) -> List[PolygonZone]:
        """All active zones, the single polygon first."""
        zones = []
        if self.polygon:
            zones.append(PolygonZone(points=self.polygon))
        zones.extend(zone for zone in self.polygons if zone.is_active and zone.points)
        return zones


class RejectionReason(str, Enum):
    """Rejection reason codes."""
    LOCATION_REQUIRED = "location_required"
    NO_BOUNDARY_CONFIGURED = "no_boundary_configured"
    OUTSIDE_BOUNDARY = "outside_boundary"


class ValidationOutcome(BaseModel):
    """Accepted/rejected result of a geofence check.

    ``status_code`` is an HTTP-style hint; translating it into a response is
    left to the caller.
    """

    accepted: bool
    message: str
    reason: Optional[RejectionReason] = None
    status_code: int = 200
    verified: bool = False
    zone: Optional[str] = None

    class Config:
        """Pydantic config."""
        use_enum_values = True

    @property
    def status(self) -> str:
        return "success" if self.accepted else "error"

    @classmethod
    def success(
        cls,
        message: str,
        verified: bool = True,
        zone: Optional[str] = None,
    ) -> "ValidationOutcome":
        return cls(accepted=True, message=message, verified=verified, zone=zone)

    @classmethod
    def error(
        cls,
        reason: RejectionReason,
        message: str,
        status_code: int = 422,
    ) -> "ValidationOutcome":
        return cls(accepted=False, message=message, reason=reason, status_code=status_code)
