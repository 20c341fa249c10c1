"""
Polygon geofence validation for attendance check-ins.
"""

from .models import (
    GeofenceConfig,
    GeoPoint,
    PolygonZone,
    RejectionReason,
    ValidationMode,
    ValidationOutcome,
    Vertex,
)
from .validator import (
    GeofenceValidator,
    coerce_geo_point,
    coerce_vertices,
    is_point_in_polygon,
)

__all__ = [
    'GeofenceConfig',
    'GeoPoint',
    'GeofenceValidator',
    'PolygonZone',
    'RejectionReason',
    'ValidationMode',
    'ValidationOutcome',
    'Vertex',
    'coerce_geo_point',
    'coerce_vertices',
    'is_point_in_polygon',
]
