"""
Linear-referencing and geofence matching engine.

Provides:
- chainage parsing, range resolution and formatting
- objection / RFI location matching
- jurisdiction lookup by chainage with a TTL-cached jurisdiction list
- polygon geofence validation
"""

from .chainage import (
    LocationSpan,
    chainage_to_float_km,
    normalize_chainage_format,
    parse_chainage_to_meters,
    parse_location,
    point_in_range,
    ranges_overlap,
)
from .geofence import GeofenceConfig, GeofenceValidator, GeoPoint, ValidationOutcome
from .jurisdiction import InMemoryTTLCache, Jurisdiction, JurisdictionResolver
from .matching import (
    ObjectionLocation,
    does_objection_match_rfi,
    does_rfi_match_objection,
)

__version__ = "0.1.0"

__all__ = [
    'GeoPoint',
    'GeofenceConfig',
    'GeofenceValidator',
    'InMemoryTTLCache',
    'Jurisdiction',
    'JurisdictionResolver',
    'LocationSpan',
    'ObjectionLocation',
    'ValidationOutcome',
    'chainage_to_float_km',
    'does_objection_match_rfi',
    'does_rfi_match_objection',
    'normalize_chainage_format',
    'parse_chainage_to_meters',
    'parse_location',
    'point_in_range',
    'ranges_overlap',
]
