"""
Chainage (linear referencing) parsing, formatting and interval predicates.
"""

from .formatter import (
    chainage_to_float_km,
    format_chainage_for_display,
    format_meters,
    normalize_chainage_format,
)
from .intervals import point_in_range, ranges_overlap
from .location import LocationSpan, parse_location
from .parser import (
    extract_chainage,
    parse_chainage_to_meters,
    parse_multiple_chainages,
)

__all__ = [
    'LocationSpan',
    'chainage_to_float_km',
    'extract_chainage',
    'format_chainage_for_display',
    'format_meters',
    'normalize_chainage_format',
    'parse_chainage_to_meters',
    'parse_location',
    'parse_multiple_chainages',
    'point_in_range',
    'ranges_overlap',
]
