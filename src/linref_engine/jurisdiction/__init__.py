"""
Jurisdiction lookup by chainage.
"""

from .cache import InMemoryTTLCache, JurisdictionCache
from .models import Jurisdiction
from .resolver import (
    JurisdictionResolver,
    extract_chainage_bounds,
    find_jurisdiction_for_location,
)

__all__ = [
    'InMemoryTTLCache',
    'Jurisdiction',
    'JurisdictionCache',
    'JurisdictionResolver',
    'extract_chainage_bounds',
    'find_jurisdiction_for_location',
]
