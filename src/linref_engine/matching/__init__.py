"""
Objection / RFI chainage matching.
"""

from .models import ChainageEntry, EntryType, ObjectionLocation
from .objection_matcher import (
    does_objection_match_rfi,
    does_rfi_match_objection,
    find_matching_rfis,
    objection_matches_rfi_location,
)

__all__ = [
    'ChainageEntry',
    'EntryType',
    'ObjectionLocation',
    'does_objection_match_rfi',
    'does_rfi_match_objection',
    'find_matching_rfis',
    'objection_matches_rfi_location',
]
