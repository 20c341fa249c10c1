"""
Objection / RFI location matching.

Handles every combination of objection and RFI location:
- objection specific point vs RFI point (exact match)
- objection specific point vs RFI range (point in range)
- objection range vs RFI point (point in range)
- objection range vs RFI range (ranges overlap)
"""

import logging
from typing import Iterable, Optional

import pandas as pd

from ..chainage.intervals import point_in_range, ranges_overlap
from ..chainage.location import parse_location
from .models import ObjectionLocation

logger = logging.getLogger(__name__)


def does_objection_match_rfi(
    objection_specific_meters: Iterable[int],
    objection_range_start: Optional[int],
    objection_range_end: Optional[int],
    rfi_location: Optional[str],
    log: Optional[logging.Logger] = None,
) -> bool:
    """Check if an objection's chainages match an RFI location.

    Args:
        objection_specific_meters: Specific chainages in meters
        objection_range_start: Objection range start (None if no range)
        objection_range_end: Objection range end (None if no range)
        rfi_location: RFI location string (point or range)
        log: Logger receiving parse failures (default: module logger)

    Returns:
        True if any specific chainage or the range matches
    """
    rfi = parse_location(rfi_location, log=log)

    if rfi.start is None:
        return False

    for specific in objection_specific_meters:
        if rfi.is_range:
            if point_in_range(specific, rfi.start, rfi.end):
                return True
        elif specific == rfi.start:
            return True

    if objection_range_start is not None and objection_range_end is not None:
        if rfi.is_range:
            if ranges_overlap(objection_range_start, objection_range_end, rfi.start, rfi.end):
                return True
        elif point_in_range(rfi.start, objection_range_start, objection_range_end):
            return True

    return False


def does_rfi_match_objection(
    rfi_location: Optional[str],
    objection_specific_meters: Iterable[int],
    objection_range_start: Optional[int],
    objection_range_end: Optional[int],
    log: Optional[logging.Logger] = None,
) -> bool:
    """Reverse-direction form of does_objection_match_rfi (same relation)."""
    return does_objection_match_rfi(
        objection_specific_meters,
        objection_range_start,
        objection_range_end,
        rfi_location,
        log=log,
    )


def objection_matches_rfi_location(
    objection: ObjectionLocation,
    rfi_location: Optional[str],
) -> bool:
    """Check an ObjectionLocation against an RFI location string."""
    if not rfi_location:
        return False

    return does_objection_match_rfi(
        objection.specific_meters,
        objection.range_start,
        objection.range_end,
        rfi_location,
    )


def find_matching_rfis(
    objection: ObjectionLocation,
    rfis_df: pd.DataFrame,
    location_column: str = "location",
) -> pd.DataFrame:
    """Filter a DataFrame of RFIs down to those matching an objection.

    Args:
        objection: Objection location
        rfis_df: RFI records with a location column
        location_column: Name of the location column (default: "location")

    Returns:
        Matching rows, original index preserved

    Raises:
        KeyError: If the location column is missing
    """
    if location_column not in rfis_df.columns:
        raise KeyError(f"RFI data has no '{location_column}' column")

    if rfis_df.empty:
        return rfis_df.copy()

    specific = objection.specific_meters
    range_start = objection.range_start
    range_end = objection.range_end

    mask = rfis_df[location_column].map(
        lambda location: isinstance(location, str)
        and bool(location)
        and does_objection_match_rfi(specific, range_start, range_end, location)
    ).astype(bool)

    matched = rfis_df[mask]
    logger.info(f"Matched {len(matched)} of {len(rfis_df)} RFIs")

    return matched.copy()
