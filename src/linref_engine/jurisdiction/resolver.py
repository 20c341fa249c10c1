"""
Jurisdiction resolution for free-text locations.

Finds the jurisdiction whose chainage range contains a location such as
"K30+560-K30+570", "K24+800" or "K13 TOLL STATION". Matching is done on
float kilometers and only recognizes tokens containing a literal ``K``.
"""

import logging
import re
from typing import Callable, List, Optional, Sequence, Tuple

import pandas as pd
from tqdm import tqdm

from ..chainage.formatter import chainage_to_float_km
from .cache import InMemoryTTLCache, JurisdictionCache
from .models import Jurisdiction

logger = logging.getLogger(__name__)

DEFAULT_CACHE_KEY = "jurisdictions_all"
DEFAULT_CACHE_TTL = 300

_K_TOKEN = r"[A-Z]*K[0-9]+(?:\+[0-9]+(?:\.[0-9]+)?)?"
_LOCATION_RE = re.compile(rf"({_K_TOKEN})\s*-\s*({_K_TOKEN})|({_K_TOKEN})")


def extract_chainage_bounds(location: str) -> Tuple[Optional[str], Optional[str]]:
    """Extract start and optional end K-chainage from free text.

    Returns:
        Tuple of (start, end); (None, None) when no K-chainage is present
    """
    match = _LOCATION_RE.search(location)
    if not match:
        return None, None

    start = match.group(1) or match.group(3)
    end = match.group(2) or None
    return start, end


def _contains(jurisdiction_start: float, jurisdiction_end: float, value: float) -> bool:
    return jurisdiction_start <= value <= jurisdiction_end


def find_jurisdiction_for_location(
    location: str,
    jurisdictions: Sequence[Jurisdiction],
    log: Optional[logging.Logger] = None,
) -> Optional[Jurisdiction]:
    """Find the jurisdiction governing a location.

    The first jurisdiction (in list order) containing the start chainage,
    or the end chainage when the location is a range, wins.

    Args:
        location: Free-text location
        jurisdictions: Jurisdictions to scan, in priority order
        log: Logger for match diagnostics (default: module logger)

    Returns:
        Matching Jurisdiction, or None

    Raises:
        ValueError: If jurisdictions is None instead of a sequence
    """
    if jurisdictions is None:
        raise ValueError("jurisdictions must be a sequence; pass [] for none")

    log = log or logger

    start_chainage, end_chainage = extract_chainage_bounds(location or "")
    if not start_chainage:
        log.debug(f"No chainage pattern found in location: {location!r}")
        return None

    start_km = chainage_to_float_km(start_chainage)
    end_km = chainage_to_float_km(end_chainage) if end_chainage else None

    for jurisdiction in jurisdictions:
        jurisdiction_start = chainage_to_float_km(jurisdiction.start_chainage)
        jurisdiction_end = chainage_to_float_km(jurisdiction.end_chainage)

        if _contains(jurisdiction_start, jurisdiction_end, start_km):
            log.debug(
                f"Start chainage of {location!r} in jurisdiction "
                f"{jurisdiction_start:.3f}-{jurisdiction_end:.3f}"
            )
            return jurisdiction

        # K0 (0.0) end values are ignored
        if end_km and _contains(jurisdiction_start, jurisdiction_end, end_km):
            log.debug(
                f"End chainage of {location!r} in jurisdiction "
                f"{jurisdiction_start:.3f}-{jurisdiction_end:.3f}"
            )
            return jurisdiction

    log.debug(f"No jurisdiction found for location: {location!r}")
    return None


class JurisdictionResolver:
    """Resolves locations to jurisdictions through a TTL-cached list."""

    def __init__(
        self,
        fetch_all: Callable[[], List[Jurisdiction]],
        cache: Optional[JurisdictionCache] = None,
        ttl_seconds: float = DEFAULT_CACHE_TTL,
        cache_key: str = DEFAULT_CACHE_KEY,
        log: Optional[logging.Logger] = None,
    ):
        """Initialize resolver.

        Args:
            fetch_all: Callable returning all jurisdictions from the data source
            cache: Cache implementation (default: new InMemoryTTLCache)
            ttl_seconds: Time-to-live for the cached list (default: 300)
            cache_key: Fixed key the list is cached under
            log: Logger for match diagnostics (default: module logger)
        """
        self.fetch_all = fetch_all
        self.cache = cache if cache is not None else InMemoryTTLCache()
        self.ttl_seconds = ttl_seconds
        self.cache_key = cache_key
        self.log = log or logger

    def get_jurisdictions(self) -> List[Jurisdiction]:
        """Get all jurisdictions, populating the cache on miss or expiry."""
        return self.cache.remember(
            self.cache_key,
            self.ttl_seconds,
            lambda: list(self.fetch_all()),
        )

    def clear_jurisdiction_cache(self) -> None:
        """Invalidate the cached list. Call after jurisdiction data changes."""
        self.cache.forget(self.cache_key)

    def find_for_location(self, location: str) -> Optional[Jurisdiction]:
        """Find the jurisdiction governing a location using the cached list.

        Args:
            location: Free-text location

        Returns:
            Matching Jurisdiction, or None
        """
        return find_jurisdiction_for_location(
            location, self.get_jurisdictions(), log=self.log
        )

    def assign_jurisdictions(
        self,
        works_df: pd.DataFrame,
        location_column: str = "location",
        jurisdictions: Optional[Sequence[Jurisdiction]] = None,
        progress: bool = False,
    ) -> pd.DataFrame:
        """Add jurisdiction columns to a DataFrame of daily-work records.

        Adds ``jurisdiction_id``, ``jurisdiction_range`` and ``incharge``
        columns (None where no jurisdiction matched).

        Args:
            works_df: Records with a location column
            location_column: Name of the location column (default: "location")
            jurisdictions: Jurisdictions to scan (default: cached list)
            progress: Show a tqdm progress bar

        Returns:
            Copy of works_df with jurisdiction columns

        Raises:
            KeyError: If the location column is missing
        """
        if location_column not in works_df.columns:
            raise KeyError(f"Work data has no '{location_column}' column")

        if jurisdictions is None:
            jurisdictions = self.get_jurisdictions()

        locations = works_df[location_column]
        if progress:
            locations = tqdm(locations, total=len(works_df), desc="Assigning jurisdictions")

        ids, ranges, incharges = [], [], []
        for location in locations:
            match = None
            if isinstance(location, str) and location:
                match = find_jurisdiction_for_location(location, jurisdictions, log=self.log)

            ids.append(match.id if match else None)
            ranges.append(f"{match.start_chainage}-{match.end_chainage}" if match else None)
            incharges.append(match.incharge if match else None)

        result = works_df.copy()
        result["jurisdiction_id"] = pd.Series(ids, index=works_df.index, dtype="object")
        result["jurisdiction_range"] = pd.Series(ranges, index=works_df.index, dtype="object")
        result["incharge"] = pd.Series(incharges, index=works_df.index, dtype="object")

        matched = sum(1 for value in ranges if value is not None)
        logger.info(f"Assigned jurisdictions to {matched} of {len(works_df)} records")

        return result
