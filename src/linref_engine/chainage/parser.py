"""
Chainage parsing utilities.

Converts human-written chainage notations into integer meters from the route
origin. Any alphabetic prefix is accepted (K, KM, SCK, DZ, CK, ZK, ...) and
trailing side indicators are ignored.

Examples:
    K35+897        -> 35897
    K5+100         -> 5100
    K35+897-RHS    -> 35897
    SCK0+260       -> 260
    CK0+189.220    -> 189 (decimal truncated)
    K14+036.00     -> 14036
    35.897         -> 35897
    35             -> 35000
"""

import logging
import re
from typing import List, Optional

logger = logging.getLogger(__name__)

SIDE_INDICATORS = (
    "RHS", "LHS", "R", "L", "LEFT", "RIGHT", "SR", "TR", "CL", "CENTER", "CENTRE",
)

_SIDE_SUFFIX_RE = re.compile(
    r"[\-\s]*(?:" + "|".join(SIDE_INDICATORS) + r")\s*$", re.IGNORECASE
)
_PREFIX_RE = re.compile(r"^[A-Z]+\s*", re.IGNORECASE)
_PLUS_RE = re.compile(r"^(\d+)\+(\d+)(?:\.(\d+))?$")
_DOT_RE = re.compile(r"^(\d+)\.(\d{3})$")
_BARE_RE = re.compile(r"^(\d+)$")
_EXTRACT_RE = re.compile(r"([A-Z]*\d+(?:\+\d+)?)", re.IGNORECASE)
_LIST_SPLIT_RE = re.compile(r"\s*,\s*")

MAX_METERS = 999


def strip_side_indicator(cleaned: str) -> str:
    """Remove a trailing side indicator such as ``-RHS`` or `` LEFT``."""
    return _SIDE_SUFFIX_RE.sub("", cleaned)


def strip_prefix(cleaned: str) -> str:
    """Remove any leading alphabetic prefix (K, KM, SCK, DZ, ...)."""
    return _PREFIX_RE.sub("", cleaned)


def normalize_meter_group(digits: str) -> int:
    """Scale a meter group by its digit count.

    A single digit means hundreds (``+5`` is ``+500``), two digits mean tens
    (``+50`` is ``+500``); three or more digits are taken as-is. The result is
    clamped to 999, so ``+1000`` becomes 999.
    """
    meters = int(digits)
    if len(digits) == 1:
        meters *= 100
    elif len(digits) == 2:
        meters *= 10
    return min(meters, MAX_METERS)


def match_plus_notation(cleaned: str) -> Optional[int]:
    """Match ``<km>+<meters>[.<decimal>]``. The decimal part is ignored."""
    match = _PLUS_RE.match(cleaned)
    if not match:
        return None
    km = int(match.group(1))
    return km * 1000 + normalize_meter_group(match.group(2))


def match_dot_notation(cleaned: str) -> Optional[int]:
    """Match ``<km>.<mmm>`` where the dot stands in for ``+``."""
    match = _DOT_RE.match(cleaned)
    if not match:
        return None
    km = int(match.group(1))
    meters = int(match.group(2))
    return km * 1000 + min(meters, MAX_METERS)


def match_bare_kilometers(cleaned: str) -> Optional[int]:
    """Match a bare integer, read as whole kilometers."""
    match = _BARE_RE.match(cleaned)
    if not match:
        return None
    return int(match.group(1)) * 1000


def split_chainage_list(chainages: str) -> List[str]:
    """Split a comma-separated chainage list, dropping blank parts."""
    return [part for part in _LIST_SPLIT_RE.split(chainages.strip()) if part]


def clean_chainage(chainage: str) -> str:
    """Uppercase, trim, and strip side indicator and prefix."""
    cleaned = chainage.strip().upper()
    cleaned = strip_side_indicator(cleaned)
    return strip_prefix(cleaned)


def parse_chainage_to_meters(
    chainage: Optional[str],
    log: Optional[logging.Logger] = None,
) -> Optional[int]:
    """Parse a single chainage token to meters.

    Args:
        chainage: Chainage string (e.g. "K35+897-RHS")
        log: Logger receiving parse failures (default: module logger)

    Returns:
        Meters from origin, or None if the token cannot be parsed
    """
    if not chainage:
        return None

    cleaned = clean_chainage(chainage)

    for matcher in (match_plus_notation, match_dot_notation, match_bare_kilometers):
        meters = matcher(cleaned)
        if meters is not None:
            return meters

    (log or logger).debug(
        f"Failed to parse chainage: input={chainage!r} cleaned={cleaned!r}"
    )
    return None


def parse_multiple_chainages(
    chainages: Optional[str],
    log: Optional[logging.Logger] = None,
) -> List[int]:
    """Parse a comma-separated list of chainages.

    Invalid entries are dropped and duplicates removed, keeping the order in
    which values first appear.

    Example:
        "K35+897, K36+987, K40+200-RHS" -> [35897, 36987, 40200]
    """
    if not chainages:
        return []

    result: List[int] = []
    for part in split_chainage_list(chainages):
        meters = parse_chainage_to_meters(part, log=log)
        if meters is not None and meters not in result:
            result.append(meters)

    return result


def extract_chainage(location: Optional[str]) -> Optional[str]:
    """Pull the first chainage-like token out of free text.

    Example:
        "Drain at zk27+612 rhs" -> "ZK27+612"
    """
    if not location:
        return None

    match = _EXTRACT_RE.search(location)
    if match:
        return match.group(1).upper()

    return None
