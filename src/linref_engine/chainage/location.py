"""
Location string resolution.

A location is either a single chainage ("K35+897") or a range of two
chainages joined by a hyphen, en-dash, em-dash or tilde
("K35+560-K36+120", "SCK0+260 – SCK0+290", "K35+500~K36+500").
"""

import logging
import re
from dataclasses import dataclass
from typing import Optional

from .parser import parse_chainage_to_meters

_TOKEN = r"[A-Z]*\d+[\+\.]\d+(?:\.\d+)?"
_RANGE_RE = re.compile(
    rf"^({_TOKEN})\s*[\-–—~]\s*({_TOKEN})", re.IGNORECASE
)


@dataclass(frozen=True)
class LocationSpan:
    """Parsed location in meters.

    When ``is_range`` is True both bounds are set and ``start <= end``.
    Otherwise the span is a single point at ``start``, which is None when the
    location could not be parsed.
    """
    start: Optional[int] = None
    end: Optional[int] = None
    is_range: bool = False

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {"start": self.start, "end": self.end, "is_range": self.is_range}


def parse_location(
    location: Optional[str],
    log: Optional[logging.Logger] = None,
) -> LocationSpan:
    """Parse a location that may be a single chainage or a range.

    Range detection runs first; parsing a range string as a point would only
    read its first token.

    Args:
        location: Location string
        log: Logger receiving parse failures (default: module logger)

    Returns:
        LocationSpan
    """
    if not location:
        return LocationSpan()

    cleaned = location.strip().upper()

    match = _RANGE_RE.match(cleaned)
    if match:
        start = parse_chainage_to_meters(match.group(1), log=log)
        end = parse_chainage_to_meters(match.group(2), log=log)
        is_range = start is not None and end is not None

        if is_range and start > end:
            start, end = end, start

        return LocationSpan(start=start, end=end, is_range=is_range)

    return LocationSpan(start=parse_chainage_to_meters(location, log=log))
