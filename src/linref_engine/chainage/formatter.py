"""
Chainage formatting.

Two representations are produced here:
- canonical display form ``K##+###`` built from the prefix-agnostic parser
- float kilometers (``K05+900`` -> 5.9) used by jurisdiction matching, which
  only recognizes tokens containing a literal ``K``
"""

import re
from typing import Optional

from .parser import parse_chainage_to_meters

_K_TOKEN_RE = re.compile(r"K(\d+)(?:\+(\d+(?:\.\d+)?))?")


def format_meters(meters: int) -> str:
    """Render meters as ``K##+###``."""
    km, m = divmod(meters, 1000)
    return f"K{km:02d}+{m:03d}"


def normalize_chainage_format(chainage: Optional[str]) -> Optional[str]:
    """Normalize any chainage notation to ``K##+###``.

    The output always uses the prefix ``K``, whatever prefix the input had.

    Examples:
        "KM35+897"    -> "K35+897"
        "35+500"      -> "K35+500"
        "K5+1-RHS"    -> "K05+100"
    """
    meters = parse_chainage_to_meters(chainage)
    if meters is None:
        return None
    return format_meters(meters)


def chainage_to_float_km(chainage: Optional[str]) -> float:
    """Convert a K-chainage to float kilometers.

    Examples:
        "K05+900" -> 5.9
        "K30+560" -> 30.56
        "K13"     -> 13.0

    Returns 0.0 when no ``K<digits>`` token is present.
    """
    if not chainage:
        return 0.0

    match = _K_TOKEN_RE.search(chainage.strip().upper())
    if not match:
        return 0.0

    km = int(match.group(1))
    additional = float(match.group(2)) if match.group(2) else 0.0
    return km + additional / 1000


def format_chainage_for_display(chainage: str) -> str:
    """Format a K-chainage as ``K##+###`` without digit-count normalization.

    Decimal meters are truncated. Input without a ``K<digits>`` token is
    returned uppercased and trimmed.
    """
    cleaned = chainage.strip().upper()

    match = _K_TOKEN_RE.search(cleaned)
    if not match:
        return cleaned

    km = int(match.group(1))
    additional = int(float(match.group(2))) if match.group(2) else 0
    return f"K{km:02d}+{additional:03d}"
