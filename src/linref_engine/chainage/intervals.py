"""Point and interval predicates over chainage meters. Bounds are inclusive."""

from typing import Tuple


def _ordered(start: int, end: int) -> Tuple[int, int]:
    return (start, end) if start <= end else (end, start)


def point_in_range(point: int, range_start: int, range_end: int) -> bool:
    """Check if a point lies within a range, whatever order the bounds are in."""
    range_start, range_end = _ordered(range_start, range_end)
    return range_start <= point <= range_end


def ranges_overlap(start1: int, end1: int, start2: int, end2: int) -> bool:
    """Check if two ranges overlap. Touching endpoints count as overlapping."""
    start1, end1 = _ordered(start1, end1)
    start2, end2 = _ordered(start2, end2)
    return start1 <= end2 and start2 <= end1
