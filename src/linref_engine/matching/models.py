"""
Pydantic models for objection chainage entries.
"""

from enum import Enum
from typing import List, Optional, Set

from pydantic import BaseModel, Field

from ..chainage.parser import parse_chainage_to_meters, split_chainage_list


class EntryType(str, Enum):
    """Chainage entry type enumeration."""
    SPECIFIC = "specific"
    RANGE_START = "range_start"
    RANGE_END = "range_end"


class ChainageEntry(BaseModel):
    """A single chainage recorded against an objection."""

    chainage: str
    chainage_meters: int = Field(..., ge=0)
    entry_type: EntryType = EntryType.SPECIFIC

    class Config:
        """Pydantic config."""
        use_enum_values = True

    @classmethod
    def from_string(
        cls,
        chainage: str,
        entry_type: EntryType = EntryType.SPECIFIC,
    ) -> Optional["ChainageEntry"]:
        """Create an entry from a chainage string.

        Args:
            chainage: Chainage string (e.g. "K35+897")
            entry_type: Entry type

        Returns:
            ChainageEntry, or None if the chainage cannot be parsed
        """
        meters = parse_chainage_to_meters(chainage)
        if meters is None:
            return None

        return cls(
            chainage=chainage.strip(),
            chainage_meters=meters,
            entry_type=entry_type,
        )


class ObjectionLocation(BaseModel):
    """Location of a filed objection.

    Specific chainages and the range are independent; either, both or
    neither may be present.
    """

    entries: List[ChainageEntry] = Field(default_factory=list)

    class Config:
        """Pydantic config."""
        use_enum_values = True

    @classmethod
    def from_strings(
        cls,
        specific: Optional[str] = None,
        range_from: Optional[str] = None,
        range_to: Optional[str] = None,
    ) -> "ObjectionLocation":
        """Build from a comma-separated specific list and an optional range.

        Unparseable chainages are skipped.

        Args:
            specific: Comma-separated chainages (e.g. "K35+897, K36+987")
            range_from: Range start chainage
            range_to: Range end chainage
        """
        entries = []

        if specific:
            for part in split_chainage_list(specific):
                entry = ChainageEntry.from_string(part, EntryType.SPECIFIC)
                if entry:
                    entries.append(entry)

        if range_from and range_to:
            for chainage, entry_type in (
                (range_from, EntryType.RANGE_START),
                (range_to, EntryType.RANGE_END),
            ):
                entry = ChainageEntry.from_string(chainage, entry_type)
                if entry:
                    entries.append(entry)

        return cls(entries=entries)

    def _first(self, entry_type: EntryType) -> Optional[ChainageEntry]:
        for entry in self.entries:
            if entry.entry_type == entry_type.value:
                return entry
        return None

    @property
    def specific_meters(self) -> Set[int]:
        """Meters of all specific chainages."""
        return {
            entry.chainage_meters
            for entry in self.entries
            if entry.entry_type == EntryType.SPECIFIC.value
        }

    @property
    def range_start(self) -> Optional[int]:
        entry = self._first(EntryType.RANGE_START)
        return entry.chainage_meters if entry else None

    @property
    def range_end(self) -> Optional[int]:
        entry = self._first(EntryType.RANGE_END)
        return entry.chainage_meters if entry else None

    def matches_rfi_location(self, rfi_location: Optional[str]) -> bool:
        """Check if this objection matches an RFI location string."""
        from .objection_matcher import objection_matches_rfi_location

        return objection_matches_rfi_location(self, rfi_location)

    def chainage_summary(self) -> dict:
        """Summarize chainages for display.

        Returns:
            Dict with "specific" (raw strings) and "range" ("FROM - TO" or None)
        """
        specific = [
            entry.chainage
            for entry in self.entries
            if entry.entry_type == EntryType.SPECIFIC.value
        ]

        start = self._first(EntryType.RANGE_START)
        end = self._first(EntryType.RANGE_END)
        range_text = f"{start.chainage} - {end.chainage}" if start and end else None

        return {"specific": specific, "range": range_text}
