"""
Pydantic model for jurisdiction records.

Jurisdictions are owned by the surrounding application; this package only
reads snapshots of them.
"""

from typing import Any, Optional, Union

import pandas as pd
from pydantic import BaseModel


class Jurisdiction(BaseModel):
    """Administrative chainage range assigned to a responsible party."""

    id: Optional[int] = None
    location: Optional[str] = None
    start_chainage: str
    end_chainage: str
    incharge: Optional[Union[int, str]] = None

    class Config:
        """Pydantic config."""
        frozen = True

    @classmethod
    def from_row(cls, row: Any) -> "Jurisdiction":
        """Create Jurisdiction from a mapping-like row (dict, pandas Series).

        Missing, blank, NaN or NA optional fields become None.
        """
        def value(key):
            try:
                item = row[key]
            except (KeyError, IndexError):
                return None
            # NaN/NA from pandas, blank cells from string-typed frames
            if pd.api.types.is_scalar(item) and pd.isna(item):
                return None
            if isinstance(item, str) and not item:
                return None
            # numpy scalar -> python
            if hasattr(item, "item"):
                item = item.item()
            return item

        raw_id = value("id")

        return cls(
            id=int(raw_id) if raw_id is not None else None,
            location=value("location"),
            start_chainage=str(value("start_chainage") or ""),
            end_chainage=str(value("end_chainage") or ""),
            incharge=value("incharge"),
        )
