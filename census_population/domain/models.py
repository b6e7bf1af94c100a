"""
Domain models for the census population extract.

`Record` is the single normalized row emitted for both states and counties.
`ResponseRow` wraps one decoded row of the Census API's JSON table so that
column access is bounds-checked in one place.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple

from pydantic import BaseModel, Field


class GeographyKind(str, Enum):
    """Geography levels the extract knows how to query."""

    STATE = "state"
    COUNTY = "county"


class Record(BaseModel):
    """
    Population value for one state or county.
    """

    identifier: str = Field(..., min_length=1, description="GEOID: 2 digits (state) or 5 (county).")
    name: str = Field(..., min_length=1, description="Human-readable location name.")
    kind: GeographyKind = Field(..., description="Geography level the record came from.")
    population: str = Field("", description="Population exactly as reported by the source.")

    model_config = {
        "frozen": True,
        "populate_by_name": True,
        "arbitrary_types_allowed": False,
    }

    def as_row(self) -> List[str]:
        """Column values in output order: geoid, name, type, population."""
        return [self.identifier, self.name, self.kind.value, self.population]


@dataclass(frozen=True)
class ResponseRow:
    """
    One data row of an API response, with positional accessors.
    """

    cells: Tuple[str, ...]

    @property
    def width(self) -> int:
        return len(self.cells)

    def has_columns(self, count: int) -> bool:
        return self.width >= count

    def column(self, index: int) -> Optional[str]:
        """Return the cell at `index`, or None when the row is too short."""
        if 0 <= index < self.width:
            return self.cells[index]
        return None


__all__ = ["GeographyKind", "Record", "ResponseRow"]
