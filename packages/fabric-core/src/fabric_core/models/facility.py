# fabric_core/models/facility.py
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

RackType = Literal["spine", "leaf"]


class Rack(BaseModel):
    """A rack slot in a row. ``index`` is global across the facility."""

    model_config = ConfigDict(extra="ignore", frozen=True)
    index: int
    name: str
    hall: int
    row: int
    position_in_row: int  # 0-based column, spine rack included
    rack_type: RackType
    width_cm: int = 60
    height_ru: int = 42
    depth_cm: int = 100
    capacity: int = 0

    @property
    def row_key(self) -> tuple[int, int]:
        return self.hall, self.row


class Row(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)
    number: int
    name: str
    racks: List[Rack] = Field(default_factory=list)


class Hall(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)
    number: int
    name: str
    rows: List[Row] = Field(default_factory=list)


class Datacenter(BaseModel):
    """Containment root: Datacenter > Hall > Row > Rack."""

    model_config = ConfigDict(extra="ignore", frozen=True)
    name: str
    datacenter_id: Optional[int] = None
    halls: List[Hall] = Field(default_factory=list)

    @property
    def racks(self) -> List[Rack]:
        return [rack for hall in self.halls for row in hall.rows for rack in row.racks]


def hall_name(hall: int) -> str:
    return f"Hall {hall}"


def row_name(hall: int, row: int) -> str:
    return f"Hall {hall} Row {row}"
