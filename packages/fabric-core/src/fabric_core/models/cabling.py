# fabric_core/models/cabling.py
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

BomCategory = Literal["Device", "Cable", "Optic", "Management"]

BOM_HEADER = ["Category", "Item", "Specification", "Quantity", "Unit Length", "Notes"]
CUTSHEET_HEADER = [
    "Side A Hostname",
    "Side A Interface",
    "Side A Patch Panel",
    "Side A PP Port",
    "Side B Hostname",
    "Side B Interface",
    "Side B Patch Panel",
    "Side B PP Port",
    "Cable Length (m)",
]


class BomRow(BaseModel):
    """One aggregated bill-of-materials line."""

    model_config = ConfigDict(extra="ignore", frozen=True)
    category: BomCategory
    item: str
    specification: str = ""
    quantity: int
    unit_length: str = ""
    notes: str = ""

    def as_row(self) -> list:
        return [self.category, self.item, self.specification, self.quantity, self.unit_length, self.notes]


class PortAssignment(BaseModel):
    """A port as seen from one device; every physical link yields two of these."""

    model_config = ConfigDict(extra="ignore", frozen=True)
    device: str
    port: str
    remote_device: str
    remote_port: str
    patch_panel_a: Optional[str] = None
    patch_panel_a_port: Optional[str] = None
    patch_panel_b: Optional[str] = None
    patch_panel_b_port: Optional[str] = None
    cable_length_meters: Optional[float] = None
    link_class: str = "fabric"

    def dedup_key(self) -> tuple[tuple[str, str], tuple[str, str]]:
        ends = sorted([(self.device, self.port), (self.remote_device, self.remote_port)])
        return ends[0], ends[1]


class PhysicalLink(BaseModel):
    """A de-duplicated physical cable run, oriented as it was first seen."""

    model_config = ConfigDict(extra="ignore", frozen=True)
    a_device: str
    a_port: str
    b_device: str
    b_port: str
    patch_panel_a: Optional[str] = None
    patch_panel_a_port: Optional[str] = None
    patch_panel_b: Optional[str] = None
    patch_panel_b_port: Optional[str] = None
    cable_length_meters: Optional[float] = None
    link_class: str = "fabric"


class CutsheetRow(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)
    a_hostname: str
    a_interface: str
    a_patch_panel: str = ""
    a_pp_port: str = ""
    b_hostname: str
    b_interface: str
    b_patch_panel: str = ""
    b_pp_port: str = ""
    cable_length_m: float

    def as_row(self) -> list:
        return [
            self.a_hostname,
            self.a_interface,
            self.a_patch_panel,
            self.a_pp_port,
            self.b_hostname,
            self.b_interface,
            self.b_patch_panel,
            self.b_pp_port,
            self.cable_length_m,
        ]


class SheetTable(BaseModel):
    model_config = ConfigDict(extra="ignore")
    title: str = ""
    header: List[str] = Field(default_factory=list)
    rows: List[list] = Field(default_factory=list)


class Sheet(BaseModel):
    """A named worksheet holding one or more stacked tables."""

    model_config = ConfigDict(extra="ignore")
    title: str
    tables: List[SheetTable] = Field(default_factory=list)

    def table(self, title: str) -> SheetTable:
        for t in self.tables:
            if t.title == title:
                return t
        raise KeyError(title)


class Workbook(BaseModel):
    model_config = ConfigDict(extra="ignore")
    title: str
    sheets: List[Sheet] = Field(default_factory=list)

    def sheet(self, title: str) -> Sheet:
        for s in self.sheets:
            if s.title == title:
                return s
        raise KeyError(title)
