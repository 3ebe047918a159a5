from .cabling import BOM_HEADER, CUTSHEET_HEADER, BomRow, CutsheetRow, PhysicalLink, PortAssignment, Sheet, SheetTable, Workbook
from .commit import AlreadyExists, CommitSummary, Created, Failed, UpsertResult
from .config import LINKS_PER_PAIR_DEFAULT, TopologyConfig
from .defaults import DefaultModels, FacilityDefaults
from .device import Device, FabricSwitch, GpuNode, MgmtSwitch, PatchPanel
from .facility import Datacenter, Hall, Rack, Row
from .gpu import GpuCluster
from .link import FabricLink, LinkEnd
from .preview import TopologyPreview

__all__ = [
    "AlreadyExists",
    "BOM_HEADER",
    "BomRow",
    "CUTSHEET_HEADER",
    "CommitSummary",
    "Created",
    "CutsheetRow",
    "Datacenter",
    "DefaultModels",
    "Device",
    "FabricLink",
    "FabricSwitch",
    "FacilityDefaults",
    "Failed",
    "GpuCluster",
    "GpuNode",
    "Hall",
    "LINKS_PER_PAIR_DEFAULT",
    "LinkEnd",
    "MgmtSwitch",
    "PatchPanel",
    "PhysicalLink",
    "PortAssignment",
    "Rack",
    "Row",
    "Sheet",
    "SheetTable",
    "TopologyConfig",
    "TopologyPreview",
    "UpsertResult",
    "Workbook",
]
