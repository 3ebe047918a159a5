from typing import List, Optional

from fabric_core.models.cabling import CutsheetRow, PhysicalLink, PortAssignment
from fabric_core.models.preview import TopologyPreview

from fabric_tools.cabling.common import round_cable_length
from fabric_tools.cabling.ports import physical_links


def cutsheet_row(link: PhysicalLink) -> CutsheetRow:
    return CutsheetRow(
        a_hostname=link.a_device,
        a_interface=link.a_port,
        a_patch_panel=link.patch_panel_a or "",
        a_pp_port=link.patch_panel_a_port or "",
        b_hostname=link.b_device,
        b_interface=link.b_port,
        b_patch_panel=link.patch_panel_b or "",
        b_pp_port=link.patch_panel_b_port or "",
        cable_length_m=round_cable_length(link.cable_length_meters),
    )


def build_cutsheet(preview: TopologyPreview, assignments: Optional[List[PortAssignment]] = None) -> List[CutsheetRow]:
    """One row per physical cable, with the standard length to pull."""
    return [cutsheet_row(link) for link in physical_links(preview, assignments)]
