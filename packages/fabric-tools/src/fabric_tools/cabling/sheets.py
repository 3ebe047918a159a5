"""
Connection sheets: the per-rack documents handed to field technicians.

The workbook holds a Summary sheet, one sheet per rack (a top-down RU
elevation followed by that rack's cables) and an Unracked sheet listing
everything without a rack, grouped by row.
"""

import logging
from typing import Dict, List, Optional, Tuple

from fabric_core.codebase.debug import spy_trace
from fabric_core.models.cabling import PhysicalLink, PortAssignment, Sheet, SheetTable, Workbook
from fabric_core.models.device import Device
from fabric_core.models.facility import Rack, row_name
from fabric_core.models.preview import TopologyPreview

from fabric_tools.cabling.common import round_cable_length
from fabric_tools.cabling.ports import physical_links

logger = logging.getLogger(__name__)

SUMMARY_TITLE = "Summary"
UNRACKED_TITLE = "Unracked"
ELEVATION_TITLE = "Elevation"
CONNECTIONS_TITLE = "Connections"

ELEVATION_HEADER = ["RU", "Device", "Role", "Model"]
CONNECTIONS_HEADER = [
    "Local Device",
    "Local Interface",
    "Remote Device",
    "Remote Interface",
    "Patch Panel A",
    "PP A Port",
    "Patch Panel B",
    "PP B Port",
    "Cable Length (m)",
]
SUMMARY_HEADER = ["Rack", "Hall", "Row", "Type", "Devices", "Cables"]
UNRACKED_HEADER = ["Row", "Hostname", "Role", "Model"]


def rack_elevation(rack: Rack, devices: List[Device]) -> List[list]:
    """``rack.height_ru`` rows from the top RU down; empty RUs have blank cells."""
    by_ru: Dict[int, Device] = {}
    for d in devices:
        if d.rack_position is None:
            continue
        for ru in range(d.rack_position, d.rack_position + d.height_ru):
            by_ru[ru] = d
    rows = []
    for ru in range(rack.height_ru, 0, -1):
        d = by_ru.get(ru)
        rows.append([ru, d.hostname, d.role, d.model] if d else [ru, "", "", ""])
    return rows


def _oriented(link: PhysicalLink, local: set) -> list:
    """Connection row with a device of this rack on the local side."""
    length = round_cable_length(link.cable_length_meters)
    if link.a_device in local:
        return [
            link.a_device,
            link.a_port,
            link.b_device,
            link.b_port,
            link.patch_panel_a or "",
            link.patch_panel_a_port or "",
            link.patch_panel_b or "",
            link.patch_panel_b_port or "",
            length,
        ]
    return [
        link.b_device,
        link.b_port,
        link.a_device,
        link.a_port,
        link.patch_panel_b or "",
        link.patch_panel_b_port or "",
        link.patch_panel_a or "",
        link.patch_panel_a_port or "",
        length,
    ]


def rack_connections(links: List[PhysicalLink], devices: List[Device]) -> List[list]:
    local = {d.hostname for d in devices}
    order = {d.hostname: i for i, d in enumerate(devices)}
    rows = [_oriented(link, local) for link in links if link.a_device in local or link.b_device in local]
    # group by local device in rack order, keep link order within a device
    return sorted(rows, key=lambda r: order[r[0]])


def _rack_sheet(rack: Rack, devices: List[Device], links: List[PhysicalLink]) -> Sheet:
    devices = sorted(devices, key=lambda d: -(d.rack_position or 0))
    return Sheet(
        title=rack.name,
        tables=[
            SheetTable(title=ELEVATION_TITLE, header=ELEVATION_HEADER, rows=rack_elevation(rack, devices)),
            SheetTable(title=CONNECTIONS_TITLE, header=CONNECTIONS_HEADER, rows=rack_connections(links, devices)),
        ],
    )


def _row_label(key: Tuple[Optional[int], Optional[int]]) -> str:
    hall, row = key
    if hall is None or row is None:
        return "Unassigned"
    return row_name(hall, row)


def _unracked_sheet(devices: List[Device]) -> Sheet:
    unracked = [d for d in devices if d.rack_index is None and d.role != "external"]
    groups: Dict[Tuple[Optional[int], Optional[int]], List[Device]] = {}
    for d in unracked:
        groups.setdefault((d.hall, d.row), []).append(d)
    # placed rows first in facility order, unknown rows last
    keys = sorted(groups, key=lambda k: (k[0] is None or k[1] is None, k[0] or 0, k[1] or 0))
    rows = [[_row_label(k), d.hostname, d.role, d.model] for k in keys for d in groups[k]]
    return Sheet(title=UNRACKED_TITLE, tables=[SheetTable(title=UNRACKED_TITLE, header=UNRACKED_HEADER, rows=rows)])


@spy_trace
def build_connection_sheets(
    preview: TopologyPreview, assignments: Optional[List[PortAssignment]] = None
) -> Workbook:
    links = physical_links(preview, assignments)
    rack_sheets = []
    summary_rows = []
    for rack in preview.racks:
        devices = preview.rack_devices(rack)
        sheet = _rack_sheet(rack, devices, links)
        rack_sheets.append(sheet)
        summary_rows.append(
            [
                rack.name,
                rack.hall,
                rack.row,
                rack.rack_type,
                len(devices),
                len(sheet.table(CONNECTIONS_TITLE).rows),
            ]
        )

    racked = sum(1 for d in preview.devices if d.rack_index is not None)
    totals = [
        ["Topology", preview.topology_name],
        ["Architecture", preview.architecture],
        ["Devices", len(preview.devices)],
        ["Racked devices", racked],
        ["Physical links", len(links)],
    ]
    summary = Sheet(
        title=SUMMARY_TITLE,
        tables=[
            SheetTable(title="Totals", header=["Metric", "Value"], rows=totals),
            SheetTable(title="Racks", header=SUMMARY_HEADER, rows=summary_rows),
        ],
    )
    logger.debug("Connection sheets: %d racks, %d links", len(rack_sheets), len(links))
    return Workbook(
        title=preview.topology_name,
        sheets=[summary, *rack_sheets, _unracked_sheet(preview.devices)],
    )
