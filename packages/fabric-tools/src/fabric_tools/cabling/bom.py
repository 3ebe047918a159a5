import logging
from typing import Dict, List, Optional, Tuple

from fabric_core.codebase.debug import spy_trace
from fabric_core.models.cabling import BomRow, PhysicalLink, PortAssignment
from fabric_core.models.device import UNMANAGED_ROLES, Device
from fabric_core.models.gpu import INFINIBAND_INTERCONNECTS
from fabric_core.models.preview import TopologyPreview

from fabric_tools.cabling.common import DEFAULT_CABLE_LENGTH_M, format_length, round_cable_length
from fabric_tools.cabling.ports import physical_links

logger = logging.getLogger(__name__)

# (part, medium) per link speed class
OPTIC_100G = ("100G QSFP28 SR4", "100G multimode fiber")
OPTIC_400G_IB = ("400G OSFP NDR", "InfiniBand NDR")
OPTIC_400G_ETH = ("400G QSFP-DD", "DAC/AOC")
GPU_LINK_CLASSES = ("gpu-uplink", "gpu-fabric")

MGMT_CABLE = ("Cat6 Patch Cable", "1G RJ45 copper")


def build_device_bom(devices: List[Device]) -> List[BomRow]:
    """One row per (model, role), in order of first appearance.

    Externals are not ours to buy and patch panels are passive.
    """
    counts: Dict[Tuple[str, str], int] = {}
    for d in devices:
        if d.role in ("external", "patch-panel"):
            continue
        key = (d.model, d.role)
        counts[key] = counts.get(key, 0) + 1
    return [BomRow(category="Device", item=model, specification=role, quantity=qty) for (model, role), qty in counts.items()]


def _aggregate_cable_lengths(links: List[PhysicalLink]) -> Dict[float, int]:
    lengths: Dict[float, int] = {}
    for link in links:
        rounded = round_cable_length(link.cable_length_meters)
        lengths[rounded] = lengths.get(rounded, 0) + 1
    return lengths


def build_cable_bom(links: List[PhysicalLink]) -> List[BomRow]:
    """One row per standard length, shortest first."""
    lengths = _aggregate_cable_lengths(links)
    unknown = sum(1 for link in links if link.cable_length_meters is None)
    rows = []
    for length in sorted(lengths):
        notes = ""
        if unknown and length == DEFAULT_CABLE_LENGTH_M:
            notes = f"{unknown} unplaced link(s) assumed {format_length(DEFAULT_CABLE_LENGTH_M)}"
        rows.append(
            BomRow(
                category="Cable",
                item="Fiber Patch Cable",
                specification=format_length(length),
                quantity=lengths[length],
                unit_length=format_length(length),
                notes=notes,
            )
        )
    return rows


def optic_for(link: PhysicalLink, interconnects: Dict[str, str]) -> Tuple[str, str]:
    """Optic part for a link; GPU links follow their cluster's interconnect."""
    if link.link_class not in GPU_LINK_CLASSES:
        return OPTIC_100G
    interconnect = interconnects.get(link.a_device) or interconnects.get(link.b_device, "")
    return OPTIC_400G_IB if interconnect in INFINIBAND_INTERCONNECTS else OPTIC_400G_ETH


def build_optics_bom(links: List[PhysicalLink], preview: TopologyPreview) -> List[BomRow]:
    """Two optics per distinct link, one for each end."""
    interconnects = {host: c.interconnect for c in preview.gpu_clusters for host in c.node_hostnames}
    counts: Dict[Tuple[str, str], int] = {}
    for link in links:
        key = optic_for(link, interconnects)
        counts[key] = counts.get(key, 0) + 2
    return [
        BomRow(category="Optic", item=part, specification=medium, quantity=qty, notes="2 per link")
        for (part, medium), qty in counts.items()
    ]


def build_mgmt_cabling(devices: List[Device]) -> List[BomRow]:
    """One copper management cable per managed device, if anything manages them."""
    if not any(d.role == "mgmt-switch" for d in devices):
        return []
    managed = sum(1 for d in devices if d.role not in UNMANAGED_ROLES)
    if managed == 0:
        return []
    item, spec = MGMT_CABLE
    return [
        BomRow(
            category="Management",
            item=item,
            specification=spec,
            quantity=managed,
            unit_length=format_length(DEFAULT_CABLE_LENGTH_M),
            notes="one per managed device",
        )
    ]


@spy_trace
def build_bom(preview: TopologyPreview, assignments: Optional[List[PortAssignment]] = None) -> List[BomRow]:
    """Devices, cables by standard length, optics and management cabling."""
    links = physical_links(preview, assignments)
    rows = (
        build_device_bom(preview.devices)
        + build_cable_bom(links)
        + build_optics_bom(links, preview)
        + build_mgmt_cabling(preview.devices)
    )
    logger.debug("BOM for %r: %d rows over %d physical links", preview.topology_name, len(rows), len(links))
    return rows
