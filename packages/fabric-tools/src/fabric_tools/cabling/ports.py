"""Port assignments and de-duplicated physical links.

A port assignment describes a port from one device's point of view, so each
physical cable appears twice in assignment data. ``physical_links`` folds
the two views back into one cable.
"""

from typing import Dict, Iterable, List, Optional, Tuple

from fabric_core.models.cabling import PhysicalLink, PortAssignment
from fabric_core.models.device import PATCHED_ROLE_PAIRS, Device
from fabric_core.models.link import FabricLink
from fabric_core.models.preview import TopologyPreview


def row_patch_panels(devices: Iterable[Device]) -> Dict[Tuple[int, int], str]:
    """(hall, row) -> hostname of that row's patch panel."""
    return {(d.hall, d.row): d.hostname for d in devices if d.role == "patch-panel" and d.hall is not None}


def _panel_for(link: FabricLink, by_host: Dict[str, Device], panels: Dict[Tuple[int, int], str]) -> Optional[str]:
    a, b = by_host.get(link.a.hostname), by_host.get(link.b.hostname)
    if a is None or b is None or (a.role, b.role) not in PATCHED_ROLE_PAIRS:
        return None
    # the lower (leaf-side) device's row owns the panel
    return panels.get((b.hall, b.row))


def build_port_assignments(preview: TopologyPreview) -> List[PortAssignment]:
    """Both port views of every link, with patch-panel hops where they apply.

    Each patched link takes a pair of panel ports: ``Port N`` faces side A and
    ``Port N+1`` faces side B.
    """
    by_host = preview.device_map()
    panels = row_patch_panels(preview.devices)
    next_port: Dict[str, int] = {}
    out: List[PortAssignment] = []

    for link in preview.all_links():
        panel = _panel_for(link, by_host, panels)
        port_a = port_b = None
        if panel is not None:
            n = next_port.get(panel, 1)
            next_port[panel] = n + 2
            port_a, port_b = f"Port {n}", f"Port {n + 1}"

        common = {"cable_length_meters": link.cable_length_meters, "link_class": link.link_class}
        out.append(
            PortAssignment(
                device=link.a.hostname,
                port=link.a.interface,
                remote_device=link.b.hostname,
                remote_port=link.b.interface,
                patch_panel_a=panel,
                patch_panel_a_port=port_a,
                patch_panel_b=panel,
                patch_panel_b_port=port_b,
                **common,
            )
        )
        out.append(
            PortAssignment(
                device=link.b.hostname,
                port=link.b.interface,
                remote_device=link.a.hostname,
                remote_port=link.a.interface,
                patch_panel_a=panel,
                patch_panel_a_port=port_b,
                patch_panel_b=panel,
                patch_panel_b_port=port_a,
                **common,
            )
        )
    return out


def physical_links(
    preview: TopologyPreview, assignments: Optional[List[PortAssignment]] = None
) -> List[PhysicalLink]:
    """Unique cables, keyed on the sorted (device, port) pair of both ends.

    Live assignment data replaces the generated view when supplied.
    """
    if assignments is None:
        assignments = build_port_assignments(preview)
    seen = set()
    links: List[PhysicalLink] = []
    for pa in assignments:
        key = pa.dedup_key()
        if key in seen:
            continue
        seen.add(key)
        links.append(
            PhysicalLink(
                a_device=pa.device,
                a_port=pa.port,
                b_device=pa.remote_device,
                b_port=pa.remote_port,
                patch_panel_a=pa.patch_panel_a,
                patch_panel_a_port=pa.patch_panel_a_port,
                patch_panel_b=pa.patch_panel_b,
                patch_panel_b_port=pa.patch_panel_b_port,
                cable_length_meters=pa.cable_length_meters,
                link_class=pa.link_class,
            )
        )
    return links
