# fabric_core/models/preview.py
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from fabric_core.models.config import Architecture
from fabric_core.models.device import Device
from fabric_core.models.facility import Datacenter, Hall, Rack, Row, hall_name, row_name
from fabric_core.models.gpu import GpuCluster
from fabric_core.models.link import FabricLink


class TopologyPreview(BaseModel):
    """Aggregate root handed to placement, layout, cabling and commit."""

    model_config = ConfigDict(extra="ignore", frozen=True)
    topology_name: str
    architecture: Architecture
    devices: List[Device] = Field(default_factory=list)
    fabric_links: List[FabricLink] = Field(default_factory=list)
    racks: List[Rack] = Field(default_factory=list)
    gpu_clusters: List[GpuCluster] = Field(default_factory=list)
    tier1_placement: str = ""
    tier2_placement: str = ""
    tier3_placement: str = ""
    mgmt_switch_distribution: str = "per-row"
    datacenter_id: Optional[int] = None

    def all_links(self) -> List[FabricLink]:
        links = list(self.fabric_links)
        for cluster in self.gpu_clusters:
            links.extend(cluster.leaf_uplink_links)
            links.extend(cluster.fabric_links)
        return links

    def device_map(self) -> Dict[str, Device]:
        return {d.hostname: d for d in self.devices}

    def devices_with_role(self, role: str) -> List[Device]:
        return [d for d in self.devices if d.role == role]

    def rack_devices(self, rack: Rack) -> List[Device]:
        return [d for d in self.devices if d.rack_index == rack.index]

    def datacenter(self) -> Datacenter:
        """Rebuild the Hall > Row > Rack containment from the flat rack list."""
        halls: Dict[int, Dict[int, List[Rack]]] = {}
        for rack in self.racks:
            halls.setdefault(rack.hall, {}).setdefault(rack.row, []).append(rack)
        return Datacenter(
            name=self.topology_name,
            datacenter_id=self.datacenter_id,
            halls=[
                Hall(
                    number=h,
                    name=hall_name(h),
                    rows=[
                        Row(number=r, name=row_name(h, r), racks=sorted(racks, key=lambda x: x.position_in_row))
                        for r, racks in sorted(rows.items())
                    ],
                )
                for h, rows in sorted(halls.items())
            ],
        )
