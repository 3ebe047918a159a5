# fabric_core/models/gpu.py
from typing import Dict, List

from pydantic import BaseModel, ConfigDict, Field

from fabric_core.models.link import FabricLink

# Interconnects whose intra-cluster ports are named IB<n> rather than by the vendor prefix.
INFINIBAND_INTERCONNECTS = ("InfiniBand", "InfinityFabric")


class GpuCluster(BaseModel):
    """A group of GPU nodes generated together and striped across leaves."""

    model_config = ConfigDict(extra="ignore", frozen=True)
    name: str
    gpu_model: str
    node_count: int
    gpus_per_node: int
    interconnect: str
    node_hostnames: List[str] = Field(default_factory=list)
    leaf_assignments: Dict[str, str] = Field(default_factory=dict)  # node hostname -> leaf hostname
    leaf_uplink_links: List[FabricLink] = Field(default_factory=list)
    fabric_links: List[FabricLink] = Field(default_factory=list)

    @property
    def uses_infiniband(self) -> bool:
        return self.interconnect in INFINIBAND_INTERCONNECTS

    @property
    def total_gpus(self) -> int:
        return self.node_count * self.gpus_per_node
