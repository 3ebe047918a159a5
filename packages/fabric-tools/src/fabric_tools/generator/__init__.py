"""Deterministic fabric generation: resolved config in, devices and links out."""

import logging
from typing import List

from pydantic import BaseModel, ConfigDict, Field

from fabric_core.codebase.debug import spy_trace
from fabric_core.models.config import TopologyConfig
from fabric_core.models.defaults import FacilityDefaults
from fabric_core.models.device import Device
from fabric_core.models.gpu import GpuCluster
from fabric_core.models.link import FabricLink

from .builder import FabricBuilder
from .clos import build_clos
from .gpu import build_gpu_clusters, striped_leaf_index
from .hierarchical import build_hierarchical
from .mgmt import build_mgmt_switches, mgmt_scopes
from .naming import InterfaceAllocator, interface_prefix, resolve_hostname

logger = logging.getLogger(__name__)


class GeneratedFabric(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)
    devices: List[Device] = Field(default_factory=list)
    fabric_links: List[FabricLink] = Field(default_factory=list)
    gpu_clusters: List[GpuCluster] = Field(default_factory=list)


@spy_trace
def generate_fabric(config: TopologyConfig, defaults: FacilityDefaults | None = None) -> GeneratedFabric:
    """Generate devices, fabric links and GPU clusters from a resolved config.

    The config is expected to have passed ``resolve_config``; the same input
    always yields the same hostnames, interfaces, addresses and ordering.
    Device order: externals, super-spines, spines/core, leaves/distribution,
    access, GPU nodes, management switches.
    """
    b = FabricBuilder(config, defaults or FacilityDefaults())
    if config.is_clos:
        build_clos(b)
    else:
        build_hierarchical(b)
    fabric_links = list(b.links)
    clusters = build_gpu_clusters(b)
    build_mgmt_switches(b)

    logger.debug("Generated %d devices and %d fabric links", len(b.devices), len(fabric_links))
    return GeneratedFabric(devices=b.devices, fabric_links=fabric_links, gpu_clusters=clusters)


__all__ = [
    "FabricBuilder",
    "GeneratedFabric",
    "InterfaceAllocator",
    "generate_fabric",
    "interface_prefix",
    "mgmt_scopes",
    "resolve_hostname",
    "striped_leaf_index",
]
