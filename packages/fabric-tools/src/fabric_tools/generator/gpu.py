import logging
from typing import Dict, List, Tuple

from fabric_core.models.device import LEAF_TIER_ROLES, Device, GpuNode
from fabric_core.models.gpu import INFINIBAND_INTERCONNECTS, GpuCluster
from fabric_core.models.link import FabricLink, LinkEnd

from fabric_tools.generator import addressing
from fabric_tools.generator.builder import FabricBuilder

logger = logging.getLogger(__name__)


def striped_leaf_index(gpu_index: int, leaf_count: int) -> int:
    """Round-robin attachment of global GPU node ``gpu_index`` to a leaf."""
    if leaf_count <= 0:
        raise ValueError("GPU striping needs at least one leaf")
    return gpu_index % leaf_count


def _fabric_pairs(node_count: int, topology: str) -> List[Tuple[int, int]]:
    if node_count < 2:
        return []
    if topology == "ring":
        if node_count == 2:
            return [(0, 1)]
        return [(i, (i + 1) % node_count) for i in range(node_count)]
    return [(i, j) for i in range(node_count) for j in range(i + 1, node_count)]


def _fabric_link(b: FabricBuilder, x: Device, y: Device, infiniband: bool) -> FabricLink:
    def port(hostname: str) -> str:
        return b.interfaces.next_ib(hostname) if infiniband else b.interfaces.next(hostname)

    return FabricLink(
        a=LinkEnd(hostname=x.hostname, interface=port(x.hostname)),
        b=LinkEnd(hostname=y.hostname, interface=port(y.hostname)),
        link_class="gpu-fabric",
    )


def build_gpu_clusters(b: FabricBuilder) -> List[GpuCluster]:
    """Create every cluster's nodes, their leaf uplinks and intra-cluster fabric.

    Node ``gi`` is numbered globally across clusters, so striping continues
    where the previous cluster stopped.
    """
    cfg = b.config
    if cfg.gpu_node_count == 0:
        return []

    leaves = [d for d in b.devices if d.role in LEAF_TIER_ROLES]
    node_model = b.defaults.gpu_node_model(cfg.gpu_model, cfg.gpus_per_node)
    infiniband = cfg.gpu_interconnect in INFINIBAND_INTERCONNECTS
    clusters = []

    for ci in range(cfg.gpu_cluster_count):
        name = f"gpu-cluster-{ci + 1}"
        nodes: List[GpuNode] = []
        assignments: Dict[str, str] = {}
        uplinks: List[FabricLink] = []

        for ni in range(cfg.gpu_nodes_per_cluster):
            gi = ci * cfg.gpu_nodes_per_cluster + ni
            ordinal = b.roles.next("gpu-node")
            leaf = leaves[striped_leaf_index(gi, len(leaves))]
            node = GpuNode(
                index=b.next_index,
                hostname=b.hostname("gpu-node", ordinal),
                model=node_model,
                mgmt_ip=addressing.mgmt_ip("gpu-node", ordinal),
                cluster_name=name,
                gpu_count=cfg.gpus_per_node,
                height_ru=b.defaults.gpu_node_height_ru,
                leaf=leaf.hostname,
            )
            b.add(node)
            nodes.append(node)

            assignments[node.hostname] = leaf.hostname
            if cfg.gpu_include_leaf_uplinks:
                for _ in range(cfg.uplinks_per_gpu_node):
                    uplinks.append(b.link(leaf, node, "gpu-uplink"))

        fabric: List[FabricLink] = []
        if cfg.gpu_include_fabric_cabling:
            for i, j in _fabric_pairs(len(nodes), cfg.gpu_fabric_topology):
                fabric.append(_fabric_link(b, nodes[i], nodes[j], infiniband))

        clusters.append(
            GpuCluster(
                name=name,
                gpu_model=cfg.gpu_model,
                node_count=len(nodes),
                gpus_per_node=cfg.gpus_per_node,
                interconnect=cfg.gpu_interconnect,
                node_hostnames=[n.hostname for n in nodes],
                leaf_assignments=assignments,
                leaf_uplink_links=uplinks,
                fabric_links=fabric,
            )
        )
        logger.debug("%s: %d nodes, %d uplinks, %d fabric links", name, len(nodes), len(uplinks), len(fabric))

    return clusters
