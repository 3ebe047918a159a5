import logging
from typing import Any, Mapping

from fabric_core.codebase.debug import spy_trace
from fabric_core.models.config import TopologyConfig
from fabric_core.models.defaults import FacilityDefaults
from fabric_core.models.preview import TopologyPreview
from fabric_core.resolver import resolve_config

from fabric_tools.cabling.common import measure_links
from fabric_tools.generator import generate_fabric
from fabric_tools.placement import plan_placement

logger = logging.getLogger(__name__)


@spy_trace
def build_preview(
    raw: TopologyConfig | Mapping[str, Any],
    defaults: FacilityDefaults | None = None,
) -> TopologyPreview:
    """Resolve, generate, place and measure: the full preview pipeline.

    Raises whatever ``resolve_config`` raises; nothing is generated when the
    configuration is rejected.
    """
    defaults = defaults or FacilityDefaults()
    config = resolve_config(raw, defaults)
    fabric = generate_fabric(config, defaults)
    plan = plan_placement(fabric.devices, config, defaults)

    def measure(links):
        return measure_links(
            links,
            plan.devices,
            plan.racks,
            rows_per_hall=config.rows_per_hall,
            row_spacing_cm=config.row_spacing_cm,
            defaults=defaults,
        )

    clusters = [
        c.model_copy(
            update={
                "leaf_uplink_links": measure(c.leaf_uplink_links),
                "fabric_links": measure(c.fabric_links),
            }
        )
        for c in fabric.gpu_clusters
    ]
    preview = TopologyPreview(
        topology_name=config.topology_name,
        architecture=config.architecture,
        devices=plan.devices,
        fabric_links=measure(fabric.fabric_links),
        racks=plan.racks,
        gpu_clusters=clusters,
        tier1_placement=config.tier1_placement,
        tier2_placement=config.tier2_placement,
        tier3_placement=config.tier3_placement,
        mgmt_switch_distribution=config.mgmt_switch_distribution,
        datacenter_id=config.datacenter_id,
    )
    logger.info(
        "Preview %r: %d devices, %d links, %d racks",
        preview.topology_name,
        len(preview.devices),
        len(preview.all_links()),
        len(preview.racks),
    )
    return preview
