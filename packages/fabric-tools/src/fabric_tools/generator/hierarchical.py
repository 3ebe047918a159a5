import logging

from fabric_tools.generator.builder import FabricBuilder
from fabric_tools.generator.clos import build_externals

logger = logging.getLogger(__name__)


def build_hierarchical(b: FabricBuilder) -> None:
    """Three-tier core / distribution / access fabric.

    Externals, when requested, uplink to the core tier at the external ratio.
    """
    cfg = b.config
    externals = build_externals(b)
    cores = [b.add_switch("core", cfg.tier1_model) for _ in range(cfg.tier1_count)]
    distribution = [b.add_switch("distribution", cfg.tier2_model) for _ in range(cfg.tier2_count)]
    access = [b.add_switch("access", cfg.tier3_model) for _ in range(cfg.tier3_count)]

    if externals:
        b.connect(externals, cores, cfg.ratio("external_to_tier1_ratio"), "external")
    b.connect(cores, distribution, cfg.ratio("tier1_to_tier2_ratio"), "fabric")
    b.connect(distribution, access, cfg.ratio("tier2_to_tier3_ratio"), "fabric")

    logger.debug(
        "Hierarchical: %d core, %d distribution, %d access, %d links",
        len(cores),
        len(distribution),
        len(access),
        len(b.links),
    )
