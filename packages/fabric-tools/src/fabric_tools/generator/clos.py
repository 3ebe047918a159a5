import logging
from typing import List

from fabric_core.models.device import Device

from fabric_tools.generator.builder import FabricBuilder

logger = logging.getLogger(__name__)


def build_externals(b: FabricBuilder) -> List[Device]:
    cfg = b.config
    externals = []
    for i in range(cfg.external_count):
        name = cfg.external_names[i] if i < len(cfg.external_names) else ""
        externals.append(b.add_switch("external", cfg.external_model, hostname=name))
    return externals


def build_clos(b: FabricBuilder) -> None:
    """Spine/leaf fabric, optionally 5-stage with per-pod spines and leaves.

    Link order: super-spine to spine, external to spine, then spine to leaf
    inside each pod.
    """
    cfg = b.config
    externals = build_externals(b)

    super_spines = [b.add_switch("super-spine", cfg.super_spine_model) for _ in range(cfg.total_super_spines)]

    pods = cfg.pod_count
    multi_pod = cfg.super_spine_enabled
    pod_spines: List[List[Device]] = []
    for pod in range(1, pods + 1):
        pod_spines.append(
            [b.add_switch("spine", cfg.tier1_model, pod=pod if multi_pod else None) for _ in range(cfg.tier1_count)]
        )
    pod_leaves: List[List[Device]] = []
    for pod in range(1, pods + 1):
        pod_leaves.append(
            [b.add_switch("leaf", cfg.tier2_model, pod=pod if multi_pod else None) for _ in range(cfg.tier2_count)]
        )

    all_spines = [s for spines in pod_spines for s in spines]
    if super_spines:
        b.connect(super_spines, all_spines, cfg.ratio("spine_to_super_spine_ratio"), "super-spine")
    if externals:
        b.connect(externals, all_spines, cfg.ratio("external_to_tier1_ratio"), "external")
    for spines, leaves in zip(pod_spines, pod_leaves):
        b.connect(spines, leaves, cfg.ratio("tier1_to_tier2_ratio"), "fabric")

    logger.debug(
        "CLOS: %d externals, %d super-spines, %d spines, %d leaves across %d pod(s), %d links",
        len(externals),
        len(super_spines),
        len(all_spines),
        sum(len(x) for x in pod_leaves),
        pods,
        len(b.links),
    )
