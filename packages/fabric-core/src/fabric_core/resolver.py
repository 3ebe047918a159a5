"""
Configuration resolution for fabric generation.

Merges a raw configuration with the facility defaults and runs the checks
that must pass before any device is generated.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping

from pydantic import ValidationError

from fabric_core.codebase.debug import spy_trace
from fabric_core.errors import CapacityError, InvalidConfigError
from fabric_core.models.config import MAX_DEVICES_PER_ROLE, TopologyConfig
from fabric_core.models.defaults import FacilityDefaults

logger = logging.getLogger(__name__)

DEFAULT_TOPOLOGY_NAMES = {
    "clos": "DC1 Virtual Fabric",
    "hierarchical": "DC1 Hierarchical Fabric",
}

PLACEMENT_KEYWORDS = ("", "beginning", "middle", "end")

_RATIO_FIELDS = (
    "external_to_tier1_ratio",
    "tier1_to_tier2_ratio",
    "tier2_to_tier3_ratio",
    "spine_to_super_spine_ratio",
    "gpu_uplinks_per_node",
)


def _coerce(raw: TopologyConfig | Mapping[str, Any]) -> TopologyConfig:
    if isinstance(raw, TopologyConfig):
        return raw
    try:
        return TopologyConfig.model_validate(dict(raw))
    except ValidationError as e:
        raise InvalidConfigError(f"Invalid configuration: {e}") from e


def apply_defaults(config: TopologyConfig, defaults: FacilityDefaults) -> TopologyConfig:
    """Fill every empty model/name field from the facility defaults."""
    m = defaults.models
    if config.is_clos:
        tier_models = (m.spine, m.leaf, m.access)
    else:
        tier_models = (m.core, m.distribution, m.access)

    update: dict[str, Any] = {}
    for field, fallback in zip(("tier1_model", "tier2_model", "tier3_model"), tier_models):
        if not getattr(config, field):
            update[field] = fallback
    for field, fallback in (
        ("super_spine_model", m.super_spine),
        ("external_model", m.external),
        ("mgmt_switch_model", m.mgmt_switch),
        ("gpu_model", m.gpu),
    ):
        if not getattr(config, field):
            update[field] = fallback
    if not config.topology_name:
        update["topology_name"] = DEFAULT_TOPOLOGY_NAMES[config.architecture]

    return config.model_copy(update=update)


def validate_config(config: TopologyConfig) -> None:
    """Reject contradictory counts and ratios. Nothing is silently corrected."""
    for field in _RATIO_FIELDS:
        value = getattr(config, field)
        if value is not None and value < 1:
            raise InvalidConfigError(f"{field} must be at least 1, got {value}")

    if config.pods < 1:
        raise InvalidConfigError(f"pods must be at least 1, got {config.pods}")
    if config.super_spine_enabled and config.super_spine_count < 1:
        raise InvalidConfigError("super_spine_enabled requires super_spine_count >= 1")
    if len(config.external_names) > config.external_count:
        raise InvalidConfigError(
            f"{len(config.external_names)} external names given for {config.external_count} externals"
        )

    if config.is_clos:
        if config.tier1_count > 0 and config.tier2_count == 0 and config.gpu_cluster_count == 0:
            raise InvalidConfigError("Spines were requested with zero leaves and no GPU clusters")
    elif config.tier2_count > 0 and config.tier3_count == 0 and config.gpu_cluster_count == 0:
        raise InvalidConfigError("Distribution switches were requested with zero access switches and no GPU clusters")

    if config.gpu_node_count > 0 and config.leaf_class_count == 0:
        noun = "leaves" if config.is_clos else "access switches"
        raise InvalidConfigError(f"GPU clusters need at least one of the {noun} to stripe across")

    if config.mgmt_switch_distribution == "count-per-row" and config.mgmt_switches_per_row < 1:
        raise InvalidConfigError("count-per-row management distribution requires mgmt_switches_per_row >= 1")

    for role, count in config.role_counts().items():
        if count > MAX_DEVICES_PER_ROLE:
            raise InvalidConfigError(
                f"{count} {role} devices requested; addressing supports at most {MAX_DEVICES_PER_ROLE} per role"
            )

    for field in ("tier1_placement", "tier2_placement", "tier3_placement"):
        policy = getattr(config, field)
        if policy in PLACEMENT_KEYWORDS:
            continue
        if not policy.isdigit() or int(policy) < 1:
            raise InvalidConfigError(
                f"{field} must be one of {', '.join(repr(p) for p in PLACEMENT_KEYWORDS)} or a rack number, got {policy!r}"
            )


def check_capacity(config: TopologyConfig) -> None:
    """Fail when the leaf-class switches do not fit in the leaf racks."""
    required = config.leaf_class_count
    if required > config.leaf_capacity:
        noun = "leaves" if config.is_clos else "access switches"
        raise CapacityError(required, config.leaf_rack_count, config.devices_per_rack, noun=noun)


@spy_trace
def resolve_config(
    raw: TopologyConfig | Mapping[str, Any],
    defaults: FacilityDefaults | None = None,
) -> TopologyConfig:
    """Return a fully-populated configuration that is safe to generate from.

    Raises:
        InvalidConfigError: malformed or contradictory input.
        CapacityError: more leaf-class switches than rack slots.
    """
    config = apply_defaults(_coerce(raw), defaults or FacilityDefaults())
    validate_config(config)
    check_capacity(config)
    logger.debug(
        "Resolved %s config %r: %d leaf-class switches in %d slots",
        config.architecture,
        config.topology_name,
        config.leaf_class_count,
        config.leaf_capacity,
    )
    return config
