# fabric_core/models/config.py
import re
from typing import List, Literal, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator

Architecture = Literal["clos", "hierarchical"]
MgmtDistribution = Literal["per-row", "per-rack", "per-hall", "count-per-row", "none"]
GpuFabricTopology = Literal["full-mesh", "ring"]

LINKS_PER_PAIR_DEFAULT = 2

# upper bound on devices of one role the loopback/management address plan can number
MAX_DEVICES_PER_ROLE = 8000

_COUNT_PER_ROW = re.compile(r"^count-per-row\[(\d+)\]$")


class TopologyConfig(BaseModel):
    """Declarative description of a fabric to generate.

    Tier naming is positional: for ``clos`` tier1 is the spine tier and tier2
    the leaf tier; for ``hierarchical`` tier1/2/3 are core, distribution and
    access. With super-spine enabled tier1/tier2 counts are per pod.
    """

    model_config = ConfigDict(extra="ignore")

    architecture: Architecture
    topology_name: str = ""
    vendor: str = "arista"

    # ---- tier counts ----
    tier1_count: int = Field(default=2, ge=0, validation_alias=AliasChoices("tier1_count", "spine_count"))
    tier2_count: int = Field(default=4, ge=0, validation_alias=AliasChoices("tier2_count", "leaf_count"))
    tier3_count: int = Field(default=0, ge=0)
    external_count: int = Field(default=0, ge=0)
    external_names: List[str] = Field(default_factory=list)

    # ---- fan-out ratios (links per device pair); None falls back to LINKS_PER_PAIR_DEFAULT ----
    external_to_tier1_ratio: Optional[int] = None
    tier1_to_tier2_ratio: Optional[int] = None
    tier2_to_tier3_ratio: Optional[int] = None
    spine_to_super_spine_ratio: Optional[int] = None

    # ---- 5-stage ----
    super_spine_enabled: bool = False
    super_spine_count: int = Field(default=2, ge=0)
    pods: int = 1

    # ---- models (empty = take from facility defaults) ----
    tier1_model: str = ""
    tier2_model: str = ""
    tier3_model: str = ""
    super_spine_model: str = ""
    external_model: str = ""
    mgmt_switch_model: str = ""

    # ---- location ----
    region_id: Optional[int] = None
    campus_id: Optional[int] = None
    datacenter_id: Optional[int] = None
    region_name: str = ""
    datacenter_name: str = ""

    # ---- facility shape ----
    halls: int = Field(default=1, ge=0)
    rows_per_hall: int = Field(default=1, ge=0)
    racks_per_row: int = Field(default=4, ge=0)
    devices_per_rack: int = Field(default=2, ge=0)
    row_spacing_cm: int = Field(default=120, ge=0)
    rack_width_cm: int = Field(default=60, gt=0)
    rack_height_ru: int = Field(default=42, gt=0)
    rack_depth_cm: int = Field(default=100, gt=0)

    # ---- placement policies: "", "beginning", "middle", "end" or a rack number ----
    tier1_placement: str = ""
    tier2_placement: str = ""
    tier3_placement: str = ""
    patch_panel_routing: bool = False

    # ---- GPU clusters ----
    gpu_cluster_count: int = Field(default=0, ge=0)
    gpu_nodes_per_cluster: int = Field(default=8, ge=0)
    gpus_per_node: int = Field(default=8, ge=1)
    gpu_model: str = ""
    gpu_interconnect: str = "InfiniBand"
    gpu_include_leaf_uplinks: bool = True
    gpu_include_fabric_cabling: bool = False
    gpu_uplinks_per_node: Optional[int] = None
    gpu_fabric_topology: GpuFabricTopology = "full-mesh"

    # ---- management ----
    mgmt_switch_distribution: MgmtDistribution = "per-row"
    mgmt_switches_per_row: int = Field(default=1, ge=0)

    @field_validator(
        "tier1_count",
        "tier2_count",
        "tier3_count",
        "external_count",
        "super_spine_count",
        "pods",
        "halls",
        "rows_per_hall",
        "racks_per_row",
        "devices_per_rack",
        "row_spacing_cm",
        "rack_width_cm",
        "rack_height_ru",
        "rack_depth_cm",
        "gpu_cluster_count",
        "gpu_nodes_per_cluster",
        "gpus_per_node",
        "mgmt_switches_per_row",
        mode="before",
    )
    @classmethod
    def _coerce_int(cls, v):
        if isinstance(v, str):
            return int(v.strip())
        return v

    @field_validator(
        "external_to_tier1_ratio",
        "tier1_to_tier2_ratio",
        "tier2_to_tier3_ratio",
        "spine_to_super_spine_ratio",
        "gpu_uplinks_per_node",
        mode="before",
    )
    @classmethod
    def _coerce_optional_int(cls, v):
        if v is None or v == "":
            return None
        if isinstance(v, str):
            return int(v.strip())
        return v

    @field_validator("tier1_placement", "tier2_placement", "tier3_placement", mode="before")
    @classmethod
    def _coerce_placement(cls, v):
        # YAML turns `tier1_placement: 3` into an int
        if v is None:
            return ""
        return str(v).strip().lower()

    @model_validator(mode="before")
    @classmethod
    def _expand_count_per_row(cls, data):
        if isinstance(data, dict):
            dist = data.get("mgmt_switch_distribution")
            if isinstance(dist, str):
                m = _COUNT_PER_ROW.match(dist.strip())
                if m:
                    data = {**data, "mgmt_switch_distribution": "count-per-row", "mgmt_switches_per_row": int(m.group(1))}
        return data

    # ---- derived values ----

    @property
    def is_clos(self) -> bool:
        return self.architecture == "clos"

    @property
    def pod_count(self) -> int:
        return self.pods if self.super_spine_enabled else 1

    @property
    def total_tier1(self) -> int:
        return self.tier1_count * self.pod_count if self.is_clos else self.tier1_count

    @property
    def total_tier2(self) -> int:
        return self.tier2_count * self.pod_count if self.is_clos else self.tier2_count

    @property
    def total_super_spines(self) -> int:
        return self.super_spine_count if self.is_clos and self.super_spine_enabled else 0

    @property
    def leaf_class_count(self) -> int:
        """Number of rack-packed switches (CLOS leaves or hierarchical access switches)."""
        return self.total_tier2 if self.is_clos else self.tier3_count

    @property
    def leaf_rack_count(self) -> int:
        return self.halls * self.rows_per_hall * self.racks_per_row

    @property
    def racks_in_row(self) -> int:
        """Leaf racks plus the row's spine rack."""
        return self.racks_per_row + 1 if self.racks_per_row > 0 else 0

    @property
    def leaf_capacity(self) -> int:
        return self.leaf_rack_count * self.devices_per_rack

    @property
    def gpu_node_count(self) -> int:
        return self.gpu_cluster_count * self.gpu_nodes_per_cluster

    def ratio(self, name: str) -> int:
        value = getattr(self, name)
        return LINKS_PER_PAIR_DEFAULT if value is None else value

    @property
    def uplinks_per_gpu_node(self) -> int:
        return self.ratio("gpu_uplinks_per_node")

    @property
    def leaf_placement(self) -> str:
        return self.tier2_placement if self.is_clos else self.tier3_placement

    @property
    def mgmt_switch_count(self) -> int:
        rows = self.halls * self.rows_per_hall
        return {
            "per-hall": self.halls,
            "per-row": rows,
            "per-rack": rows * self.racks_in_row,
            "count-per-row": rows * self.mgmt_switches_per_row,
        }.get(self.mgmt_switch_distribution, 0)

    def role_counts(self) -> dict[str, int]:
        """Devices of each addressed role the generator will create."""
        if self.is_clos:
            tiers = {"super-spine": self.total_super_spines, "spine": self.total_tier1, "leaf": self.total_tier2}
        else:
            tiers = {"core": self.tier1_count, "distribution": self.tier2_count, "access": self.tier3_count}
        return {
            **tiers,
            "external": self.external_count,
            "gpu-node": self.gpu_node_count,
            "mgmt-switch": self.mgmt_switch_count,
        }
