# fabric_core/models/device.py
"""Generated devices, discriminated by role.

Each variant carries only the fields that make sense for its role: fabric
switches are routed (loopback/ASN), GPU nodes and management switches only
have a management address, patch panels are passive.
"""

from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

SwitchRole = Literal["external", "super-spine", "spine", "leaf", "core", "distribution", "access"]
Role = Literal[
    "external",
    "super-spine",
    "spine",
    "leaf",
    "core",
    "distribution",
    "access",
    "patch-panel",
    "gpu-node",
    "mgmt-switch",
]
DeviceType = Literal["internal", "external"]

# Roles that sit in the spine racks and roles that are packed into leaf racks.
SPINE_TIER_ROLES = ("super-spine", "spine", "core", "distribution")
LEAF_TIER_ROLES = ("leaf", "access")
# (upper, lower) role pairs whose links run through the row patch panel when one exists.
PATCHED_ROLE_PAIRS = (("spine", "leaf"), ("distribution", "access"))
# Roles that carry no management cable of their own.
UNMANAGED_ROLES = ("external", "patch-panel", "mgmt-switch")


class _DeviceBase(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    index: int
    hostname: str
    model: str
    device_type: DeviceType = "internal"
    height_ru: int = 1

    # placement
    hall: Optional[int] = None
    row: Optional[int] = None
    rack_index: Optional[int] = None
    rack_name: Optional[str] = None
    rack_position: Optional[int] = None

    @property
    def is_racked(self) -> bool:
        return self.rack_index is not None and self.rack_position is not None


class FabricSwitch(_DeviceBase):
    role: SwitchRole
    loopback: str
    asn: int
    mgmt_ip: str
    pod: Optional[int] = None


class GpuNode(_DeviceBase):
    role: Literal["gpu-node"] = "gpu-node"
    mgmt_ip: str
    cluster_name: str
    gpu_count: int
    leaf: Optional[str] = None  # striped uplink switch


class MgmtSwitch(_DeviceBase):
    role: Literal["mgmt-switch"] = "mgmt-switch"
    mgmt_ip: str
    serves_hall: int
    serves_row: Optional[int] = None
    serves_rack: Optional[int] = None
    slot: int = 0


class PatchPanel(_DeviceBase):
    role: Literal["patch-panel"] = "patch-panel"
    port_count: int


Device = Annotated[Union[FabricSwitch, GpuNode, MgmtSwitch, PatchPanel], Field(discriminator="role")]

DeviceListAdapter = TypeAdapter(list[Device])
