"""
Facility placement: maps generated devices onto halls, rows, racks and RUs.

Every row gets ``racks_per_row`` leaf racks plus one spine rack whose column
follows ``tier1_placement``. Spine-tier switches are dealt round-robin over
the spine racks, leaf-tier switches are packed ``devices_per_rack`` at a
time, GPU nodes follow their striped leaf and management switches land in
the rack their scope names. RUs are handed out top-down for switches and
bottom-up for GPU nodes; the top RU is left free for cable management.
"""

import logging
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from fabric_core.codebase.debug import spy_trace
from fabric_core.models.config import TopologyConfig
from fabric_core.models.defaults import FacilityDefaults
from fabric_core.models.device import LEAF_TIER_ROLES, SPINE_TIER_ROLES, Device, PatchPanel
from fabric_core.models.facility import Rack

from fabric_tools.generator.naming import resolve_hostname

logger = logging.getLogger(__name__)


class PlacementPlan(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)
    racks: List[Rack] = Field(default_factory=list)
    devices: List[Device] = Field(default_factory=list)

    @property
    def patch_panels(self) -> List[Device]:
        return [d for d in self.devices if d.role == "patch-panel"]

    @property
    def unracked(self) -> List[Device]:
        return [d for d in self.devices if d.rack_index is None and d.role not in ("external", "patch-panel")]


# -------------------------------
# Policies
# -------------------------------


def spine_rack_column(racks_per_row: int, policy: str) -> int:
    """0-based column of the spine rack among the row's leaf racks."""
    if policy == "beginning":
        return 0
    if policy == "end":
        return racks_per_row
    if policy.isdigit():
        return min(max(int(policy) - 1, 0), racks_per_row)
    return racks_per_row // 2


def leaf_rack_order(racks_per_row: int, policy: str) -> List[int]:
    """Order (1-based leaf rack numbers) in which a row's leaf racks are filled."""
    numbers = list(range(1, racks_per_row + 1))
    if not numbers:
        return []
    if policy == "end":
        return numbers[::-1]
    if policy == "middle":
        center = (racks_per_row + 1) // 2
        order = [center]
        for step in range(1, racks_per_row):
            for candidate in (center + step, center - step):
                if 1 <= candidate <= racks_per_row:
                    order.append(candidate)
        return order
    if policy.isdigit():
        start = min(max(int(policy), 1), racks_per_row)
        return numbers[start - 1 :] + numbers[: start - 1]
    return numbers


# -------------------------------
# Facility
# -------------------------------


def build_racks(config: TopologyConfig) -> List[Rack]:
    """Racks in facility order (hall, row, column); indices are global."""
    racks: List[Rack] = []
    column_of_spine = spine_rack_column(config.racks_per_row, config.tier1_placement)
    for h in range(1, config.halls + 1):
        for r in range(1, config.rows_per_hall + 1):
            if config.racks_per_row == 0:
                continue
            names = [(f"Hall {h} Row {r} Rack {k}", "leaf") for k in range(1, config.racks_per_row + 1)]
            names.insert(column_of_spine, (f"Hall {h} Row {r} Spine Rack", "spine"))
            for column, (name, rack_type) in enumerate(names):
                racks.append(
                    Rack(
                        index=len(racks),
                        name=name,
                        hall=h,
                        row=r,
                        position_in_row=column,
                        rack_type=rack_type,
                        width_cm=config.rack_width_cm,
                        height_ru=config.rack_height_ru,
                        depth_cm=config.rack_depth_cm,
                        capacity=config.devices_per_rack,
                    )
                )
    return racks


class _RackFill:
    """RU occupancy of one rack. RU 1 is the bottom slot."""

    def __init__(self, rack: Rack):
        self.rack = rack
        self.occupied: Dict[int, str] = {}

    def _free(self, bottom: int, height: int) -> bool:
        top = bottom + height - 1
        if bottom < 1 or top > self.rack.height_ru - 1:
            return False
        return all(ru not in self.occupied for ru in range(bottom, top + 1))

    def _take(self, bottom: int, height: int, hostname: str) -> int:
        for ru in range(bottom, bottom + height):
            self.occupied[ru] = hostname
        return bottom

    def from_top(self, height: int, hostname: str) -> Optional[int]:
        for top in range(self.rack.height_ru - 1, 0, -1):
            bottom = top - height + 1
            if self._free(bottom, height):
                return self._take(bottom, height, hostname)
        return None

    def from_bottom(self, height: int, hostname: str) -> Optional[int]:
        for bottom in range(1, self.rack.height_ru):
            if self._free(bottom, height):
                return self._take(bottom, height, hostname)
        return None


# -------------------------------
# Planner
# -------------------------------


class _Planner:
    def __init__(self, devices: List[Device], config: TopologyConfig, defaults: FacilityDefaults):
        self.config = config
        self.defaults = defaults
        self.devices = list(devices)
        self.racks = build_racks(config)
        self.fills = {rack.index: _RackFill(rack) for rack in self.racks}
        self.by_row: Dict[tuple[int, int], List[Rack]] = {}
        for rack in self.racks:
            self.by_row.setdefault(rack.row_key, []).append(rack)
        self.placed: Dict[str, Device] = {}

    def _update(self, device: Device, **fields) -> Device:
        if device.hostname in self.placed:
            raise RuntimeError(f"{device.hostname} was already placed in this run")
        updated = device.model_copy(update=fields)
        self.placed[device.hostname] = updated
        return updated

    def _put(self, device: Device, rack: Optional[Rack], *, bottom_up: bool = False) -> Device:
        if rack is None:
            return self._update(device)
        fill = self.fills[rack.index]
        take = fill.from_bottom if bottom_up else fill.from_top
        position = take(device.height_ru, device.hostname)
        if position is None:
            logger.debug("No room for %s in %s, leaving it unracked", device.hostname, rack.name)
            return self._update(device, hall=rack.hall, row=rack.row)
        return self._update(
            device,
            hall=rack.hall,
            row=rack.row,
            rack_index=rack.index,
            rack_name=rack.name,
            rack_position=position,
        )

    def place_mgmt(self) -> None:
        for device in self.devices:
            if device.role != "mgmt-switch":
                continue
            row = device.serves_row or 1
            racks = self.by_row.get((device.serves_hall, row), [])
            column = (device.serves_rack or 1) - 1
            rack = racks[column] if column < len(racks) else None
            self._put(device, rack)

    def place_spine_tier(self) -> None:
        spine_racks = [r for r in self.racks if r.rack_type == "spine"]
        dealt = 0
        for device in self.devices:
            if device.role not in SPINE_TIER_ROLES:
                continue
            rack = spine_racks[dealt % len(spine_racks)] if spine_racks else None
            dealt += 1
            self._put(device, rack)

    def leaf_slots(self) -> List[Rack]:
        order = leaf_rack_order(self.config.racks_per_row, self.config.leaf_placement)
        slots: List[Rack] = []
        for racks in self.by_row.values():
            leaf_racks = dict(enumerate((r for r in racks if r.rack_type == "leaf"), start=1))
            for number in order:
                slots.extend([leaf_racks[number]] * self.config.devices_per_rack)
        return slots

    def place_leaf_tier(self) -> None:
        slots = iter(self.leaf_slots())
        for device in self.devices:
            if device.role in LEAF_TIER_ROLES:
                self._put(device, next(slots, None))

    def place_gpu_nodes(self) -> None:
        racks = {r.index: r for r in self.racks}
        for device in self.devices:
            if device.role != "gpu-node":
                continue
            leaf = self.placed.get(device.leaf) if device.leaf else None
            if leaf is None or leaf.rack_index is None:
                fields = {"hall": leaf.hall, "row": leaf.row} if leaf is not None else {}
                self._update(device, **fields)
                continue
            self._put(device, racks[leaf.rack_index], bottom_up=True)

    def patch_panels(self) -> List[Device]:
        if not self.config.patch_panel_routing:
            return []
        panels: List[Device] = []
        next_index = max((d.index for d in self.devices), default=-1) + 1
        for h in range(1, self.config.halls + 1):
            for r in range(1, self.config.rows_per_hall + 1):
                ordinal = len(panels) + 1
                panels.append(
                    PatchPanel(
                        index=next_index + len(panels),
                        hostname=resolve_hostname(
                            self.defaults.hostname_pattern,
                            "patch-panel",
                            ordinal,
                            datacenter=self.config.datacenter_name,
                            region=self.config.region_name,
                        ),
                        model=self.defaults.models.patch_panel,
                        port_count=self.defaults.patch_panel_ports,
                        hall=h,
                        row=r,
                    )
                )
        return panels

    def run(self) -> PlacementPlan:
        self.place_mgmt()
        self.place_spine_tier()
        self.place_leaf_tier()
        self.place_gpu_nodes()
        devices = [self.placed.get(d.hostname, d) for d in self.devices]
        devices.extend(self.patch_panels())
        return PlacementPlan(racks=self.racks, devices=devices)


@spy_trace
def plan_placement(
    devices: List[Device],
    config: TopologyConfig,
    defaults: FacilityDefaults | None = None,
) -> PlacementPlan:
    """Assign hall/row/rack/RU to every rackable device.

    Externals are never racked. Devices that do not fit keep their hall/row
    (when known) and show up in ``PlacementPlan.unracked``.
    """
    plan = _Planner(devices, config, defaults or FacilityDefaults()).run()
    logger.debug(
        "Placed %d devices in %d racks, %d unracked, %d patch panels",
        sum(1 for d in plan.devices if d.rack_index is not None),
        len(plan.racks),
        len(plan.unracked),
        len(plan.patch_panels),
    )
    return plan
