from typing import List, NamedTuple, Optional

from fabric_core.models.config import TopologyConfig
from fabric_core.models.device import MgmtSwitch

from fabric_tools.generator import addressing
from fabric_tools.generator.builder import FabricBuilder


class MgmtScope(NamedTuple):
    hall: int
    row: Optional[int]
    rack: Optional[int]  # 1-based column in the row, spine rack included
    slot: int


def mgmt_scopes(config: TopologyConfig) -> List[MgmtScope]:
    """One entry per management switch, in hall/row/rack order."""
    dist = config.mgmt_switch_distribution
    halls = range(1, config.halls + 1)
    rows = range(1, config.rows_per_hall + 1)
    if dist == "per-hall":
        return [MgmtScope(h, None, None, 0) for h in halls]
    if dist == "per-row":
        return [MgmtScope(h, r, None, 0) for h in halls for r in rows]
    if dist == "per-rack":
        return [
            MgmtScope(h, r, k, 0) for h in halls for r in rows for k in range(1, config.racks_in_row + 1)
        ]
    if dist == "count-per-row":
        return [MgmtScope(h, r, None, m) for h in halls for r in rows for m in range(config.mgmt_switches_per_row)]
    return []


def build_mgmt_switches(b: FabricBuilder) -> List[MgmtSwitch]:
    """Management switches are out-of-band: they never get FabricLinks."""
    switches = []
    for scope in mgmt_scopes(b.config):
        ordinal = b.roles.next("mgmt-switch")
        switch = MgmtSwitch(
            index=b.next_index,
            hostname=b.hostname("mgmt-switch", ordinal),
            model=b.config.mgmt_switch_model,
            mgmt_ip=addressing.mgmt_ip("mgmt-switch", ordinal),
            serves_hall=scope.hall,
            serves_row=scope.row,
            serves_rack=scope.rack,
            slot=scope.slot,
        )
        b.add(switch)
        switches.append(switch)
    return switches
