from typing import List, Optional

from fabric_core.models.config import TopologyConfig
from fabric_core.models.defaults import FacilityDefaults
from fabric_core.models.device import Device, FabricSwitch
from fabric_core.models.link import FabricLink, LinkClass, LinkEnd

from fabric_tools.generator import addressing
from fabric_tools.generator.naming import InterfaceAllocator, RoleCounter, interface_prefix, resolve_hostname


class FabricBuilder:
    """Mutable scratch state for one generation run.

    Owns the device list, the link list and every counter, so two runs never
    share ordinals, interface numbers or addresses.
    """

    def __init__(self, config: TopologyConfig, defaults: FacilityDefaults):
        self.config = config
        self.defaults = defaults
        self.devices: List[Device] = []
        self.links: List[FabricLink] = []
        self.roles = RoleCounter()
        self.interfaces = InterfaceAllocator(interface_prefix(config.vendor))
        self.p2p = addressing.P2PAllocator(addressing.P2P_BASES[config.architecture])

    @property
    def next_index(self) -> int:
        return len(self.devices)

    def hostname(self, role: str, ordinal: int) -> str:
        return resolve_hostname(
            self.defaults.hostname_pattern,
            role,
            ordinal,
            datacenter=self.config.datacenter_name,
            region=self.config.region_name,
        )

    def add(self, device: Device) -> Device:
        self.devices.append(device)
        return device

    def add_switch(self, role: str, model: str, *, pod: Optional[int] = None, hostname: str = "") -> FabricSwitch:
        ordinal = self.roles.next(role)
        switch = FabricSwitch(
            index=self.next_index,
            hostname=hostname or self.hostname(role, ordinal),
            role=role,
            model=model,
            device_type="external" if role == "external" else "internal",
            loopback=addressing.loopback(role, ordinal),
            asn=addressing.asn(role, ordinal),
            mgmt_ip=addressing.mgmt_ip(role, ordinal),
            pod=pod,
        )
        self.add(switch)
        return switch

    def link(self, upper: Device, lower: Device, link_class: LinkClass) -> FabricLink:
        """Routed /31 link; ``upper`` becomes side A."""
        ip_a, ip_b, subnet = self.p2p.allocate()
        return FabricLink(
            a=LinkEnd(hostname=upper.hostname, interface=self.interfaces.next(upper.hostname), ip=ip_a),
            b=LinkEnd(hostname=lower.hostname, interface=self.interfaces.next(lower.hostname), ip=ip_b),
            subnet=subnet,
            link_class=link_class,
        )

    def connect(self, uppers: List[Device], lowers: List[Device], per_pair: int, link_class: LinkClass) -> List[FabricLink]:
        """Full bipartite mesh with ``per_pair`` parallel links, upper-major order."""
        created = []
        for upper in uppers:
            for lower in lowers:
                for _ in range(per_pair):
                    created.append(self.link(upper, lower, link_class))
        self.links.extend(created)
        return created
