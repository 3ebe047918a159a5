"""Tests for deterministic fabric generation."""

from collections import Counter

import pytest
from fabric_core.models.defaults import FacilityDefaults
from fabric_core.resolver import resolve_config
from fabric_tools.generator import generate_fabric, mgmt_scopes, resolve_hostname, striped_leaf_index
from fabric_tools.generator.addressing import P2PAllocator, asn, loopback, mgmt_ip
from fabric_tools.generator.naming import InterfaceAllocator, interface_prefix


def _generate(defaults=None, **raw):
    raw.setdefault("architecture", "clos")
    config = resolve_config(raw, defaults)
    return generate_fabric(config, defaults)


@pytest.fixture
def large_clos():
    """4 spines x 16 leaves at 2 links per pair."""
    return _generate(tier1_count=4, tier2_count=16, racks_per_row=8, devices_per_rack=2, mgmt_switch_distribution="none")


def _interfaces_per_host(links):
    counts = Counter()
    for link in links:
        counts[link.a.hostname] += 1
        counts[link.b.hostname] += 1
    return counts


class TestClos:
    """Spine/leaf mesh, counts and addressing."""

    def test_link_count(self, large_clos):
        assert len(large_clos.fabric_links) == 4 * 16 * 2
        assert {link.link_class for link in large_clos.fabric_links} == {"fabric"}

    def test_interfaces_per_device(self, large_clos):
        counts = _interfaces_per_host(large_clos.fabric_links)
        assert counts["spine-1"] == 32
        assert counts["leaf-16"] == 8
        spine_ifaces = [l.a.interface for l in large_clos.fabric_links if l.a.hostname == "spine-1"]
        assert spine_ifaces == [f"Ethernet{n}" for n in range(1, 33)]

    def test_point_to_point_addresses(self, large_clos):
        first, second = large_clos.fabric_links[:2]
        assert (first.a.hostname, first.b.hostname) == ("spine-1", "leaf-1")
        assert (first.a.ip, first.b.ip, first.subnet) == ("10.1.0.0", "10.1.0.1", "10.1.0.0/31")
        assert (second.a.ip, second.b.ip, second.subnet) == ("10.1.0.2", "10.1.0.3", "10.1.0.2/31")
        subnets = [link.subnet for link in large_clos.fabric_links]
        assert len(set(subnets)) == len(subnets)

    def test_device_addressing(self, large_clos):
        devices = {d.hostname: d for d in large_clos.devices}
        spine = devices["spine-2"]
        assert (spine.loopback, spine.asn, spine.mgmt_ip) == ("10.255.0.2", 65000, "172.20.0.12")
        leaf = devices["leaf-3"]
        assert (leaf.loopback, leaf.asn, leaf.mgmt_ip) == ("10.255.1.3", 65003, "172.20.1.13")

    def test_large_fabric_addresses_are_unique(self):
        fabric = _generate(
            tier1_count=2, tier2_count=300, external_count=2, racks_per_row=150, devices_per_rack=2, mgmt_switch_distribution="per-rack"
        )
        switches = [d for d in fabric.devices if d.role != "mgmt-switch"]
        loopbacks = [d.loopback for d in switches]
        mgmt_ips = [d.mgmt_ip for d in fabric.devices]
        assert len(set(loopbacks)) == len(loopbacks) == 304
        assert len(set(mgmt_ips)) == len(mgmt_ips)
        asns = [d.asn for d in switches if d.role != "spine"]
        assert len(set(asns)) == len(asns)
        devices = {d.hostname: d for d in fabric.devices}
        assert devices["external-1"].loopback == "10.255.2.1"
        assert devices["leaf-257"].loopback == "10.255.9.1"

    def test_device_order(self, large_clos):
        roles = [d.role for d in large_clos.devices]
        assert roles == ["spine"] * 4 + ["leaf"] * 16
        assert [d.index for d in large_clos.devices] == list(range(20))

    def test_deterministic(self):
        raw = dict(tier1_count=2, tier2_count=4, gpu_cluster_count=1, gpu_include_fabric_cabling=True)
        assert _generate(**raw) == _generate(**raw)

    def test_frr_interface_names(self):
        fabric = _generate(vendor="frr", mgmt_switch_distribution="none")
        assert fabric.fabric_links[0].a.interface == "eth1"

    def test_custom_ratio(self):
        fabric = _generate(tier1_count=2, tier2_count=4, tier1_to_tier2_ratio=1)
        assert len(fabric.fabric_links) == 8

    def test_externals(self):
        fabric = _generate(external_count=2, external_names=["isp-a"], external_to_tier1_ratio=1)
        externals = [d for d in fabric.devices if d.role == "external"]
        assert [d.hostname for d in externals] == ["isp-a", "external-2"]
        assert [d.asn for d in externals] == [64999, 64998]
        assert all(d.device_type == "external" for d in externals)
        external_links = [l for l in fabric.fabric_links if l.link_class == "external"]
        assert len(external_links) == 2 * 2
        assert all(l.a.hostname in ("isp-a", "external-2") for l in external_links)

    def test_super_spine_pods(self):
        fabric = _generate(
            super_spine_enabled=True, super_spine_count=2, pods=2, tier1_count=2, tier2_count=2, mgmt_switch_distribution="none"
        )
        by_class = Counter(link.link_class for link in fabric.fabric_links)
        assert by_class["super-spine"] == 2 * 4 * 2
        assert by_class["fabric"] == 2 * (2 * 2 * 2)
        spines = [d for d in fabric.devices if d.role == "spine"]
        assert [d.pod for d in spines] == [1, 1, 2, 2]
        super_spines = [d for d in fabric.devices if d.role == "super-spine"]
        assert [d.loopback for d in super_spines] == ["10.255.3.1", "10.255.3.2"]
        # leaves only link to the spines of their own pod
        pod_of = {d.hostname: d.pod for d in fabric.devices if d.role in ("spine", "leaf")}
        for link in fabric.fabric_links:
            if link.link_class == "fabric":
                assert pod_of[link.a.hostname] == pod_of[link.b.hostname]


class TestHierarchical:
    """Core / distribution / access tiers."""

    def test_links_and_addressing(self):
        fabric = _generate(architecture="hierarchical", tier1_count=2, tier2_count=2, tier3_count=4, mgmt_switch_distribution="none")
        assert len(fabric.fabric_links) == 2 * 2 * 2 + 2 * 4 * 2
        assert fabric.fabric_links[0].subnet == "10.2.0.0/31"
        devices = {d.hostname: d for d in fabric.devices}
        assert devices["core-2"].asn == 64998
        assert devices["distribution-1"].asn == 65100
        assert devices["access-2"].asn == 65202
        assert devices["access-1"].loopback == "10.254.2.1"

    def test_externals_uplink_to_core(self):
        fabric = _generate(architecture="hierarchical", tier3_count=2, external_count=1, mgmt_switch_distribution="none")
        external_links = [l for l in fabric.fabric_links if l.link_class == "external"]
        assert {l.b.hostname for l in external_links} == {"core-1", "core-2"}


class TestGpuClusters:
    """GPU nodes are striped across leaves."""

    def test_striping_and_uplinks(self):
        fabric = _generate(tier1_count=2, tier2_count=4, gpu_cluster_count=1)
        (cluster,) = fabric.gpu_clusters
        assert cluster.node_count == 8
        assert cluster.total_gpus == 64
        assert cluster.leaf_assignments["gpu-node-1"] == "leaf-1"
        assert cluster.leaf_assignments["gpu-node-5"] == "leaf-1"
        assert cluster.leaf_assignments["gpu-node-8"] == "leaf-4"
        assert len(cluster.leaf_uplink_links) == 16
        assert all(l.link_class == "gpu-uplink" for l in cluster.leaf_uplink_links)
        assert cluster.fabric_links == []
        node = next(d for d in fabric.devices if d.hostname == "gpu-node-1")
        assert node.model == "MI300X 8-GPU Node"
        assert node.height_ru == 4
        assert node.mgmt_ip == "172.21.0.11"

    def test_striping_continues_across_clusters(self):
        fabric = _generate(tier1_count=2, tier2_count=4, gpu_cluster_count=2, gpu_nodes_per_cluster=3)
        second = fabric.gpu_clusters[1]
        assert second.name == "gpu-cluster-2"
        assert [second.leaf_assignments[h] for h in second.node_hostnames] == ["leaf-4", "leaf-1", "leaf-2"]

    @pytest.mark.parametrize("leaves,clusters,nodes", [(5, 2, 7), (7, 3, 11), (3, 4, 1)])
    def test_striping_is_balanced(self, leaves, clusters, nodes):
        fabric = _generate(tier2_count=leaves, gpu_cluster_count=clusters, gpu_nodes_per_cluster=nodes)
        total = clusters * nodes
        assert total % leaves != 0
        per_leaf = Counter(leaf for c in fabric.gpu_clusters for leaf in c.leaf_assignments.values())
        assert sum(per_leaf.values()) == total
        expected = {total // leaves, -(-total // leaves)}
        assert {per_leaf[f"leaf-{i}"] for i in range(1, leaves + 1)} <= expected

    def test_full_mesh_infiniband(self):
        fabric = _generate(tier2_count=4, gpu_cluster_count=1, gpu_include_fabric_cabling=True)
        links = fabric.gpu_clusters[0].fabric_links
        assert len(links) == 8 * 7 // 2
        assert links[0].a.interface == "IB1"
        assert links[0].subnet is None

    def test_ring_ethernet(self):
        fabric = _generate(
            tier2_count=4,
            gpu_cluster_count=1,
            gpu_include_fabric_cabling=True,
            gpu_fabric_topology="ring",
            gpu_interconnect="RoCE",
            gpu_include_leaf_uplinks=False,
        )
        links = fabric.gpu_clusters[0].fabric_links
        assert len(links) == 8
        assert links[0].a.interface == "Ethernet1"
        assert fabric.gpu_clusters[0].leaf_uplink_links == []

    def test_gpu_links_are_not_fabric_links(self):
        fabric = _generate(tier1_count=2, tier2_count=4, gpu_cluster_count=1)
        assert len(fabric.fabric_links) == 2 * 4 * 2

    def test_striped_leaf_index(self):
        assert striped_leaf_index(9, 4) == 1
        with pytest.raises(ValueError):
            striped_leaf_index(0, 0)


class TestManagement:
    """Management switch scopes per distribution policy."""

    @pytest.mark.parametrize(
        "distribution,expected",
        [("per-row", 4), ("per-hall", 2), ("per-rack", 2 * 2 * 5), ("count-per-row[2]", 8), ("none", 0)],
    )
    def test_scope_counts(self, distribution, expected):
        config = resolve_config(
            {"architecture": "clos", "halls": 2, "rows_per_hall": 2, "racks_per_row": 4, "mgmt_switch_distribution": distribution}
        )
        assert len(mgmt_scopes(config)) == expected
        assert config.mgmt_switch_count == expected

    def test_mgmt_switches_have_no_links(self):
        fabric = _generate()
        mgmt = [d for d in fabric.devices if d.role == "mgmt-switch"]
        assert [d.hostname for d in mgmt] == ["mgmt-switch-1"]
        assert mgmt[0].mgmt_ip == "172.20.7.11"
        assert not any(l.touches("mgmt-switch-1") for l in fabric.fabric_links)


class TestNaming:
    """Hostname patterns, interfaces and address helpers."""

    def test_pattern_with_datacenter(self):
        fabric = _generate(datacenter_name="DC West", mgmt_switch_distribution="none")
        assert fabric.devices[0].hostname == "dc-west-spine-1"

    def test_site_pattern(self):
        defaults = FacilityDefaults(hostname_pattern="$region-$datacenter-$role#")
        fabric = _generate(defaults, region_name="EU", datacenter_name="AMS1", mgmt_switch_distribution="none")
        assert fabric.devices[0].hostname == "eu-ams1-spine1"

    @pytest.mark.parametrize(
        "pattern,expected",
        [
            ("$datacenter-$role-#", "leaf-3"),
            ("-$region--$role-#-", "leaf-3"),
            ("$role#", "leaf3"),
        ],
    )
    def test_empty_variables_collapse(self, pattern, expected):
        assert resolve_hostname(pattern, "leaf", 3) == expected

    def test_interface_allocator(self):
        alloc = InterfaceAllocator(interface_prefix("Arista"))
        assert [alloc.next("a"), alloc.next("a"), alloc.next("b")] == ["Ethernet1", "Ethernet2", "Ethernet1"]
        assert alloc.next_ib("a") == "IB1"
        assert alloc.used("a") == 2

    def test_address_helpers(self):
        assert loopback("core", 1) == "10.254.0.1"
        assert mgmt_ip("distribution", 2) == "172.20.5.12"
        assert asn("access", 3) == 65203
        with pytest.raises(KeyError):
            loopback("gpu-node", 1)

    def test_address_blocks_interleave(self):
        assert loopback("leaf", 255) == "10.255.1.255"
        assert loopback("leaf", 256) == "10.255.9.0"
        assert mgmt_ip("spine", 246) == "172.20.8.0"
        assert loopback("spine", 8191) == "10.255.248.255"
        with pytest.raises(ValueError):
            loopback("spine", 8192)

    def test_asns_leave_the_16_bit_range(self):
        assert asn("leaf", 534) == 65534
        assert asn("leaf", 535) == 4_200_100_535
        assert asn("external", 488) == 64512
        assert asn("external", 489) == 4_200_200_489

    def test_p2p_allocator_crosses_octets(self):
        alloc = P2PAllocator("10.1.0.0")
        for _ in range(128):
            alloc.allocate()
        assert alloc.allocate() == ("10.1.1.0", "10.1.1.1", "10.1.1.0/31")
        assert alloc.allocated == 129
