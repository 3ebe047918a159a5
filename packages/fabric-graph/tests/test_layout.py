"""Tests for the tiered diagram layout."""

import pytest
from fabric_core.models.device import FabricSwitch, GpuNode, MgmtSwitch, PatchPanel
from fabric_core.models.link import FabricLink, LinkEnd
from fabric_graph.layout import compute_layout, layout_preview, nearest_panel, tier_gap
from fabric_graph.layout.constants import LINK_SPACING, MGMT_COLUMN_OFFSET, MGMT_COLUMN_W, MGMT_LINE_OPACITY, NODE_H
from fabric_graph.layout.models import NodeBox
from fabric_tools.preview import build_preview


def switch(hostname, role, index=0):
    return FabricSwitch(index=index, hostname=hostname, role=role, model="M", loopback="10.255.0.1", asn=65000, mgmt_ip="172.20.0.11")


def link(a, b, n=1, link_class="fabric"):
    return FabricLink(
        a=LinkEnd(hostname=a, interface=f"Ethernet{n}"),
        b=LinkEnd(hostname=b, interface=f"Ethernet{n}"),
        link_class=link_class,
    )


def panel_box(hostname, x):
    return NodeBox(hostname=hostname, role="patch-panel", x=x, y=0, width=140, height=32, label=hostname)


@pytest.fixture
def spine_leaf():
    devices = [switch("spine-1", "spine"), switch("spine-2", "spine"), switch("leaf-1", "leaf"), switch("leaf-2", "leaf")]
    links = [link(s, l, n) for n, (s, l) in enumerate([(s, l) for s in ("spine-1", "spine-2") for l in ("leaf-1", "leaf-2")], 1)]
    return devices, links


class TestTierGeometry:
    """Tier spacing grows with interface labels."""

    def test_empty(self):
        layout = compute_layout([], [])
        assert (layout.width, layout.height) == (40, 40)
        assert layout.nodes == []
        assert layout.segments == []

    @pytest.mark.parametrize(
        "upper,lower,down,up,expected",
        [
            ("spine", "leaf", 22, 22, 84),
            ("leaf", "gpu-node", 13, 0, 73),
            ("spine", "patch-panel", 22, 0, 92),
            ("patch-panel", "leaf", 0, 22, 92),
        ],
    )
    def test_tier_gap(self, upper, lower, down, up, expected):
        assert tier_gap(upper, lower, down, up) == expected

    def test_spine_leaf_positions(self, spine_leaf):
        layout = compute_layout(*spine_leaf)
        spine, leaf = layout.node("spine-1"), layout.node("leaf-1")
        assert layout.width == 2 * 140 + 20 + 40
        assert spine.y == 20
        # two labels under each spine, two above each leaf
        assert leaf.y - spine.bottom == 84
        assert layout.node("spine-2").x - spine.x == 160
        assert [t.text for t in layout.tier_labels] == ["SPINE", "LEAF"]

    def test_narrow_tier_is_centered(self):
        devices = [switch("spine-1", "spine"), switch("leaf-1", "leaf"), switch("leaf-2", "leaf"), switch("leaf-3", "leaf")]
        layout = compute_layout(devices, [])
        assert layout.node("spine-1").center_x == layout.node("leaf-2").center_x

    def test_interface_labels(self, spine_leaf):
        layout = compute_layout(*spine_leaf)
        spine = layout.node("spine-1")
        below = [l.text for l in spine.interface_labels if l.anchor == "below"]
        assert below == ["Ethernet1 → leaf-1", "Ethernet2 → leaf-2"]
        assert all(l.y > spine.bottom for l in spine.interface_labels)
        leaf = layout.node("leaf-1")
        assert [l.anchor for l in leaf.interface_labels] == ["above", "above"]

    def test_parallel_links_fan_out(self):
        devices = [switch("spine-1", "spine"), switch("leaf-1", "leaf")]
        layout = compute_layout(devices, [link("spine-1", "leaf-1", 1), link("spine-1", "leaf-1", 2)])
        first, second = layout.segments_between("spine-1", "leaf-1")
        assert second.x1 - first.x1 == LINK_SPACING

    def test_same_tier_links_are_not_drawn(self):
        devices = [switch("leaf-1", "leaf"), switch("leaf-2", "leaf")]
        assert compute_layout(devices, [link("leaf-1", "leaf-2")]).segments == []


class TestPatchPanels:
    """Links crossing the panel tier bend through a panel."""

    def test_nearest_panel_first_wins_ties(self):
        panels = [panel_box("pp-1", 0), panel_box("pp-2", 200)]
        assert nearest_panel(panels, 170).hostname == "pp-1"
        assert nearest_panel(panels, 171).hostname == "pp-2"
        assert nearest_panel([], 10) is None

    def test_patched_link_has_two_segments(self):
        devices = [
            switch("spine-1", "spine"),
            switch("leaf-1", "leaf"),
            PatchPanel(index=2, hostname="patch-panel-1", model="PP", port_count=192, hall=1, row=1),
        ]
        layout = compute_layout(devices, [link("spine-1", "leaf-1")])
        segments = layout.segments_between("spine-1", "leaf-1")
        assert len(segments) == 2
        assert all(s.kind == "patched" and s.via == "patch-panel-1" for s in segments)
        assert all((s.source, s.target) == ("spine-1", "leaf-1") for s in segments)
        panel = layout.node("patch-panel-1")
        assert segments[0].y2 == panel.y
        assert segments[1].y1 == panel.bottom
        assert [s.half for s in segments] == ["upper", "lower"]
        assert panel.dashed
        assert [t.text for t in layout.tier_labels] == ["SPINE", "PATCH PANELS", "LEAF"]


class TestGpuAndManagement:
    """GPU tier and the management column."""

    def _gpu(self, hostname, leaf):
        return GpuNode(index=9, hostname=hostname, model="G", mgmt_ip="172.21.0.11", cluster_name="gpu-cluster-1", gpu_count=8, leaf=leaf)

    def test_gpu_uplinks_have_no_labels(self):
        devices = [switch("leaf-1", "leaf"), self._gpu("gpu-node-1", "leaf-1")]
        layout = compute_layout(devices, [link("leaf-1", "gpu-node-1", link_class="gpu-uplink")])
        assert layout.node("leaf-1").interface_labels == []
        (segment,) = layout.segments
        assert segment.kind == "gpu"
        assert layout.node("gpu-node-1").y - layout.node("leaf-1").bottom == 60

    def test_unlinked_gpu_gets_association_line(self):
        devices = [switch("leaf-1", "leaf"), self._gpu("gpu-node-1", "leaf-1")]
        (segment,) = compute_layout(devices, []).segments
        assert segment.kind == "gpu-association"
        assert segment.dashed
        assert (segment.source, segment.target) == ("leaf-1", "gpu-node-1")

    def test_mgmt_column(self, spine_leaf):
        devices, links = spine_leaf
        mgmt = MgmtSwitch(index=5, hostname="mgmt-switch-1", model="CCS", mgmt_ip="172.20.7.11", serves_hall=1)
        plain = compute_layout(devices, links)
        layout = compute_layout(devices + [mgmt], links)
        assert layout.width == plain.width + MGMT_COLUMN_W
        box = layout.node("mgmt-switch-1")
        assert box.x == plain.width + MGMT_COLUMN_OFFSET
        mgmt_lines = [s for s in layout.segments if s.kind == "mgmt"]
        assert {s.target for s in mgmt_lines} == {"spine-1", "spine-2", "leaf-1", "leaf-2"}
        assert all(s.dashed and s.opacity == MGMT_LINE_OPACITY for s in mgmt_lines)
        assert layout.tier_labels[-1].text == "MGMT"
        # the column is centered on the managed tiers
        spine, leaf = layout.node("spine-1"), layout.node("leaf-1")
        assert box.center_y == pytest.approx((spine.y + leaf.bottom) / 2)
        assert leaf.height == NODE_H


class TestPreviewLayout:
    def test_generated_fabric(self):
        preview = build_preview({"architecture": "clos", "gpu_cluster_count": 1, "patch_panel_routing": True})
        layout = layout_preview(preview)
        assert {n.hostname for n in layout.nodes} == {d.hostname for d in preview.devices}
        assert any(s.kind == "patched" for s in layout.segments)
        assert any(s.kind == "gpu" for s in layout.segments)
        assert any(s.kind == "mgmt" for s in layout.segments)

    def test_links_take_the_nearest_row_panel(self):
        preview = build_preview(
            {
                "architecture": "clos",
                "tier1_count": 4,
                "tier2_count": 4,
                "rows_per_hall": 2,
                "racks_per_row": 2,
                "devices_per_rack": 1,
                "mgmt_switch_distribution": "none",
                "patch_panel_routing": True,
            }
        )
        layout = layout_preview(preview)

        def by_x(role):
            return sorted((n for n in layout.nodes if n.role == role), key=lambda n: n.x)

        panels, spines, leaves = by_x("patch-panel"), by_x("spine"), by_x("leaf")
        assert len(panels) == 2
        left = layout.segments_between(spines[0].hostname, leaves[0].hostname)
        right = layout.segments_between(spines[-1].hostname, leaves[-1].hostname)
        assert left and right
        assert {s.via for s in left} == {panels[0].hostname}
        assert {s.via for s in right} == {panels[-1].hostname}
