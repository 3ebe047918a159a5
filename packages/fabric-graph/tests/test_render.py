"""Tests for the graphviz rendering of a computed layout."""

from fabric_core.models.device import FabricSwitch, MgmtSwitch, PatchPanel
from fabric_core.models.link import FabricLink, LinkEnd
from fabric_graph.layout import DiagramLayout, LinkSegment, NodeBox, compute_layout
from fabric_graph.render import render_layout


def _switch(hostname, role):
    return FabricSwitch(index=0, hostname=hostname, role=role, model="M", loopback="10.255.0.1", asn=65000, mgmt_ip="172.20.0.11")


def _layout():
    devices = [
        _switch("spine-1", "spine"),
        _switch("leaf-1", "leaf"),
        PatchPanel(index=2, hostname="patch-panel-1", model="PP", port_count=192, hall=1, row=1),
        MgmtSwitch(index=3, hostname="mgmt-switch-1", model="CCS", mgmt_ip="172.20.7.11", serves_hall=1),
    ]
    links = [
        FabricLink(
            a=LinkEnd(hostname="spine-1", interface="Ethernet1"),
            b=LinkEnd(hostname="leaf-1", interface="Ethernet1"),
        )
    ]
    return compute_layout(devices, links)


class TestRenderLayout:
    """Nodes are pinned and patched links go through the panel."""

    def test_engine_and_format(self):
        dot = render_layout(_layout(), name="lab")
        assert dot.name == "lab"
        assert dot.engine == "neato"
        assert dot.format == "svg"

    def test_nodes_are_pinned(self):
        layout = _layout()
        source = render_layout(layout).source
        spine = layout.node("spine-1")
        assert f'pos="{spine.center_x:.1f},{layout.height - spine.center_y:.1f}!"' in source
        assert "10.255.0.1" in source

    def test_patched_edges_through_panel(self):
        source = render_layout(_layout()).source
        assert '"spine-1" -> "patch-panel-1"' in source
        assert '"patch-panel-1" -> "leaf-1"' in source
        assert '"spine-1" -> "leaf-1"' not in source

    def test_mgmt_edges_dashed(self):
        source = render_layout(_layout()).source
        mgmt_lines = [line for line in source.splitlines() if line.strip().startswith('"mgmt-switch-1" ->')]
        assert len(mgmt_lines) == 2
        assert all("dashed" in line for line in mgmt_lines)

    def test_patched_halves_do_not_depend_on_order(self):
        boxes = [
            NodeBox(hostname=h, role=r, x=0, y=y, width=140, height=48, label=h)
            for h, r, y in (("spine-1", "spine", 20), ("patch-panel-1", "patch-panel", 100), ("leaf-1", "leaf", 180))
        ]
        common = dict(source="spine-1", target="leaf-1", kind="patched", via="patch-panel-1")
        layout = DiagramLayout(
            width=180,
            height=250,
            nodes=boxes,
            segments=[
                LinkSegment(x1=70, y1=132, x2=70, y2=180, half="lower", **common),
                LinkSegment(x1=70, y1=68, x2=70, y2=100, half="upper", **common),
            ],
        )
        source = render_layout(layout).source
        assert '"spine-1" -> "patch-panel-1"' in source
        assert '"patch-panel-1" -> "leaf-1"' in source
        assert '"leaf-1" -> "patch-panel-1"' not in source
