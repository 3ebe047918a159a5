"""
Diagram layout for generated fabrics.

Tiers are stacked top to bottom in ``TIER_ORDER`` and centered horizontally.
The gap under a tier grows with the interface labels printed below it and
the labels printed above the next tier. Links that cross the patch-panel
tier bend through the panel nearest their midpoint. Management switches get
their own column on the right.
"""

import logging
from typing import Dict, List, Optional, Sequence, Tuple

from fabric_core.codebase.debug import spy_trace
from fabric_core.models.device import LEAF_TIER_ROLES, SPINE_TIER_ROLES, Device
from fabric_core.models.link import FabricLink
from fabric_core.models.preview import TopologyPreview

from fabric_graph.layout.constants import (
    BASE_TIER_GAP,
    H_GAP,
    IF_BLOCK_PAD,
    IF_LABEL_H,
    LEAF_GPU_GAP,
    LINK_SPACING,
    MGMT_COLUMN_OFFSET,
    MGMT_COLUMN_W,
    MGMT_LINE_OPACITY,
    MGMT_NODE_H,
    MGMT_NODE_W,
    MGMT_V_GAP,
    NODE_W,
    PAD_X,
    PAD_Y,
    PP_GAP,
    ROLE_INTENTS,
    TIER_ORDER,
    TIER_TITLES,
    label_block_height,
    node_height,
)
from fabric_graph.layout.models import DiagramLayout, InterfaceLabel, LinkSegment, NodeBox, TierLabel

logger = logging.getLogger(__name__)


def _sublabel(device: Device) -> str:
    for attr in ("loopback", "mgmt_ip"):
        value = getattr(device, attr, None)
        if value:
            return value
    return device.model


def tier_gap(upper: str, lower: str, upper_down_block: int, lower_up_block: int) -> int:
    """Vertical space between the bottom of ``upper`` and the top of ``lower``."""
    if lower == "gpu-node":
        return LEAF_GPU_GAP + upper_down_block
    if lower == "patch-panel":
        return BASE_TIER_GAP + upper_down_block + PP_GAP
    if upper == "patch-panel":
        return PP_GAP + BASE_TIER_GAP + lower_up_block
    return BASE_TIER_GAP + upper_down_block + lower_up_block


def tier_start_x(count: int, inner_width: float) -> float:
    row_width = count * (NODE_W + H_GAP) - H_GAP
    return PAD_X + (inner_width - row_width) / 2


def nearest_panel(panels: Sequence[NodeBox], x: float) -> Optional[NodeBox]:
    """Panel whose center is horizontally closest to ``x``; the first one wins ties."""
    best = None
    for panel in panels:
        if best is None or abs(panel.center_x - x) < abs(best.center_x - x):
            best = panel
    return best


def _pair_offsets(links: Sequence[FabricLink]) -> List[float]:
    """Horizontal offset of each link so parallel links between one pair fan out."""
    totals: Dict[frozenset, int] = {}
    for link in links:
        key = frozenset(link.hostnames)
        totals[key] = totals.get(key, 0) + 1
    seen: Dict[frozenset, int] = {}
    offsets = []
    for link in links:
        key = frozenset(link.hostnames)
        i = seen.get(key, 0)
        seen[key] = i + 1
        offsets.append((i - (totals[key] - 1) / 2) * LINK_SPACING)
    return offsets


class _Layout:
    def __init__(self, devices: Sequence[Device], links: Sequence[FabricLink]):
        self.tiers: List[Tuple[str, List[Device]]] = []
        for role in TIER_ORDER:
            members = [d for d in devices if d.role == role]
            if members:
                self.tiers.append((role, members))
        self.mgmt = [d for d in devices if d.role == "mgmt-switch"]
        self.tier_of: Dict[str, int] = {d.hostname: i for i, (_, members) in enumerate(self.tiers) for d in members}
        self.devices = {d.hostname: d for d in devices}

        self.links = [
            link
            for link in links
            if link.a.hostname in self.tier_of
            and link.b.hostname in self.tier_of
            and self.tier_of[link.a.hostname] != self.tier_of[link.b.hostname]
        ]
        self.up: Dict[str, List[str]] = {h: [] for h in self.tier_of}
        self.down: Dict[str, List[str]] = {h: [] for h in self.tier_of}
        self._collect_labels()

    def _is_gpu(self, hostname: str) -> bool:
        return self.devices[hostname].role == "gpu-node"

    def _ends(self, link: FabricLink):
        """(upper end, lower end) by tier index."""
        if self.tier_of[link.a.hostname] < self.tier_of[link.b.hostname]:
            return link.a, link.b
        return link.b, link.a

    def _collect_labels(self) -> None:
        for link in self.links:
            if self._is_gpu(link.a.hostname) or self._is_gpu(link.b.hostname):
                continue
            upper, lower = self._ends(link)
            self.down[upper.hostname].append(f"{upper.interface} → {lower.hostname}")
            self.up[lower.hostname].append(f"{lower.interface} → {upper.hostname}")

    def _block(self, members: List[Device], labels: Dict[str, List[str]]) -> int:
        return label_block_height(max((len(labels[d.hostname]) for d in members), default=0))

    def run(self) -> DiagramLayout:
        max_count = max((len(members) for _, members in self.tiers), default=0)
        inner_width = max(max_count * (NODE_W + H_GAP) - H_GAP, 0)
        fabric_width = inner_width + 2 * PAD_X

        boxes: Dict[str, NodeBox] = {}
        tier_labels: List[TierLabel] = []
        tier_y: List[float] = []
        y = PAD_Y
        bottom = PAD_Y
        for i, (role, members) in enumerate(self.tiers):
            height = node_height(role)
            tier_y.append(y)
            start = tier_start_x(len(members), inner_width)
            for j, d in enumerate(members):
                boxes[d.hostname] = self._box(d, start + j * (NODE_W + H_GAP), y, NODE_W, height)
            tier_labels.append(
                TierLabel(text=TIER_TITLES[role], role=role, x=0, y=y + height / 2, intent=ROLE_INTENTS[role])
            )
            down_block = self._block(members, self.down)
            bottom = y + height + down_block
            if i + 1 < len(self.tiers):
                next_role, next_members = self.tiers[i + 1]
                y += height + tier_gap(role, next_role, down_block, self._block(next_members, self.up))

        segments = self._link_segments(boxes)

        width = fabric_width
        if self.mgmt:
            width += MGMT_COLUMN_W
            mgmt_bottom = self._place_mgmt(boxes, fabric_width, segments, tier_labels)
            bottom = max(bottom, mgmt_bottom)

        nodes = [self._with_labels(boxes[h]) for h in boxes]
        return DiagramLayout(
            width=width,
            height=bottom + PAD_Y,
            nodes=nodes,
            segments=segments,
            tier_labels=tier_labels,
        )

    def _box(self, d: Device, x: float, y: float, width: float, height: float) -> NodeBox:
        return NodeBox(
            hostname=d.hostname,
            role=d.role,
            x=x,
            y=y,
            width=width,
            height=height,
            label=d.hostname,
            sublabel=_sublabel(d),
            intent=ROLE_INTENTS.get(d.role, "primary"),
            dashed=d.role == "patch-panel",
        )

    def _with_labels(self, box: NodeBox) -> NodeBox:
        labels = []
        ups = self.up.get(box.hostname, [])
        for k, text in enumerate(ups):
            labels.append(
                InterfaceLabel(
                    text=text,
                    x=box.center_x,
                    y=box.y - IF_BLOCK_PAD - (len(ups) - 1 - k) * IF_LABEL_H,
                    anchor="above",
                )
            )
        for k, text in enumerate(self.down.get(box.hostname, [])):
            labels.append(
                InterfaceLabel(
                    text=text,
                    x=box.center_x,
                    y=box.bottom + IF_BLOCK_PAD + (k + 1) * IF_LABEL_H,
                    anchor="below",
                )
            )
        if not labels:
            return box
        return box.model_copy(update={"interface_labels": labels})

    def _link_segments(self, boxes: Dict[str, NodeBox]) -> List[LinkSegment]:
        pp_tier = next((i for i, (role, _) in enumerate(self.tiers) if role == "patch-panel"), None)
        panels = [boxes[d.hostname] for d in self.tiers[pp_tier][1]] if pp_tier is not None else []

        segments: List[LinkSegment] = []
        for link, off in zip(self.links, _pair_offsets(self.links)):
            upper, lower = self._ends(link)
            ub, lb = boxes[upper.hostname], boxes[lower.hostname]
            start = (ub.center_x + off, ub.bottom)
            end = (lb.center_x + off, lb.y)
            gpu = self._is_gpu(lower.hostname)
            crosses = pp_tier is not None and self.tier_of[upper.hostname] < pp_tier < self.tier_of[lower.hostname]
            panel = nearest_panel(panels, (ub.center_x + lb.center_x) / 2) if crosses else None
            if panel is None:
                segments.append(
                    LinkSegment(
                        source=upper.hostname,
                        target=lower.hostname,
                        x1=start[0],
                        y1=start[1],
                        x2=end[0],
                        y2=end[1],
                        kind="gpu" if gpu else "fabric",
                    )
                )
                continue
            px = panel.center_x + off
            for half, (x1, y1), (x2, y2) in (("upper", start, (px, panel.y)), ("lower", (px, panel.bottom), end)):
                segments.append(
                    LinkSegment(
                        source=upper.hostname,
                        target=lower.hostname,
                        x1=x1,
                        y1=y1,
                        x2=x2,
                        y2=y2,
                        kind="patched",
                        via=panel.hostname,
                        half=half,
                    )
                )

        linked_gpus = {h for link in self.links for h in link.hostnames if self._is_gpu(h)}
        for hostname, d in self.devices.items():
            if d.role != "gpu-node" or hostname in linked_gpus or hostname not in boxes:
                continue
            leaf = boxes.get(d.leaf) if d.leaf else None
            if leaf is None:
                continue
            gb = boxes[hostname]
            segments.append(
                LinkSegment(
                    source=leaf.hostname,
                    target=hostname,
                    x1=leaf.center_x,
                    y1=leaf.bottom,
                    x2=gb.center_x,
                    y2=gb.y,
                    kind="gpu-association",
                    dashed=True,
                )
            )
        return segments

    def _place_mgmt(
        self,
        boxes: Dict[str, NodeBox],
        fabric_width: float,
        segments: List[LinkSegment],
        tier_labels: List[TierLabel],
    ) -> float:
        managed = [boxes[h] for h, d in self.devices.items() if h in boxes and d.role in SPINE_TIER_ROLES + LEAF_TIER_ROLES]
        count = len(self.mgmt)
        stack_height = count * MGMT_NODE_H + (count - 1) * MGMT_V_GAP
        if managed:
            top = min(b.y for b in managed)
            bottom = max(b.bottom for b in managed)
            start_y = top + (bottom - top - stack_height) / 2
        else:
            start_y = PAD_Y
        start_y = max(start_y, PAD_Y)
        x = fabric_width + MGMT_COLUMN_OFFSET

        for m, d in enumerate(self.mgmt):
            box = self._box(d, x, start_y + m * (MGMT_NODE_H + MGMT_V_GAP), MGMT_NODE_W, MGMT_NODE_H)
            boxes[d.hostname] = box
            for target in managed:
                segments.append(
                    LinkSegment(
                        source=d.hostname,
                        target=target.hostname,
                        x1=target.x + target.width,
                        y1=target.center_y,
                        x2=box.x,
                        y2=box.center_y,
                        kind="mgmt",
                        dashed=True,
                        opacity=MGMT_LINE_OPACITY,
                    )
                )
        tier_labels.append(
            TierLabel(
                text=TIER_TITLES["mgmt-switch"],
                role="mgmt-switch",
                x=x,
                y=start_y - IF_BLOCK_PAD,
                intent=ROLE_INTENTS["mgmt-switch"],
            )
        )
        return start_y + stack_height


@spy_trace
def compute_layout(devices: Sequence[Device], links: Sequence[FabricLink]) -> DiagramLayout:
    """Geometry for a device/link list. Never fails; an empty list gives an empty canvas."""
    layout = _Layout(devices, links).run()
    logger.debug(
        "Layout %sx%s: %d nodes, %d segments", layout.width, layout.height, len(layout.nodes), len(layout.segments)
    )
    return layout


def layout_preview(preview: TopologyPreview) -> DiagramLayout:
    return compute_layout(preview.devices, preview.all_links())
