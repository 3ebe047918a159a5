from .engine import compute_layout, layout_preview, nearest_panel, tier_gap
from .models import DiagramLayout, InterfaceLabel, LinkSegment, NodeBox, TierLabel

__all__ = [
    "DiagramLayout",
    "InterfaceLabel",
    "LinkSegment",
    "NodeBox",
    "TierLabel",
    "compute_layout",
    "layout_preview",
    "nearest_panel",
    "tier_gap",
]
