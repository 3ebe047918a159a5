# Box and spacing constants for the fabric diagram, in canvas pixels.

NODE_W = 140
NODE_H = 48
PP_NODE_H = 32
GPU_NODE_H = 40
MGMT_NODE_W = 120
MGMT_NODE_H = 40

H_GAP = 20
BASE_TIER_GAP = 40
PP_GAP = 30
LEAF_GPU_GAP = 60
MGMT_V_GAP = 12
MGMT_COLUMN_W = MGMT_NODE_W + 40
MGMT_COLUMN_OFFSET = 20

LINK_SPACING = 6
IF_LABEL_H = 9
IF_BLOCK_PAD = 4

PAD_X = 20
PAD_Y = 20

MGMT_LINE_OPACITY = 0.2

# Top-to-bottom tier order. CLOS and hierarchical roles share the vertical
# slots, and the two never appear in the same fabric.
TIER_ORDER = (
    "external",
    "super-spine",
    "core",
    "spine",
    "distribution",
    "patch-panel",
    "leaf",
    "access",
    "gpu-node",
)

TIER_TITLES = {
    "external": "EXTERNAL",
    "super-spine": "SUPER-SPINE",
    "core": "CORE",
    "spine": "SPINE",
    "distribution": "DISTRIBUTION",
    "patch-panel": "PATCH PANELS",
    "leaf": "LEAF",
    "access": "ACCESS",
    "gpu-node": "GPU NODES",
    "mgmt-switch": "MGMT",
}

ROLE_INTENTS = {
    "external": "purple",
    "super-spine": "primary",
    "core": "primary",
    "spine": "primary",
    "distribution": "primary",
    "leaf": "primary",
    "access": "primary",
    "patch-panel": "amber",
    "gpu-node": "green",
    "mgmt-switch": "blue",
}


def node_height(role: str) -> int:
    if role == "patch-panel":
        return PP_NODE_H
    if role == "gpu-node":
        return GPU_NODE_H
    if role == "mgmt-switch":
        return MGMT_NODE_H
    return NODE_H


def label_block_height(count: int) -> int:
    """Height reserved for ``count`` stacked interface labels."""
    return count * IF_LABEL_H + IF_BLOCK_PAD if count > 0 else 0
