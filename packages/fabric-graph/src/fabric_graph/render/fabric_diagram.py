import graphviz

from fabric_graph.layout.models import DiagramLayout

POINTS_PER_INCH = 72.0

INTENT_COLORS = {
    "primary": "slategray",
    "purple": "mediumpurple",
    "amber": "orange",
    "green": "seagreen",
    "blue": "royalblue",
}


def _pos(x: float, y: float, height: float) -> str:
    # graphviz puts the origin bottom-left
    return f"{x:.1f},{height - y:.1f}!"


def render_layout(layout: DiagramLayout, name: str = "fabric_topology") -> graphviz.Digraph:
    """
    Render a computed layout with every node pinned where the layout put it:
    - neato with ``pos`` pins, no spline routing.
    - Patch-panel routed links become two edges through the panel.
    - Management lines are dashed and faint.
    """
    dot = graphviz.Digraph(name, format="svg", engine="neato")
    dot.attr(splines="false", outputorder="edgesfirst", overlap="true")
    dot.attr("node", shape="box", style="rounded,filled", fillcolor="white", fontsize="10", fixedsize="true")
    dot.attr("edge", arrowhead="none")

    for node in layout.nodes:
        color = INTENT_COLORS.get(node.intent, "black")
        style = "rounded,filled,dashed" if node.dashed else "rounded,filled"
        label = f"{node.label}\\n{node.sublabel}" if node.sublabel else node.label
        dot.node(
            node.hostname,
            label=label,
            pos=_pos(node.center_x, node.center_y, layout.height),
            width=f"{node.width / POINTS_PER_INCH:.3f}",
            height=f"{node.height / POINTS_PER_INCH:.3f}",
            color=color,
            style=style,
        )

    for seg in layout.segments:
        attrs = {"style": "dashed" if seg.dashed else "solid"}
        if seg.kind == "mgmt":
            attrs["color"] = f"#4169e1{int(seg.opacity * 255):02x}"
        if seg.kind == "patched" and seg.via:
            if seg.half == "upper":
                dot.edge(seg.source, seg.via, **attrs)
            else:
                dot.edge(seg.via, seg.target, **attrs)
            continue
        dot.edge(seg.source, seg.target, **attrs)

    return dot
