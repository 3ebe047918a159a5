from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

SegmentKind = Literal["fabric", "patched", "gpu", "gpu-association", "mgmt"]
SegmentHalf = Literal["upper", "lower"]


class InterfaceLabel(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)
    text: str
    x: float
    y: float
    anchor: Literal["above", "below"]


class NodeBox(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)
    hostname: str
    role: str
    x: float
    y: float
    width: float
    height: float
    label: str
    sublabel: str = ""
    intent: str = "primary"
    dashed: bool = False
    interface_labels: List[InterfaceLabel] = Field(default_factory=list)

    @property
    def center_x(self) -> float:
        return self.x + self.width / 2

    @property
    def center_y(self) -> float:
        return self.y + self.height / 2

    @property
    def bottom(self) -> float:
        return self.y + self.height


class LinkSegment(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)
    source: str
    target: str
    x1: float
    y1: float
    x2: float
    y2: float
    kind: SegmentKind = "fabric"
    dashed: bool = False
    opacity: float = 1.0
    via: Optional[str] = None  # patch panel hostname for routed links
    half: Optional[SegmentHalf] = None  # which side of the panel a routed segment is on


class TierLabel(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)
    text: str
    role: str
    x: float
    y: float
    intent: str


class DiagramLayout(BaseModel):
    """Pure geometry; renderers decide how to draw it."""

    model_config = ConfigDict(extra="ignore", frozen=True)
    width: float
    height: float
    nodes: List[NodeBox] = Field(default_factory=list)
    segments: List[LinkSegment] = Field(default_factory=list)
    tier_labels: List[TierLabel] = Field(default_factory=list)

    def node(self, hostname: str) -> NodeBox:
        for n in self.nodes:
            if n.hostname == hostname:
                return n
        raise KeyError(hostname)

    def segments_between(self, a: str, b: str) -> List[LinkSegment]:
        return [s for s in self.segments if {s.source, s.target} == {a, b}]
