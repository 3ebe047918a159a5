# fabric_core/models/link.py
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict

LinkClass = Literal["external", "super-spine", "fabric", "gpu-uplink", "gpu-fabric"]


class LinkEnd(BaseModel):
    """One side of a point-to-point link."""

    model_config = ConfigDict(extra="ignore", frozen=True)
    hostname: str
    interface: str
    ip: Optional[str] = None


class FabricLink(BaseModel):
    """A single physical link between two generated devices.

    Side A is always the upper tier (closer to the externals) and holds the
    even address of the /31.
    """

    model_config = ConfigDict(extra="ignore", frozen=True)
    a: LinkEnd
    b: LinkEnd
    subnet: Optional[str] = None
    link_class: LinkClass = "fabric"
    cable_length_meters: Optional[float] = None

    @property
    def hostnames(self) -> tuple[str, str]:
        return self.a.hostname, self.b.hostname

    def touches(self, hostname: str) -> bool:
        return hostname in (self.a.hostname, self.b.hostname)

    def dedup_key(self) -> tuple[tuple[str, str], tuple[str, str]]:
        ends = sorted([(self.a.hostname, self.a.interface), (self.b.hostname, self.b.interface)])
        return ends[0], ends[1]
