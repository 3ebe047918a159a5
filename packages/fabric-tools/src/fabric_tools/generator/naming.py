"""Hostname and interface naming used during generation."""

import re
from typing import Dict

_DASH_RUNS = re.compile(r"-{2,}")


def resolve_hostname(pattern: str, role: str, ordinal: int, *, datacenter: str = "", region: str = "") -> str:
    """Expand a hostname pattern such as ``$datacenter-$role-#``.

    Empty variables leave no trace: doubled dashes collapse and leading or
    trailing dashes are trimmed, so an unnamed datacenter gives ``spine-1``.
    """
    name = (
        pattern.replace("$region", _slug(region))
        .replace("$datacenter", _slug(datacenter))
        .replace("$role", role)
        .replace("#", str(ordinal))
    )
    return _DASH_RUNS.sub("-", name).strip("-")


def _slug(value: str) -> str:
    return "-".join(value.lower().split())


def interface_prefix(vendor: str) -> str:
    return "eth" if vendor.strip().lower() == "frr" else "Ethernet"


class InterfaceAllocator:
    """Hands out interface names from a per-device monotonic counter.

    InfiniBand ports are counted separately so a GPU node's ``IB`` ports
    start at 1 regardless of how many Ethernet uplinks it already has.
    """

    def __init__(self, prefix: str):
        self.prefix = prefix
        self._next: Dict[str, int] = {}
        self._next_ib: Dict[str, int] = {}

    def next(self, hostname: str) -> str:
        n = self._next.get(hostname, 0) + 1
        self._next[hostname] = n
        return f"{self.prefix}{n}"

    def next_ib(self, hostname: str) -> str:
        n = self._next_ib.get(hostname, 0) + 1
        self._next_ib[hostname] = n
        return f"IB{n}"

    def used(self, hostname: str) -> int:
        return self._next.get(hostname, 0)


class RoleCounter:
    """Per-role ordinals for one generation run, starting at 1."""

    def __init__(self) -> None:
        self._counts: Dict[str, int] = {}

    def next(self, role: str) -> int:
        n = self._counts.get(role, 0) + 1
        self._counts[role] = n
        return n
