"""Deterministic address and ASN schemes for generated devices.

Every role owns a /24 per block of 256 host values. Block ``k`` of a role
sits ``k * ROLE_BLOCK_STRIDE`` /24s above its first one, so roles sharing a
/16 interleave instead of running into each other. ASNs that leave the
16-bit private range move to the 32-bit private range.
"""

from ipaddress import IPv4Address
from typing import Callable, Dict, Optional, Tuple

P2P_BASES = {
    "clos": "10.1.0.0",
    "hierarchical": "10.2.0.0",
}

# role -> (loopback base, management base); host part is added on top
_ROLE_BASES: Dict[str, Tuple[Optional[str], str]] = {
    "spine": ("10.255.0.0", "172.20.0.0"),
    "leaf": ("10.255.1.0", "172.20.1.0"),
    "external": ("10.255.2.0", "172.20.2.0"),
    "super-spine": ("10.255.3.0", "172.20.3.0"),
    "core": ("10.254.0.0", "172.20.4.0"),
    "distribution": ("10.254.1.0", "172.20.5.0"),
    "access": ("10.254.2.0", "172.20.6.0"),
    "mgmt-switch": (None, "172.20.7.0"),
    "gpu-node": (None, "172.21.0.0"),
}

ROLE_BLOCK_STRIDE = 8
ROLE_BLOCKS = 32

_ROLE_ASNS: Dict[str, Callable[[int], int]] = {
    "spine": lambda i: 65000,
    "leaf": lambda i: 65000 + i,
    "external": lambda i: 64999 - (i - 1),
    "super-spine": lambda i: 64900,
    "core": lambda i: 64999 - (i - 1),
    "distribution": lambda i: 65100,
    "access": lambda i: 65201 + (i - 1),
}

PRIVATE_ASN_16 = range(64512, 65535)
PRIVATE_ASN_32_BASE = 4_200_000_000
_ASN_32_SLOTS = {"leaf": 1, "external": 2, "core": 4, "access": 6}

MGMT_HOST_OFFSET = 10


def _role_address(base: str, host: int) -> str:
    block, offset = divmod(host, 256)
    if block >= ROLE_BLOCKS:
        raise ValueError(f"host {host} is outside the {ROLE_BLOCKS} address blocks of {base}")
    return str(IPv4Address(base) + block * ROLE_BLOCK_STRIDE * 256 + offset)


def loopback(role: str, ordinal: int) -> str:
    base = _ROLE_BASES[role][0]
    if base is None:
        raise KeyError(f"role {role!r} has no loopback scheme")
    return _role_address(base, ordinal)


def mgmt_ip(role: str, ordinal: int) -> str:
    return _role_address(_ROLE_BASES[role][1], MGMT_HOST_OFFSET + ordinal)


def asn(role: str, ordinal: int) -> int:
    value = _ROLE_ASNS[role](ordinal)
    if value in PRIVATE_ASN_16:
        return value
    return PRIVATE_ASN_32_BASE + _ASN_32_SLOTS[role] * 100_000 + ordinal


class P2PAllocator:
    """Sequential /31 allocator; side A gets the even address."""

    def __init__(self, base: str):
        self._base = IPv4Address(base)
        self._count = 0

    def allocate(self) -> Tuple[str, str, str]:
        a = self._base + 2 * self._count
        self._count += 1
        return str(a), str(a + 1), f"{a}/31"

    @property
    def allocated(self) -> int:
        return self._count
