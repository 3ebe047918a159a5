"""Shared geometry utilities for cable length estimation and binning.

The same helpers are used when measuring links after placement and when
rounding lengths for the bill of materials, so both agree on every cable.
"""

import math
from typing import Dict, List, Optional, Sequence

from fabric_core.models.defaults import FacilityDefaults
from fabric_core.models.device import Device
from fabric_core.models.facility import Rack
from fabric_core.models.link import FabricLink

U_PITCH_M = 0.04445  # 1.75 in per U
STANDARD_LENGTHS_M = (0.5, 1, 2, 3, 5, 7, 10, 15, 20, 30, 50)
DEFAULT_CABLE_LENGTH_M = 3.0


def compute_rack_distance_m(
    grid_a: tuple[int, int], grid_b: tuple[int, int], column_m: float, row_m: float
) -> float:
    """Compute Manhattan distance between two rack grid positions in meters.

    Args:
        grid_a: Grid position (column, row) of first rack
        grid_b: Grid position (column, row) of second rack
        column_m: Width of one rack column in meters
        row_m: Distance between adjacent rows in meters

    Returns:
        Manhattan distance in meters
    """
    dx = abs(grid_a[0] - grid_b[0])
    dy = abs(grid_a[1] - grid_b[1])
    return dx * column_m + dy * row_m


def apply_slack(distance_m: float, slack_factor: float) -> float:
    """Apply slack factor to physical distance.

    Args:
        distance_m: Physical distance in meters
        slack_factor: Slack multiplier (must be >= 1.0)

    Returns:
        Distance with slack applied in meters
    """
    return distance_m * slack_factor


def select_length_bin(distance_m: float, bins_m: Sequence[float]) -> float | None:
    """Select the smallest bin that can accommodate the given distance.

    Args:
        distance_m: Required cable length in meters
        bins_m: Available length bins in meters

    Returns:
        Selected bin length in meters, or None if no suitable bin found
    """
    for b in sorted(bins_m):
        if distance_m <= b:
            return b
    return None


def round_cable_length(length_m: Optional[float], bins_m: Sequence[float] = STANDARD_LENGTHS_M) -> float:
    """Round a length up onto the standard reel ladder.

    Unknown lengths count as ``DEFAULT_CABLE_LENGTH_M``; anything longer than
    the ladder is rounded up to the next whole meter.
    """
    if length_m is None:
        length_m = DEFAULT_CABLE_LENGTH_M
    selected = select_length_bin(length_m, bins_m)
    if selected is None:
        return float(math.ceil(length_m))
    return float(selected)


def format_length(length_m: float) -> str:
    return f"{length_m:g}m"


def _grid(rack: Rack, rows_per_hall: int) -> tuple[int, int]:
    return rack.position_in_row, (rack.hall - 1) * rows_per_hall + (rack.row - 1)


def estimate_cable_length(
    a: Device,
    b: Device,
    racks: Dict[int, Rack],
    *,
    rows_per_hall: int,
    row_spacing_cm: int,
    defaults: FacilityDefaults,
) -> Optional[float]:
    """Physical run between two racked devices, with slack, in meters.

    Same rack: the vertical RU distance. Different racks: up to the overhead
    tray, across the Manhattan rack distance and back down. Crossing halls
    adds a fixed ``hall_crossing_m``. Returns None when either end is unracked.
    """
    if not (a.is_racked and b.is_racked):
        return None
    rack_a, rack_b = racks[a.rack_index], racks[b.rack_index]
    if rack_a.index == rack_b.index:
        distance = abs(a.rack_position - b.rack_position) * U_PITCH_M
    else:
        rise_a = (rack_a.height_ru - a.rack_position) * U_PITCH_M
        rise_b = (rack_b.height_ru - b.rack_position) * U_PITCH_M
        across = compute_rack_distance_m(
            _grid(rack_a, rows_per_hall),
            _grid(rack_b, rows_per_hall),
            rack_a.width_cm / 100.0,
            row_spacing_cm / 100.0,
        )
        if rack_a.hall != rack_b.hall:
            across += defaults.hall_crossing_m
        distance = rise_a + across + rise_b
    return round(apply_slack(distance, defaults.slack_factor), 2)


def measure_links(
    links: List[FabricLink],
    devices: List[Device],
    racks: List[Rack],
    *,
    rows_per_hall: int,
    row_spacing_cm: int,
    defaults: FacilityDefaults,
) -> List[FabricLink]:
    """Return copies of ``links`` with ``cable_length_meters`` filled in."""
    by_host = {d.hostname: d for d in devices}
    by_index = {r.index: r for r in racks}
    measured = []
    for link in links:
        a, b = by_host.get(link.a.hostname), by_host.get(link.b.hostname)
        length = None
        if a is not None and b is not None:
            length = estimate_cable_length(
                a, b, by_index, rows_per_hall=rows_per_hall, row_spacing_cm=row_spacing_cm, defaults=defaults
            )
        measured.append(link.model_copy(update={"cable_length_meters": length}))
    return measured
