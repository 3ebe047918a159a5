"""Cabling tools package."""

from .bom import build_bom, build_cable_bom, build_device_bom, build_mgmt_cabling, build_optics_bom
from .common import (
    DEFAULT_CABLE_LENGTH_M,
    STANDARD_LENGTHS_M,
    apply_slack,
    compute_rack_distance_m,
    estimate_cable_length,
    measure_links,
    round_cable_length,
    select_length_bin,
)
from .cutsheet import build_cutsheet
from .export import export_bom, export_cutsheet, export_workbook
from .ports import build_port_assignments, physical_links
from .sheets import build_connection_sheets

__all__ = [
    "DEFAULT_CABLE_LENGTH_M",
    "STANDARD_LENGTHS_M",
    "apply_slack",
    "build_bom",
    "build_cable_bom",
    "build_connection_sheets",
    "build_cutsheet",
    "build_device_bom",
    "build_mgmt_cabling",
    "build_optics_bom",
    "build_port_assignments",
    "compute_rack_distance_m",
    "estimate_cable_length",
    "export_bom",
    "export_cutsheet",
    "export_workbook",
    "measure_links",
    "physical_links",
    "round_cable_length",
    "select_length_bin",
]
