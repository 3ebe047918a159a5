from .config import load_facility_defaults, load_port_assignments, load_preview, load_topology_config
from .loader import dump_yaml, load_yaml_list, load_yaml_typed

__all__ = [
    "dump_yaml",
    "load_facility_defaults",
    "load_port_assignments",
    "load_preview",
    "load_topology_config",
    "load_yaml_list",
    "load_yaml_typed",
]
