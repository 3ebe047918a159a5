from pathlib import Path
from typing import Optional

from fabric_core.data.loader import load_yaml_list, load_yaml_typed
from fabric_core.models.cabling import PortAssignment
from fabric_core.models.config import TopologyConfig
from fabric_core.models.defaults import FacilityDefaults
from fabric_core.models.preview import TopologyPreview


def load_topology_config(path: Path | str) -> TopologyConfig:
    """Load a fabric configuration YAML into a TopologyConfig."""
    return load_yaml_typed(path, model=TopologyConfig)


def load_facility_defaults(path: Optional[Path | str] = None) -> FacilityDefaults:
    """Load site defaults; with no path the built-in defaults are returned."""
    if path is None:
        return FacilityDefaults()
    return load_yaml_typed(path, model=FacilityDefaults)


def load_preview(path: Path | str) -> TopologyPreview:
    """Load a previously exported (and possibly operator-edited) preview."""
    return load_yaml_typed(path, model=TopologyPreview)


def load_port_assignments(path: Path | str) -> list[PortAssignment]:
    return load_yaml_list(path, PortAssignment)
