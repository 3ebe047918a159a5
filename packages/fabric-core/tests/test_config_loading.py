"""Tests for YAML loading of configurations, defaults and previews."""

from pathlib import Path

import pytest
import yaml
from fabric_core.data import (
    dump_yaml,
    load_facility_defaults,
    load_port_assignments,
    load_preview,
    load_topology_config,
)
from fabric_core.models.config import TopologyConfig
from fabric_core.models.device import FabricSwitch, GpuNode, PatchPanel
from fabric_core.models.link import FabricLink, LinkEnd
from fabric_core.models.preview import TopologyPreview


def _write(path: Path, data) -> Path:
    path.write_text(yaml.safe_dump(data), encoding="utf-8")
    return path


class TestTopologyConfigLoading:
    """Topology YAML is validated through pydantic."""

    def test_string_integers_are_coerced(self, tmp_path):
        path = _write(
            tmp_path / "fabric.yaml",
            {"architecture": "clos", "spine_count": "4", "leaf_count": " 16 ", "tier1_to_tier2_ratio": "3"},
        )
        config = load_topology_config(path)
        assert config.tier1_count == 4
        assert config.tier2_count == 16
        assert config.tier1_to_tier2_ratio == 3

    def test_numeric_placement_becomes_string(self, tmp_path):
        path = _write(tmp_path / "fabric.yaml", {"architecture": "clos", "tier1_placement": 3, "tier2_placement": "END"})
        config = load_topology_config(path)
        assert config.tier1_placement == "3"
        assert config.tier2_placement == "end"

    def test_count_per_row_shorthand(self):
        config = TopologyConfig(architecture="clos", mgmt_switch_distribution="count-per-row[3]")
        assert config.mgmt_switch_distribution == "count-per-row"
        assert config.mgmt_switches_per_row == 3

    def test_unknown_keys_ignored(self, tmp_path):
        path = _write(tmp_path / "fabric.yaml", {"architecture": "hierarchical", "legacy_flag": True})
        assert load_topology_config(path).architecture == "hierarchical"

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_topology_config(tmp_path / "missing.yaml")

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("", encoding="utf-8")
        with pytest.raises(ValueError, match="Empty YAML"):
            load_topology_config(path)

    def test_invalid_structure_names_file(self, tmp_path):
        path = _write(tmp_path / "bad.yaml", {"architecture": "ring"})
        with pytest.raises(ValueError, match="bad.yaml"):
            load_topology_config(path)

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "broken.yaml"
        path.write_text("architecture: [clos\n", encoding="utf-8")
        with pytest.raises(ValueError, match="Invalid YAML"):
            load_topology_config(path)


class TestFacilityDefaults:
    """Built-in and file-based facility defaults."""

    def test_builtin(self):
        defaults = load_facility_defaults()
        assert defaults.hostname_pattern == "$datacenter-$role-#"
        assert defaults.models.patch_panel == "PP-192-RJ45"
        assert defaults.patch_panel_ports == 192
        assert defaults.slack_factor == pytest.approx(1.2)
        assert defaults.gpu_node_model("MI300X", 8) == "MI300X 8-GPU Node"

    def test_partial_override(self, tmp_path):
        path = _write(tmp_path / "site.yaml", {"cable_slack_percent": 10, "models": {"leaf": "7060X"}})
        defaults = load_facility_defaults(path)
        assert defaults.slack_factor == pytest.approx(1.1)
        assert defaults.models.leaf == "7060X"
        assert defaults.models.spine == "7050CX3-32S"


class TestPreviewRoundTrip:
    """An exported preview can be edited and loaded back."""

    def test_devices_keep_their_variant(self, tmp_path):
        preview = TopologyPreview(
            topology_name="Lab",
            architecture="clos",
            devices=[
                FabricSwitch(index=0, hostname="spine-1", role="spine", model="S", loopback="10.255.0.1", asn=65000, mgmt_ip="172.20.0.11"),
                GpuNode(index=1, hostname="gpu-node-1", model="G", mgmt_ip="172.21.0.11", cluster_name="gpu-cluster-1", gpu_count=8, leaf="leaf-1"),
                PatchPanel(index=2, hostname="patch-panel-1", model="PP", port_count=192, hall=1, row=1),
            ],
            fabric_links=[
                FabricLink(
                    a=LinkEnd(hostname="spine-1", interface="Ethernet1", ip="10.1.0.0"),
                    b=LinkEnd(hostname="leaf-1", interface="Ethernet1", ip="10.1.0.1"),
                    subnet="10.1.0.0/31",
                )
            ],
        )
        path = dump_yaml(preview.model_dump(mode="json"), tmp_path / "out" / "preview.yaml")
        loaded = load_preview(path)
        assert loaded == preview
        assert isinstance(loaded.devices[1], GpuNode)
        assert isinstance(loaded.devices[2], PatchPanel)

    def test_port_assignment_list(self, tmp_path):
        path = _write(
            tmp_path / "ports.yaml",
            [
                {"device": "spine-1", "port": "Ethernet1", "remote_device": "leaf-1", "remote_port": "Ethernet1"},
                {"device": "leaf-1", "port": "Ethernet1", "remote_device": "spine-1", "remote_port": "Ethernet1"},
            ],
        )
        assignments = load_port_assignments(path)
        assert len(assignments) == 2
        assert assignments[0].dedup_key() == assignments[1].dedup_key()
