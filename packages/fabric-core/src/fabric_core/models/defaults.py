# fabric_core/models/defaults.py
from pydantic import BaseModel, ConfigDict, Field, field_validator


class DefaultModels(BaseModel):
    """Hardware models used when a configuration leaves a model field empty."""

    model_config = ConfigDict(extra="ignore")
    spine: str = "7050CX3-32S"
    leaf: str = "7050SX3-48YC8"
    core: str = "7280R3"
    distribution: str = "7050CX3-32S"
    access: str = "7050SX3-48YC8"
    super_spine: str = "7800R3"
    external: str = "7280R3"
    mgmt_switch: str = "CCS-720XP-48ZC2"
    gpu: str = "MI300X"
    patch_panel: str = "PP-192-RJ45"


class FacilityDefaults(BaseModel):
    """Site-wide settings record merged into every configuration."""

    model_config = ConfigDict(extra="ignore")
    models: DefaultModels = Field(default_factory=DefaultModels)
    hostname_pattern: str = "$datacenter-$role-#"
    cable_slack_percent: float = Field(default=20.0, ge=0)
    patch_panel_ports: int = Field(default=192, ge=2)
    gpu_node_height_ru: int = Field(default=4, ge=1)
    hall_crossing_m: float = Field(default=30.0, ge=0)

    @field_validator("patch_panel_ports", "gpu_node_height_ru", mode="before")
    @classmethod
    def _coerce_int(cls, v):
        if isinstance(v, str):
            return int(v.strip())
        return v

    @property
    def slack_factor(self) -> float:
        return 1.0 + self.cable_slack_percent / 100.0

    @staticmethod
    def gpu_node_model(gpu_model: str, gpus_per_node: int) -> str:
        return f"{gpu_model} {gpus_per_node}-GPU Node"
