"""Checks on the distribution metadata in the repository's pyproject.toml."""

import tomllib
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[3]


@pytest.fixture(scope="module")
def project():
    with open(ROOT / "pyproject.toml", "rb") as f:
        return tomllib.load(f)["project"]


class TestProjectMetadata:
    def test_console_script(self, project):
        assert project["scripts"]["fabric"] == "fabric_cli.cli:cli"

    def test_readme_is_not_a_design_document(self, project):
        readme = project.get("readme")
        if readme is None:
            return
        assert (ROOT / readme).is_file()
        assert readme not in ("SPEC_FULL.md", "DESIGN.md", "spec.md")
