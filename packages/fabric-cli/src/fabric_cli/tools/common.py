import sys
from contextlib import contextmanager
from typing import Optional

import click
from rich.console import Console

from fabric_core.data import load_facility_defaults, load_preview, load_topology_config
from fabric_core.errors import FabricError
from fabric_core.models.preview import TopologyPreview

console = Console()


def config_argument(fn):
    return click.argument("config", type=click.Path(path_type=str, dir_okay=False, exists=False), required=False)(fn)


def defaults_option(fn):
    return click.option(
        "--defaults",
        type=click.Path(path_type=str, dir_okay=False, exists=False),
        default=None,
        help="Facility defaults YAML (default models, hostname pattern, cable slack).",
    )(fn)


def preview_option(fn):
    return click.option(
        "--preview",
        "preview_path",
        type=click.Path(path_type=str, dir_okay=False, exists=False),
        default=None,
        help="Use a previously exported (possibly edited) preview instead of generating one.",
    )(fn)


def obtain_preview(config: Optional[str], defaults: Optional[str], preview_path: Optional[str]) -> TopologyPreview:
    from fabric_tools.preview import build_preview

    if preview_path:
        preview = load_preview(preview_path)
        console.print(f"[green]✓[/green] Loaded preview: {preview.topology_name}")
        return preview
    if not config:
        raise click.UsageError("Provide a CONFIG file or --preview.")
    preview = build_preview(load_topology_config(config), load_facility_defaults(defaults))
    console.print(
        f"[green]✓[/green] Generated {preview.architecture} fabric {preview.topology_name!r}: "
        f"{len(preview.devices)} devices, {len(preview.all_links())} links, {len(preview.racks)} racks"
    )
    return preview


@contextmanager
def reported_errors(stage: str):
    """Turn configuration and file errors into a red message and exit code 1."""
    try:
        yield
    except (FabricError, ValueError, FileNotFoundError) as e:
        console.print(f"[red]Error during {stage}: {e}[/red]")
        sys.exit(1)
