from typing import Optional

import click
from rich.table import Table

from fabric_cli.tools.common import (
    config_argument,
    console,
    defaults_option,
    obtain_preview,
    preview_option,
    reported_errors,
)


def assignments_option(fn):
    return click.option(
        "--assignments",
        type=click.Path(path_type=str, dir_okay=False, exists=True),
        default=None,
        help="Live port-assignment YAML (list) to use instead of the generated links.",
    )(fn)


def _load_assignments(path: Optional[str]):
    if not path:
        return None
    from fabric_core.data import load_port_assignments

    assignments = load_port_assignments(path)
    console.print(f"[green]✓[/green] Loaded {len(assignments)} port assignments")
    return assignments


@click.group()
def cabling() -> None:
    """Cabling and procurement documents."""
    pass


@cabling.command("bom")
@config_argument
@defaults_option
@preview_option
@assignments_option
@click.option(
    "--export",
    type=click.Path(path_type=str, dir_okay=False),
    default="outputs/fabric_bom.csv",
    show_default=True,
    help="Write BOM to this path (CSV/YAML).",
)
@click.option(
    "--format",
    "fmt",
    type=click.Choice(["csv", "yaml"], case_sensitive=False),
    default="csv",
    show_default=True,
    help="Export format.",
)
def bom(
    config: Optional[str],
    defaults: Optional[str],
    preview_path: Optional[str],
    assignments: Optional[str],
    export: str,
    fmt: str,
) -> None:
    """Devices, cables by standard length, optics and management cabling."""
    from fabric_tools.cabling import build_bom, export_bom

    console.print("\n[bold cyan]Fabric BOM[/bold cyan]")
    with reported_errors("BOM generation"):
        preview = obtain_preview(config, defaults, preview_path)
        rows = build_bom(preview, _load_assignments(assignments))

        table = Table(title="Bill of Materials")
        table.add_column("Category", style="cyan")
        table.add_column("Item")
        table.add_column("Specification")
        table.add_column("Quantity", justify="right")
        table.add_column("Unit Length")
        for row in rows:
            table.add_row(row.category, row.item, row.specification, str(row.quantity), row.unit_length)
        console.print(table)

        export_bom(rows, export, fmt.lower(), topology_name=preview.topology_name)
        console.print(f"[green]✓[/green] Exported BOM to {export}")


@cabling.command("cutsheet")
@config_argument
@defaults_option
@preview_option
@assignments_option
@click.option(
    "--export",
    type=click.Path(path_type=str, dir_okay=False),
    default="outputs/fabric_cutsheet.csv",
    show_default=True,
    help="Write the cutsheet CSV to this path.",
)
def cutsheet(
    config: Optional[str], defaults: Optional[str], preview_path: Optional[str], assignments: Optional[str], export: str
) -> None:
    """One row per physical cable with patch-panel hops."""
    from fabric_tools.cabling import build_cutsheet, export_cutsheet

    console.print("\n[bold cyan]Fabric Cutsheet[/bold cyan]")
    with reported_errors("cutsheet generation"):
        preview = obtain_preview(config, defaults, preview_path)
        rows = build_cutsheet(preview, _load_assignments(assignments))
        export_cutsheet(rows, export)
        console.print(f"[green]✓[/green] Exported {len(rows)} cables to {export}")


@cabling.command("sheets")
@config_argument
@defaults_option
@preview_option
@assignments_option
@click.option(
    "--out-dir",
    type=click.Path(path_type=str, file_okay=False),
    default="outputs/connection_sheets",
    show_default=True,
    help="Directory receiving one CSV per sheet.",
)
def sheets(
    config: Optional[str], defaults: Optional[str], preview_path: Optional[str], assignments: Optional[str], out_dir: str
) -> None:
    """Summary, per-rack and unracked connection sheets."""
    from fabric_tools.cabling import build_connection_sheets, export_workbook

    console.print("\n[bold cyan]Connection Sheets[/bold cyan]")
    with reported_errors("connection sheet generation"):
        preview = obtain_preview(config, defaults, preview_path)
        workbook = build_connection_sheets(preview, _load_assignments(assignments))
        written = export_workbook(workbook, out_dir)
        console.print(f"[green]✓[/green] Wrote {len(written)} sheets to {out_dir}")
