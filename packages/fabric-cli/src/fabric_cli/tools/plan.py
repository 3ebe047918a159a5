from collections import Counter
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


@click.command()
@config_argument
@defaults_option
@click.option(
    "--export",
    type=click.Path(path_type=str, dir_okay=False),
    default=None,
    help="Write the preview as YAML; it can be edited and fed back with --preview.",
)
def preview(config: Optional[str], defaults: Optional[str], export: Optional[str]) -> None:
    """Generate a fabric preview and summarize it."""
    from fabric_core.data import dump_yaml

    with reported_errors("preview"):
        result = obtain_preview(config, defaults, None)

        roles = Counter(d.role for d in result.devices)
        table = Table(title=f"Fabric Preview: {result.topology_name}")
        table.add_column("Role", style="cyan")
        table.add_column("Count", justify="right")
        table.add_column("Racked", justify="right")
        for role, count in sorted(roles.items()):
            racked = sum(1 for d in result.devices if d.role == role and d.is_racked)
            table.add_row(role, str(count), str(racked))
        console.print(table)

        links = Counter(link.link_class for link in result.all_links())
        link_table = Table(title="Links")
        link_table.add_column("Class", style="cyan")
        link_table.add_column("Count", justify="right")
        for link_class, count in sorted(links.items()):
            link_table.add_row(link_class, str(count))
        console.print(link_table)

        if result.gpu_clusters:
            gpu_table = Table(title="GPU Clusters")
            gpu_table.add_column("Cluster", style="cyan")
            gpu_table.add_column("Nodes", justify="right")
            gpu_table.add_column("GPUs", justify="right")
            gpu_table.add_column("Interconnect")
            for cluster in result.gpu_clusters:
                gpu_table.add_row(cluster.name, str(cluster.node_count), str(cluster.total_gpus), cluster.interconnect)
            console.print(gpu_table)

        if export:
            dump_yaml(result.model_dump(mode="json"), export)
            console.print(f"[green]✓[/green] Exported preview to {export}")


@click.command()
@config_argument
@defaults_option
@preview_option
@click.option("--datacenter-id", type=int, default=None, help="Parent datacenter record id.")
@click.option("--details", is_flag=True, help="Print one line per committed record.")
def commit(
    config: Optional[str],
    defaults: Optional[str],
    preview_path: Optional[str],
    datacenter_id: Optional[int],
    details: bool,
) -> None:
    """Dry-run commit of halls, rows, racks and devices into an in-memory inventory."""
    from fabric_tools.commit import InMemoryInventory, commit_preview

    with reported_errors("commit"):
        result = obtain_preview(config, defaults, preview_path)
        summary = commit_preview(result, InMemoryInventory(), datacenter_id)

        table = Table(title="Commit Summary")
        table.add_column("Record", style="cyan")
        table.add_column("Created", justify="right")
        table.add_column("Existing", justify="right")
        table.add_column("Failed", justify="right")
        for kind in ("hall", "row", "rack", "device"):
            results = summary.by_kind(kind)
            table.add_row(
                kind,
                str(sum(1 for r in results if r.status == "created")),
                str(sum(1 for r in results if r.status == "exists")),
                str(sum(1 for r in results if r.status == "failed")),
            )
        console.print(table)

        if details:
            for line in summary.messages():
                console.print(f"  {line}")

        if summary.ok:
            console.print(f"[green]✓[/green] Committed {summary.succeeded} records")
        else:
            console.print(f"[red]✗ {summary.failed} records failed[/red]")
            raise SystemExit(1)
