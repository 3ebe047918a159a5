from pathlib import Path
from typing import Optional

import click

from fabric_cli.tools.common import config_argument, console, defaults_option, obtain_preview, preview_option, reported_errors


@click.group()
def graph():
    pass


@graph.command()
@config_argument
@defaults_option
@preview_option
@click.option(
    "--output",
    type=click.Path(path_type=str, dir_okay=False),
    default="outputs/fabric_topology",
    show_default=True,
    help="Output path without extension.",
)
@click.option(
    "--format",
    "fmt",
    type=click.Choice(["svg", "png", "dot"], case_sensitive=False),
    default="svg",
    show_default=True,
)
def diagram(config: Optional[str], defaults: Optional[str], preview_path: Optional[str], output: str, fmt: str) -> None:
    """Render the tiered fabric diagram."""
    from fabric_graph.layout import layout_preview
    from fabric_graph.render import render_layout

    with reported_errors("diagram rendering"):
        preview = obtain_preview(config, defaults, preview_path)
        layout = layout_preview(preview)
        dot = render_layout(layout, name=Path(output).stem)

        out = Path(output)
        out.parent.mkdir(parents=True, exist_ok=True)
        if fmt.lower() == "dot":
            written = dot.save(filename=out.with_suffix(".dot").name, directory=str(out.parent))
        else:
            dot.format = fmt.lower()
            written = dot.render(filename=out.name, directory=str(out.parent), cleanup=True)
        console.print(
            f"[green]✓[/green] Diagram {layout.width:.0f}×{layout.height:.0f} "
            f"({len(layout.nodes)} nodes, {len(layout.segments)} segments) written to {written}"
        )
