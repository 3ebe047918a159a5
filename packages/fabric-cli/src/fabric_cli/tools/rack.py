from typing import Optional

import click

from fabric_cli.tools.common import config_argument, console, defaults_option, obtain_preview, preview_option, reported_errors


@click.group()
def rack() -> None:
    pass


@rack.command()
@config_argument
@defaults_option
@preview_option
@click.option("--rack", "rack_name", type=str, default=None, help="Rack name to render (default: every rack).")
def layout(config: Optional[str], defaults: Optional[str], preview_path: Optional[str], rack_name: Optional[str]) -> None:
    """Render a front elevation layout for a rack."""
    from fabric_tools.layout import render_rack_layout

    with reported_errors("rack layout"):
        preview = obtain_preview(config, defaults, preview_path)
        names = [rack_name] if rack_name else [r.name for r in preview.racks]
        for name in names:
            render_rack_layout(preview, name, console)
