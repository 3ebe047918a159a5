import logging

import click
from rich.logging import RichHandler

from fabric_cli.graph.graph import graph
from fabric_cli.tools.cabling import cabling
from fabric_cli.tools.plan import commit, preview
from fabric_cli.tools.rack import rack


@click.group()
@click.option("--verbose", is_flag=True, help="Log debug output (set FABRIC_SPY=1 for call tracing).")
def cli(verbose: bool):
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(message)s", handlers=[RichHandler(rich_tracebacks=True)])


# add cli groups here

cli.add_command(preview)
cli.add_command(commit)
cli.add_command(cabling)
cli.add_command(rack)
cli.add_command(graph)
