from rich.console import Console
from rich.table import Table

from fabric_core.models.preview import TopologyPreview

from fabric_tools.cabling.sheets import rack_elevation

console = Console()


def render_rack_layout(preview: TopologyPreview, rack_name: str, out: Console | None = None) -> None:
    """Render a vertical rack view with device assignments."""
    out = out or console
    rack = next((r for r in preview.racks if r.name == rack_name), None)
    if rack is None:
        raise ValueError(f"Unknown rack: {rack_name}")
    devices = preview.rack_devices(rack)

    table = Table(title=f"Rack Layout: {rack.name} ({rack.height_ru}U)", box=None, show_header=False)
    table.add_column("U")
    table.add_column("Occupied")
    table.add_column("Device")

    first_ru = {d.hostname: d.rack_position + d.height_ru - 1 for d in devices if d.rack_position is not None}
    for ru, hostname, role, _model in rack_elevation(rack, devices):
        if not hostname:
            table.add_row(f"{ru:02}", "[ ]", "")
        elif first_ru.get(hostname) == ru:
            table.add_row(f"{ru:02}", "[█]", f"{hostname} [dim]({role})[/dim]")
        else:
            table.add_row(f"{ru:02}", "[■]", "")

    out.print(table)
