import csv
import re
from pathlib import Path
from typing import List

import yaml

from fabric_core.models.cabling import BOM_HEADER, CUTSHEET_HEADER, BomRow, CutsheetRow, Workbook


def _open_for_write(path: Path | str):
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    return open(p, "w", newline="", encoding="utf-8")


def export_bom(rows: List[BomRow], export_path: Path | str, export_format: str = "csv", *, topology_name: str = "") -> None:
    if export_format.lower() == "csv":
        with _open_for_write(export_path) as csvfile:
            writer = csv.writer(csvfile)
            writer.writerow(BOM_HEADER)
            for row in rows:
                writer.writerow(row.as_row())
    else:
        output_data = {
            "metadata": {"generated_by": "fabric cabling bom", "topology": topology_name},
            "bom": [row.model_dump() for row in rows],
        }
        with _open_for_write(export_path) as yamlfile:
            yaml.dump(output_data, yamlfile, default_flow_style=False, sort_keys=False)


def export_cutsheet(rows: List[CutsheetRow], export_path: Path | str) -> None:
    with _open_for_write(export_path) as csvfile:
        writer = csv.writer(csvfile)
        writer.writerow(CUTSHEET_HEADER)
        for row in rows:
            writer.writerow(row.as_row())


def sheet_filename(position: int, title: str) -> str:
    slug = re.sub(r"[^a-z0-9]+", "-", title.lower()).strip("-") or "sheet"
    return f"{position:02d}-{slug}.csv"


def export_workbook(workbook: Workbook, out_dir: Path | str) -> List[Path]:
    """Write each sheet as its own CSV; stacked tables are separated by a blank line."""
    out = Path(out_dir)
    out.mkdir(parents=True, exist_ok=True)
    written = []
    for position, sheet in enumerate(workbook.sheets):
        path = out / sheet_filename(position, sheet.title)
        with _open_for_write(path) as csvfile:
            writer = csv.writer(csvfile)
            for i, table in enumerate(sheet.tables):
                if i:
                    writer.writerow([])
                if table.title:
                    writer.writerow([table.title])
                writer.writerow(table.header)
                writer.writerows(table.rows)
        written.append(path)
    return written
