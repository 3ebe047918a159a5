"""
Commit a preview into a device inventory.

Records are written hall, row, rack, device in that order because each
level needs the parent's id. Every write is an idempotent upsert returning
``Created``, ``AlreadyExists`` or ``Failed``; a failure is logged and the
remaining records are still attempted, so a partial commit can simply be
re-run.
"""

import logging
from typing import Dict, Optional, Protocol, Tuple

from fabric_core.models.commit import AlreadyExists, CommitSummary, Created, Failed, RecordKind, UpsertResult
from fabric_core.models.device import Device
from fabric_core.models.facility import Rack
from fabric_core.models.preview import TopologyPreview

logger = logging.getLogger(__name__)


class Inventory(Protocol):
    def upsert_hall(self, datacenter_id: Optional[int], name: str) -> UpsertResult: ...

    def upsert_row(self, hall_id: int, name: str) -> UpsertResult: ...

    def upsert_rack(self, row_id: int, rack: Rack) -> UpsertResult: ...

    def upsert_device(self, device: Device, rack_id: Optional[int]) -> UpsertResult: ...


class InMemoryInventory:
    """Inventory held in dictionaries; used for dry runs."""

    def __init__(self) -> None:
        self.records: Dict[Tuple[RecordKind, str], int] = {}
        self.parents: Dict[Tuple[RecordKind, str], Optional[int]] = {}

    def _upsert(self, kind: RecordKind, name: str, parent: Optional[int]) -> UpsertResult:
        key = (kind, name)
        if key in self.records:
            return AlreadyExists(kind=kind, name=name, record_id=self.records[key])
        record_id = len(self.records) + 1
        self.records[key] = record_id
        self.parents[key] = parent
        return Created(kind=kind, name=name, record_id=record_id)

    def upsert_hall(self, datacenter_id: Optional[int], name: str) -> UpsertResult:
        return self._upsert("hall", name, datacenter_id)

    def upsert_row(self, hall_id: int, name: str) -> UpsertResult:
        return self._upsert("row", name, hall_id)

    def upsert_rack(self, row_id: int, rack: Rack) -> UpsertResult:
        return self._upsert("rack", rack.name, row_id)

    def upsert_device(self, device: Device, rack_id: Optional[int]) -> UpsertResult:
        return self._upsert("device", device.hostname, rack_id)


def _attempt(kind: RecordKind, name: str, call) -> UpsertResult:
    try:
        result = call()
    except Exception as e:  # inventory I/O errors are per-item results
        result = Failed(kind=kind, name=name, reason=str(e) or e.__class__.__name__)
    if isinstance(result, Failed):
        logger.warning("Commit of %s %s failed: %s", kind, name, result.reason)
    return result


def _record_id(result: UpsertResult) -> Optional[int]:
    return None if isinstance(result, Failed) else result.record_id


def commit_preview(
    preview: TopologyPreview, inventory: Inventory, datacenter_id: Optional[int] = None
) -> CommitSummary:
    """Write halls, rows, racks and devices of ``preview`` into ``inventory``.

    Devices whose rack failed are reported as failed without calling the
    inventory. Externals are skipped.
    """
    summary = CommitSummary()
    dc_id = datacenter_id if datacenter_id is not None else preview.datacenter_id
    rack_ids: Dict[int, Optional[int]] = {}

    for hall in preview.datacenter().halls:
        hall_result = _attempt("hall", hall.name, lambda: inventory.upsert_hall(dc_id, hall.name))
        summary.results.append(hall_result)
        hall_id = _record_id(hall_result)

        for row in hall.rows:
            if hall_id is None:
                row_result: UpsertResult = Failed(kind="row", name=row.name, reason=f"parent hall {hall.name} not committed")
            else:
                row_result = _attempt("row", row.name, lambda: inventory.upsert_row(hall_id, row.name))
            summary.results.append(row_result)
            row_id = _record_id(row_result)

            for rack in row.racks:
                if row_id is None:
                    rack_result: UpsertResult = Failed(kind="rack", name=rack.name, reason=f"parent row {row.name} not committed")
                else:
                    rack_result = _attempt("rack", rack.name, lambda: inventory.upsert_rack(row_id, rack))
                summary.results.append(rack_result)
                rack_ids[rack.index] = _record_id(rack_result)

    for device in preview.devices:
        if device.role == "external":
            continue
        rack_id = None
        if device.rack_index is not None:
            rack_id = rack_ids.get(device.rack_index)
            if rack_id is None:
                summary.results.append(
                    Failed(kind="device", name=device.hostname, reason=f"rack {device.rack_name} not committed")
                )
                continue
        summary.results.append(
            _attempt("device", device.hostname, lambda: inventory.upsert_device(device, rack_id))
        )

    logger.info(
        "Commit of %r: %d created, %d existing, %d failed",
        preview.topology_name,
        summary.created,
        summary.existing,
        summary.failed,
    )
    return summary


__all__ = ["InMemoryInventory", "Inventory", "commit_preview"]
