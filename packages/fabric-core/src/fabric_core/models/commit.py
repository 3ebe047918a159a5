# fabric_core/models/commit.py
from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

RecordKind = Literal["hall", "row", "rack", "device"]


class _Outcome(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)
    kind: RecordKind
    name: str


class Created(_Outcome):
    status: Literal["created"] = "created"
    record_id: int


class AlreadyExists(_Outcome):
    status: Literal["exists"] = "exists"
    record_id: int


class Failed(_Outcome):
    status: Literal["failed"] = "failed"
    reason: str
    record_id: Optional[int] = None


UpsertResult = Annotated[Union[Created, AlreadyExists, Failed], Field(discriminator="status")]


class CommitSummary(BaseModel):
    """Outcome of writing a preview into an inventory, one result per record."""

    model_config = ConfigDict(extra="ignore")
    results: List[UpsertResult] = Field(default_factory=list)

    @property
    def created(self) -> int:
        return sum(1 for r in self.results if isinstance(r, Created))

    @property
    def existing(self) -> int:
        return sum(1 for r in self.results if isinstance(r, AlreadyExists))

    @property
    def failed(self) -> int:
        return sum(1 for r in self.results if isinstance(r, Failed))

    @property
    def succeeded(self) -> int:
        return self.created + self.existing

    @property
    def ok(self) -> bool:
        return self.failed == 0

    def messages(self) -> List[str]:
        out = []
        for r in self.results:
            if isinstance(r, Failed):
                out.append(f"{r.kind} {r.name}: failed ({r.reason})")
            elif isinstance(r, AlreadyExists):
                out.append(f"{r.kind} {r.name}: already exists (id {r.record_id})")
            else:
                out.append(f"{r.kind} {r.name}: created (id {r.record_id})")
        return out

    def by_kind(self, kind: RecordKind) -> List[UpsertResult]:
        return [r for r in self.results if r.kind == kind]
