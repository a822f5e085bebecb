"""Governance operation records and their append-only store.

Operations live in an indexed arena: the id is the position in the
store, ids start at 0 and are never reused.  Records are never removed;
an executed operation stays as an immutable audit record.
"""

from __future__ import annotations

from collections.abc import Iterator
from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field, PrivateAttr

from kyc_ledger.core.enums import OperationKind, OperationState
from kyc_ledger.core.ids import utc_now


class Operation(BaseModel):
    """A proposed allowlist change collecting admin signatures.

    ``signers`` keeps signing order for display; membership checks go
    through a private set.  Mutate only through the OperationEngine.
    """

    operation_id: int
    target: str
    kind: OperationKind
    proposer: str
    active: bool = True
    signers: list[str] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=utc_now)
    executed_at: datetime | None = None
    executed_by: str = ""

    _signer_set: set[str] = PrivateAttr(default_factory=set)

    def model_post_init(self, __context: Any) -> None:
        self._signer_set = set(self.signers)

    @property
    def signature_count(self) -> int:
        return len(self.signers)

    @property
    def state(self) -> OperationState:
        return OperationState.ACTIVE if self.active else OperationState.EXECUTED

    def has_signed(self, admin: str) -> bool:
        return admin in self._signer_set

    def add_signer(self, admin: str) -> None:
        if not self.active:
            raise ValueError(f"Operation {self.operation_id} is terminal")
        if admin in self._signer_set:
            raise ValueError(f"{admin} already signed operation {self.operation_id}")
        self._signer_set.add(admin)
        self.signers.append(admin)

    def mark_executed(self, executed_by: str) -> None:
        """Active -> Executed. Terminal states cannot be exited."""
        if not self.active:
            raise ValueError(f"Operation {self.operation_id} is already terminal")
        self.active = False
        self.executed_at = utc_now()
        self.executed_by = executed_by


class OperationStore:
    """Append-only, monotonically indexed collection of operations."""

    def __init__(self) -> None:
        self._operations: list[Operation] = []

    def create(self, target: str, kind: OperationKind, proposer: str) -> Operation:
        """Allocate the next id and store a new active operation (no signers)."""
        operation = Operation(
            operation_id=len(self._operations),
            target=target,
            kind=kind,
            proposer=proposer,
        )
        self._operations.append(operation)
        return operation

    def get(self, operation_id: int) -> Operation | None:
        """Look up an operation; None for unknown or malformed ids."""
        if isinstance(operation_id, bool) or not isinstance(operation_id, int):
            return None
        if 0 <= operation_id < len(self._operations):
            return self._operations[operation_id]
        return None

    @property
    def next_id(self) -> int:
        return len(self._operations)

    def active(self) -> list[Operation]:
        return [op for op in self._operations if op.active]

    def __len__(self) -> int:
        return len(self._operations)

    def __iter__(self) -> Iterator[Operation]:
        return iter(list(self._operations))
