"""Notification schemas for the audit trail.

All events inherit from LedgerEvent and are Pydantic models.
6 event types across 2 topics.  ``sequence`` is assigned by the
EventJournal when the emitting call commits; it is ``-1`` while staged.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from .enums import OperationKind, Topic
from .ids import new_id, utc_now


class LedgerEvent(BaseModel):
    """Base for all events. Provides identity, ordering and time."""

    event_id: str = Field(default_factory=new_id)
    event_type: str = ""
    topic: Topic = Topic.GOVERNANCE
    sequence: int = -1
    timestamp: datetime = Field(default_factory=utc_now)


# ===========================================================================
# Topic: ledger
# ===========================================================================

class Transfer(LedgerEvent):
    event_type: str = "transfer"
    topic: Topic = Topic.LEDGER
    sender: str
    recipient: str
    amount: int


class Approval(LedgerEvent):
    event_type: str = "approval"
    topic: Topic = Topic.LEDGER
    owner: str
    spender: str
    amount: int


# ===========================================================================
# Topic: governance
# ===========================================================================

class StatusChanged(LedgerEvent):
    """Allowlist flag written for an account."""

    event_type: str = "status_changed"
    account: str
    verified: bool


class OperationCreated(LedgerEvent):
    event_type: str = "operation_created"
    operation_id: int
    target: str
    kind: OperationKind


class OperationSigned(LedgerEvent):
    event_type: str = "operation_signed"
    operation_id: int
    signer: str


class OperationExecuted(LedgerEvent):
    event_type: str = "operation_executed"
    operation_id: int


EVENT_TYPES: dict[str, type[LedgerEvent]] = {
    cls.model_fields["event_type"].default: cls
    for cls in (
        Transfer,
        Approval,
        StatusChanged,
        OperationCreated,
        OperationSigned,
        OperationExecuted,
    )
}
