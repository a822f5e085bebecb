"""Multi-signature operation engine for allowlist governance.

Every allowlist change follows a two-state lifecycle:

    ACTIVE (collecting signatures) -> EXECUTED (terminal)

Transitions:
    propose()  admin creates an ACTIVE operation and signs it
    sign()     another admin adds a signature; the signature that first
               reaches quorum executes the operation in the same call
    execute()  any admin executes an ACTIVE operation at/above quorum

Each entry point runs as one unit of work on the shared journal: all
preconditions are checked before the first mutation, and notifications
are committed only if the whole call succeeds.  The ``active`` guard
makes a second execution fail instead of re-applying the write.
"""

from __future__ import annotations

import logging

from kyc_ledger.core.enums import OperationKind
from kyc_ledger.core.errors import (
    AlreadySigned,
    NotEnoughSignatures,
    OperationAlreadyExecuted,
)
from kyc_ledger.core.events import (
    OperationCreated,
    OperationExecuted,
    OperationSigned,
)
from kyc_ledger.event_bus.journal import EventJournal

from .admin_registry import AdminRegistry
from .allowlist import Allowlist
from .operations import Operation, OperationStore

logger = logging.getLogger(__name__)


class OperationEngine:
    """Propose / sign / execute state machine gating the allowlist.

    Args:
        registry: Fixed admin set and quorum.
        allowlist: The only state an executed operation writes to.
        store: Append-only operation arena.
        journal: Shared audit journal (also the serialization point).
    """

    def __init__(
        self,
        registry: AdminRegistry,
        allowlist: Allowlist,
        store: OperationStore,
        journal: EventJournal,
    ) -> None:
        self._registry = registry
        self._allowlist = allowlist
        self._store = store
        self._journal = journal

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def propose(self, caller: str, target: str, kind: OperationKind) -> int:
        """Create an operation signed by *caller*; return its id.

        With quorum 1 the proposer's signature already meets the
        threshold and the operation executes before this returns.

        Raises:
            OnlyAdminCanPerformThisAction: *caller* is not an admin.
        """
        kind = OperationKind(kind)
        with self._journal.unit_of_work():
            self._registry.require_admin(caller)
            operation = self._store.create(target, kind, proposer=caller)
            self._journal.emit(OperationCreated(
                operation_id=operation.operation_id,
                target=target,
                kind=kind,
            ))
            logger.info(
                "Operation proposed: id=%d kind=%s target=%s by=%s",
                operation.operation_id, kind.value, target, caller,
            )
            self._record_signature(operation, caller)
            return operation.operation_id

    def sign(self, caller: str, operation_id: int) -> None:
        """Add *caller*'s signature, executing on the quorum-reaching one.

        Raises:
            OnlyAdminCanPerformThisAction: *caller* is not an admin.
            OperationAlreadyExecuted: Operation is terminal or unknown.
            AlreadySigned: *caller* already signed this operation.
        """
        with self._journal.unit_of_work():
            self._registry.require_admin(caller)
            operation = self._require_active(operation_id)
            if operation.has_signed(caller):
                raise AlreadySigned(operation_id, f"signer={caller}")
            self._record_signature(operation, caller)

    def execute(self, caller: str, operation_id: int) -> None:
        """Execute an operation that already holds a quorum of signatures.

        Raises:
            OnlyAdminCanPerformThisAction: *caller* is not an admin.
            OperationAlreadyExecuted: Operation is terminal or unknown.
            NotEnoughSignatures: Fewer signatures than the quorum.
        """
        with self._journal.unit_of_work():
            self._registry.require_admin(caller)
            operation = self._require_active(operation_id)
            if operation.signature_count < self._registry.quorum:
                raise NotEnoughSignatures(
                    operation_id,
                    f"{operation.signature_count}/{self._registry.quorum}",
                )
            self._apply(operation, caller)

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _require_active(self, operation_id: int) -> Operation:
        # An id that was never allocated reads as a non-active record.
        operation = self._store.get(operation_id)
        if operation is None:
            raise OperationAlreadyExecuted(operation_id, "unknown operation")
        if not operation.active:
            raise OperationAlreadyExecuted(operation_id)
        return operation

    def _record_signature(self, operation: Operation, signer: str) -> None:
        operation.add_signer(signer)
        self._journal.emit(OperationSigned(
            operation_id=operation.operation_id,
            signer=signer,
        ))
        logger.info(
            "Operation signed: id=%d by=%s (%d/%d)",
            operation.operation_id, signer,
            operation.signature_count, self._registry.quorum,
        )
        if operation.signature_count >= self._registry.quorum:
            self._apply(operation, signer)

    def _apply(self, operation: Operation, executed_by: str) -> None:
        """Terminal transition plus its single allowlist write."""
        operation.mark_executed(executed_by)
        self._allowlist.record_status(operation.target, operation.kind.target_status)
        self._journal.emit(OperationExecuted(operation_id=operation.operation_id))
        logger.info(
            "Operation executed: id=%d kind=%s target=%s by=%s",
            operation.operation_id, operation.kind.value,
            operation.target, executed_by,
        )

    # ------------------------------------------------------------------
    # Read-only queries (soft-fail on unknown ids)
    # ------------------------------------------------------------------

    @property
    def quorum(self) -> int:
        return self._registry.quorum

    def signature_count(self, operation_id: int) -> int:
        operation = self._store.get(operation_id)
        return operation.signature_count if operation is not None else 0

    def has_signed(self, operation_id: int, admin: str) -> bool:
        operation = self._store.get(operation_id)
        return operation is not None and operation.has_signed(admin)

    def is_active(self, operation_id: int) -> bool:
        operation = self._store.get(operation_id)
        return operation is not None and operation.active

    def get_operation(self, operation_id: int) -> Operation | None:
        """Detached copy of an operation record, or None."""
        operation = self._store.get(operation_id)
        return operation.model_copy(deep=True) if operation is not None else None

    def operations(self) -> list[Operation]:
        """Full operation history in id order (detached copies)."""
        return [op.model_copy(deep=True) for op in self._store]

    def pending_operations(self) -> list[Operation]:
        """Operations still collecting signatures."""
        return [op.model_copy(deep=True) for op in self._store.active()]

    @property
    def operation_count(self) -> int:
        return len(self._store)
