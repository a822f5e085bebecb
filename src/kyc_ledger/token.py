"""Allowlist-gated token: the external entry points.

One CompliantToken owns one store: a Ledger, an Allowlist, an
OperationStore and the EventJournal that serializes every call against
them.  Each mutating method takes the authenticated caller identity
explicitly; authenticating it is the transport layer's job.

Usage::

    token = CompliantToken(admins=["A", "B", "C"], quorum=2,
                           initial_supply=1_000, initial_holder="X")
    op_id = token.propose_add_to_allowlist("A", "X")
    token.sign("B", op_id)          # quorum reached, X verified
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import datetime

from pydantic import BaseModel, Field

from kyc_ledger.core.config import Settings
from kyc_ledger.core.enums import OperationKind, Topic
from kyc_ledger.core.errors import ConfigError
from kyc_ledger.core.events import LedgerEvent
from kyc_ledger.core.ids import utc_now
from kyc_ledger.event_bus.journal import EventHandler, EventJournal
from kyc_ledger.governance import (
    AdminRegistry,
    Allowlist,
    Operation,
    OperationEngine,
    OperationStore,
)
from kyc_ledger.ledger.ledger import Ledger
from kyc_ledger.ledger.transfer_gate import TransferGate

logger = logging.getLogger(__name__)


class LedgerSnapshot(BaseModel):
    """Persisted state surface, for audit and indexing tooling."""

    taken_at: datetime = Field(default_factory=utc_now)
    name: str
    symbol: str
    decimals: int
    total_supply: int
    balances: dict[str, int]
    allowances: dict[str, dict[str, int]]
    verified: dict[str, bool]
    admins: list[str]
    quorum: int
    operations: list[Operation]


class CompliantToken:
    """Ledger whose transfers are gated by a multisig-governed allowlist.

    Raises:
        ConfigError: Invalid admin set or quorum.
    """

    def __init__(
        self,
        admins: Sequence[str],
        quorum: int,
        *,
        name: str = "Compliant Token",
        symbol: str = "KYC",
        decimals: int = 18,
        initial_supply: int = 0,
        initial_holder: str = "",
        journal: EventJournal | None = None,
    ) -> None:
        self.name = name
        self.symbol = symbol
        self.decimals = decimals

        self._journal = journal or EventJournal()
        self._registry = AdminRegistry(admins, quorum)
        self._allowlist = Allowlist(self._journal)
        self._operations = OperationStore()
        self._ledger = Ledger(self._journal)
        self._gate = TransferGate(self._ledger, self._allowlist, self._journal)
        self._engine = OperationEngine(
            self._registry, self._allowlist, self._operations, self._journal,
        )

        if initial_supply:
            if not initial_holder:
                raise ConfigError("initial_holder is required when initial_supply > 0")
            self._ledger.mint(initial_holder, initial_supply)

        logger.info(
            "Token %s initialised: admins=%d quorum=%d supply=%d",
            symbol, len(self._registry), quorum, initial_supply,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> CompliantToken:
        """Build a token from validated settings."""
        settings.validate_construction()
        journal = EventJournal(
            persist_path=settings.journal.persist_path,
            max_memory_entries=settings.journal.max_memory_entries,
        )
        return cls(
            admins=settings.governance.admins,
            quorum=settings.governance.quorum,
            name=settings.token.name,
            symbol=settings.token.symbol,
            decimals=settings.token.decimals,
            initial_supply=settings.token.initial_supply,
            initial_holder=settings.token.initial_holder,
            journal=journal,
        )

    # ------------------------------------------------------------------
    # Ledger
    # ------------------------------------------------------------------

    @property
    def total_supply(self) -> int:
        return self._ledger.total_supply

    def balance_of(self, account: str) -> int:
        return self._ledger.balance_of(account)

    def allowance(self, owner: str, spender: str) -> int:
        return self._ledger.allowance(owner, spender)

    def approve(self, caller: str, spender: str, amount: int) -> bool:
        # Overwrites any previous allowance; see DESIGN.md (open question 1).
        return self._ledger.approve(caller, spender, amount)

    def transfer(self, caller: str, to: str, amount: int) -> bool:
        return self._gate.transfer(caller, to, amount)

    def transfer_from(self, caller: str, from_: str, to: str, amount: int) -> bool:
        return self._gate.transfer_from(caller, from_, to, amount)

    # ------------------------------------------------------------------
    # Allowlist / admins
    # ------------------------------------------------------------------

    def is_verified(self, account: str) -> bool:
        return self._allowlist.is_verified(account)

    def is_admin(self, account: str) -> bool:
        return self._registry.is_admin(account)

    @property
    def admins(self) -> tuple[str, ...]:
        return self._registry.admins

    @property
    def quorum(self) -> int:
        return self._registry.quorum

    # ------------------------------------------------------------------
    # Governance
    # ------------------------------------------------------------------

    def propose_add_to_allowlist(self, caller: str, target: str) -> int:
        return self._engine.propose(caller, target, OperationKind.ADD_TO_ALLOWLIST)

    def propose_remove_from_allowlist(self, caller: str, target: str) -> int:
        return self._engine.propose(caller, target, OperationKind.REMOVE_FROM_ALLOWLIST)

    def sign(self, caller: str, operation_id: int) -> None:
        self._engine.sign(caller, operation_id)

    def execute(self, caller: str, operation_id: int) -> None:
        self._engine.execute(caller, operation_id)

    def signature_count(self, operation_id: int) -> int:
        return self._engine.signature_count(operation_id)

    def has_signed(self, operation_id: int, admin: str) -> bool:
        return self._engine.has_signed(operation_id, admin)

    def is_active(self, operation_id: int) -> bool:
        return self._engine.is_active(operation_id)

    @property
    def operation_count(self) -> int:
        return self._engine.operation_count

    def get_operation(self, operation_id: int) -> Operation | None:
        return self._engine.get_operation(operation_id)

    def operations(self) -> list[Operation]:
        return self._engine.operations()

    def pending_operations(self) -> list[Operation]:
        return self._engine.pending_operations()

    # ------------------------------------------------------------------
    # Audit
    # ------------------------------------------------------------------

    def events(
        self,
        topic: Topic | None = None,
        event_type: type[LedgerEvent] | None = None,
    ) -> list[LedgerEvent]:
        """Committed notifications, in the order they occurred."""
        return self._journal.read(topic=topic, event_type=event_type)

    def subscribe(self, handler: EventHandler, topic: Topic | None = None) -> None:
        self._journal.subscribe(handler, topic)

    def snapshot(self) -> LedgerSnapshot:
        """Consistent copy of the whole persisted state surface."""
        with self._journal.lock:
            return LedgerSnapshot(
                name=self.name,
                symbol=self.symbol,
                decimals=self.decimals,
                total_supply=self._ledger.total_supply,
                balances=self._ledger.balances(),
                allowances=self._ledger.allowances(),
                verified=self._allowlist.as_dict(),
                admins=list(self._registry.admins),
                quorum=self._registry.quorum,
                operations=self._engine.operations(),
            )
