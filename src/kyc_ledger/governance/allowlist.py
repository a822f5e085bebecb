"""Compliance allowlist (per-account KYC flag).

Read by the TransferGate on every balance movement.  Written only by the
OperationEngine when a governance operation reaches its terminal state.
"""

from __future__ import annotations

import logging

from kyc_ledger.core.events import StatusChanged
from kyc_ledger.event_bus.journal import EventJournal

logger = logging.getLogger(__name__)


class Allowlist:
    """Boolean verification status keyed by account; default False."""

    def __init__(self, journal: EventJournal) -> None:
        self._journal = journal
        self._status: dict[str, bool] = {}

    def is_verified(self, account: str) -> bool:
        return self._status.get(account, False)

    def record_status(self, account: str, verified: bool) -> None:
        """Write the flag for *account* and emit a StatusChanged event.

        Must run inside the executing operation's unit of work.
        """
        event = StatusChanged(account=account, verified=verified)
        self._status[account] = verified
        self._journal.emit(event)
        logger.info("Allowlist: %s verified=%s", account, verified)

    def as_dict(self) -> dict[str, bool]:
        """Every account ever touched by an operation, with its flag."""
        return dict(self._status)
