"""Compliance gate in front of the Ledger's transfer primitives.

Both counterparties must be on the allowlist before any balance is
inspected or moved.  The gate only reads the allowlist.
"""

from __future__ import annotations

from kyc_ledger.core.errors import RecipientNotVerified, SenderNotVerified
from kyc_ledger.event_bus.journal import EventJournal
from kyc_ledger.governance.allowlist import Allowlist

from .ledger import Ledger, require_amount


class TransferGate:
    """Wraps Ledger transfers with an allowlist precondition."""

    def __init__(self, ledger: Ledger, allowlist: Allowlist, journal: EventJournal) -> None:
        self._ledger = ledger
        self._allowlist = allowlist
        self._journal = journal

    def check(self, sender: str, recipient: str) -> None:
        """Raise unless both *sender* and *recipient* are verified."""
        if not self._allowlist.is_verified(sender):
            raise SenderNotVerified(sender)
        if not self._allowlist.is_verified(recipient):
            raise RecipientNotVerified(recipient)

    def transfer(self, caller: str, to: str, amount: int) -> bool:
        require_amount(amount)
        with self._journal.unit_of_work():
            self.check(caller, to)
            return self._ledger.transfer_direct(caller, to, amount)

    def transfer_from(self, caller: str, from_: str, to: str, amount: int) -> bool:
        """Delegated transfer; the gated sender is *from_*, not the spender."""
        require_amount(amount)
        with self._journal.unit_of_work():
            self.check(from_, to)
            return self._ledger.transfer_delegated(caller, from_, to, amount)
