"""Balance and allowance bookkeeping.

The Ledger performs no compliance checks of its own; every transfer
reaches it through the TransferGate.  Each mutation validates all
sufficiency conditions before touching state, so a failed call leaves
balances and allowances unchanged.
"""

from __future__ import annotations

import logging

from kyc_ledger.core.errors import InsufficientAllowance, InsufficientBalance, InvalidAmount
from kyc_ledger.core.events import Approval, Transfer
from kyc_ledger.core.ids import ZERO_ACCOUNT
from kyc_ledger.event_bus.journal import EventJournal

logger = logging.getLogger(__name__)


def require_amount(amount: int) -> int:
    """Return *amount* if it is a non-negative int, else raise InvalidAmount."""
    if isinstance(amount, bool) or not isinstance(amount, int) or amount < 0:
        raise InvalidAmount(amount)
    return amount


class Ledger:
    """Per-account balances and per-(owner, spender) allowances.

    Accounts exist implicitly: an account never credited reads as zero.
    """

    def __init__(self, journal: EventJournal) -> None:
        self._journal = journal
        self._balances: dict[str, int] = {}
        self._allowances: dict[str, dict[str, int]] = {}
        self._total_supply = 0

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    @property
    def total_supply(self) -> int:
        return self._total_supply

    def balance_of(self, account: str) -> int:
        return self._balances.get(account, 0)

    def allowance(self, owner: str, spender: str) -> int:
        return self._allowances.get(owner, {}).get(spender, 0)

    def balances(self) -> dict[str, int]:
        return dict(self._balances)

    def allowances(self) -> dict[str, dict[str, int]]:
        return {owner: dict(spenders) for owner, spenders in self._allowances.items()}

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def mint(self, account: str, amount: int) -> None:
        """Create supply for *account*. Used once, at construction."""
        require_amount(amount)
        event = Transfer(sender=ZERO_ACCOUNT, recipient=account, amount=amount)
        with self._journal.unit_of_work():
            self._balances[account] = self.balance_of(account) + amount
            self._total_supply += amount
            self._journal.emit(event)
        logger.info("Minted %d to %s (supply=%d)", amount, account, self._total_supply)

    def approve(self, owner: str, spender: str, amount: int) -> bool:
        """Set (overwrite, not add to) *spender*'s allowance over *owner*."""
        require_amount(amount)
        event = Approval(owner=owner, spender=spender, amount=amount)
        with self._journal.unit_of_work():
            self._allowances.setdefault(owner, {})[spender] = amount
            self._journal.emit(event)
        logger.debug("Approval: owner=%s spender=%s amount=%d", owner, spender, amount)
        return True

    def transfer_direct(self, sender: str, recipient: str, amount: int) -> bool:
        """Move *amount* from *sender* to *recipient*."""
        require_amount(amount)
        with self._journal.unit_of_work():
            self._require_balance(sender, amount)
            self._move(sender, recipient, amount)
        return True

    def transfer_delegated(
        self, spender: str, owner: str, recipient: str, amount: int,
    ) -> bool:
        """Move *amount* out of *owner* on *spender*'s allowance."""
        require_amount(amount)
        with self._journal.unit_of_work():
            self._require_balance(owner, amount)
            available = self.allowance(owner, spender)
            if available < amount:
                raise InsufficientAllowance(available, amount)
            self._move(owner, recipient, amount)
            self._allowances[owner][spender] = available - amount
        return True

    def _require_balance(self, account: str, amount: int) -> None:
        available = self.balance_of(account)
        if available < amount:
            raise InsufficientBalance(available, amount)

    def _move(self, sender: str, recipient: str, amount: int) -> None:
        event = Transfer(sender=sender, recipient=recipient, amount=amount)
        # Debit before credit so sender == recipient nets to zero.
        self._balances[sender] = self.balance_of(sender) - amount
        self._balances[recipient] = self.balance_of(recipient) + amount
        self._journal.emit(event)
        logger.debug("Transfer: %s -> %s amount=%d", sender, recipient, amount)
