"""Fixed admin set and quorum threshold.

Both are set at construction and never change: there is deliberately no
entry point to add or remove admins or to move the quorum.
"""

from __future__ import annotations

from collections.abc import Sequence

from kyc_ledger.core.errors import ConfigError, OnlyAdminCanPerformThisAction


class AdminRegistry:
    """Authorized signer identities plus an immutable quorum.

    Args:
        admins: Ordered admin identities. Order is kept for display only.
        quorum: Distinct signatures needed to execute an operation.

    Raises:
        ConfigError: Empty/duplicate admins or quorum outside 1..len(admins).
    """

    def __init__(self, admins: Sequence[str], quorum: int) -> None:
        admins = tuple(admins)
        if not admins:
            raise ConfigError("At least one admin is required")
        if any(not isinstance(a, str) or not a for a in admins):
            raise ConfigError("Admin identities must be non-empty strings")
        if len(set(admins)) != len(admins):
            raise ConfigError(f"Duplicate admin identities: {list(admins)}")
        if isinstance(quorum, bool) or not isinstance(quorum, int):
            raise ConfigError(f"Quorum must be an integer, got {quorum!r}")
        if not 1 <= quorum <= len(admins):
            raise ConfigError(
                f"Quorum must be between 1 and {len(admins)}, got {quorum}"
            )

        self._admins = admins
        self._members = frozenset(admins)
        self._quorum = quorum

    @property
    def admins(self) -> tuple[str, ...]:
        return self._admins

    @property
    def quorum(self) -> int:
        return self._quorum

    def is_admin(self, identity: str) -> bool:
        return identity in self._members

    def require_admin(self, caller: str) -> None:
        """Raise OnlyAdminCanPerformThisAction unless *caller* is an admin."""
        if caller not in self._members:
            raise OnlyAdminCanPerformThisAction(caller)

    def __len__(self) -> int:
        return len(self._admins)
