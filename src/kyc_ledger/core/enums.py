"""Enumerations used across the compliance ledger."""

from enum import Enum


class OperationKind(str, Enum):
    ADD_TO_ALLOWLIST = "add_to_allowlist"
    REMOVE_FROM_ALLOWLIST = "remove_from_allowlist"

    @property
    def target_status(self) -> bool:
        """Verification flag written when an operation of this kind executes."""
        return self is OperationKind.ADD_TO_ALLOWLIST


class OperationState(str, Enum):
    ACTIVE = "active"
    EXECUTED = "executed"  # terminal


class Topic(str, Enum):
    LEDGER = "ledger"
    GOVERNANCE = "governance"
