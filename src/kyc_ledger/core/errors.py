"""Custom exception hierarchy for the compliance ledger.

Every leaf error carries a stable ``code`` that names the failure kind
reported to callers (``OnlyAdminCanPerformThisAction``,
``SenderNotVerified`` ...).  Codes never change once published; audit
tooling matches on them.
"""


class LedgerError(Exception):
    """Base exception for all ledger errors."""

    code: str = "LedgerError"


# --- Configuration ---
class ConfigError(LedgerError):
    """Invalid or missing configuration."""

    code = "ConfigError"


# --- Input validation ---
class InvalidAmount(LedgerError):
    """Amount is not a non-negative integer."""

    code = "InvalidAmount"

    def __init__(self, amount: object):
        self.amount = amount
        super().__init__(f"Amount must be a non-negative integer, got {amount!r}")


# --- Authorization ---
class AuthorizationError(LedgerError):
    """Caller lacks the rights required for a governance action."""


class OnlyAdminCanPerformThisAction(AuthorizationError):
    """A non-admin attempted to propose, sign or execute an operation."""

    code = "OnlyAdminCanPerformThisAction"

    def __init__(self, caller: str):
        self.caller = caller
        super().__init__(f"Only an admin can perform this action (caller={caller!r})")


# --- Compliance gating ---
class ComplianceError(LedgerError):
    """A transfer counterparty is not on the allowlist."""

    def __init__(self, account: str):
        self.account = account
        super().__init__(f"{self.code}: {account!r}")


class SenderNotVerified(ComplianceError):
    """The account whose balance would be debited is not verified."""

    code = "SenderNotVerified"


class RecipientNotVerified(ComplianceError):
    """The account that would be credited is not verified."""

    code = "RecipientNotVerified"


# --- Insufficiency ---
class InsufficiencyError(LedgerError):
    """Balance or allowance below the requested amount."""

    def __init__(self, available: int, requested: int):
        self.available = available
        self.requested = requested
        super().__init__(
            f"{self.code}: available={available} requested={requested}"
        )


class InsufficientBalance(InsufficiencyError):
    """Source balance is lower than the transfer amount."""

    code = "InsufficientBalance"


class InsufficientAllowance(InsufficiencyError):
    """Spender allowance is lower than the transfer amount."""

    code = "InsufficientAllowance"


# --- Operation state ---
class OperationStateError(LedgerError):
    """Governance operation is in the wrong state for the request."""

    def __init__(self, operation_id: int, detail: str = ""):
        self.operation_id = operation_id
        msg = f"{self.code}: operation {operation_id}"
        if detail:
            msg = f"{msg} ({detail})"
        super().__init__(msg)


class OperationAlreadyExecuted(OperationStateError):
    """Operation is terminal (or was never created)."""

    code = "OperationAlreadyExecuted"


class AlreadySigned(OperationStateError):
    """The admin has already signed this operation."""

    code = "AlreadySigned"


class NotEnoughSignatures(OperationStateError):
    """Manual execution requested below quorum."""

    code = "NotEnoughSignatures"


# --- Audit journal ---
class JournalUnavailable(LedgerError):
    """The audit journal cannot record events; mutating calls are refused."""

    code = "JournalUnavailable"
