"""Compliance-gated asset ledger with quorum-governed allowlist."""

from kyc_ledger.token import CompliantToken, LedgerSnapshot

__all__ = ["CompliantToken", "LedgerSnapshot"]

__version__ = "0.1.0"
