"""Allowlist governance: fixed admin set, quorum multisig, KYC flags.

- **AdminRegistry**: immutable admin identities and quorum threshold
- **Allowlist**: per-account verification flag, default unverified
- **OperationStore**: append-only arena of governance operations
- **OperationEngine**: propose / sign / execute state machine; the only
  writer of the allowlist
"""

from kyc_ledger.governance.admin_registry import AdminRegistry
from kyc_ledger.governance.allowlist import Allowlist
from kyc_ledger.governance.engine import OperationEngine
from kyc_ledger.governance.operations import Operation, OperationStore

__all__ = [
    "AdminRegistry",
    "Allowlist",
    "Operation",
    "OperationEngine",
    "OperationStore",
]
