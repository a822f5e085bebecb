"""Canonical ID and timestamp factories for the ledger.

All modules import from here instead of defining local _uuid()/_now() copies.

Timestamp Rule
--------------
All timestamps are ``datetime`` with ``tzinfo=timezone.utc``, never naive.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

# Counterparty recorded for the construction-time mint.
ZERO_ACCOUNT = "0x0000000000000000000000000000000000000000"


def new_id() -> str:
    """Generate a new UUID v4 string.  Use for event and trace IDs."""
    return str(uuid.uuid4())


def utc_now() -> datetime:
    """Return the current UTC time as a timezone-aware datetime."""
    return datetime.now(timezone.utc)
