"""Shared fixtures for the kyc-ledger test suite."""

from __future__ import annotations

from collections.abc import Callable

import pytest

from kyc_ledger.token import CompliantToken

ADMINS = ["A", "B", "C"]


# ---------------------------------------------------------------------------
# Token
# ---------------------------------------------------------------------------

@pytest.fixture
def admins() -> list[str]:
    return list(ADMINS)


@pytest.fixture
def token() -> CompliantToken:
    """2-of-3 token with 1_000 units minted to X; nobody verified."""
    return CompliantToken(
        admins=ADMINS,
        quorum=2,
        initial_supply=1_000,
        initial_holder="X",
    )


@pytest.fixture
def allowlist() -> Callable[[CompliantToken, str], None]:
    """Verify accounts through the normal 2-of-3 governance flow."""

    def _verify(token: CompliantToken, *accounts: str) -> None:
        for account in accounts:
            op_id = token.propose_add_to_allowlist("A", account)
            if token.is_active(op_id):
                token.sign("B", op_id)
            assert token.is_verified(account)

    return _verify


@pytest.fixture
def verified_token(token, allowlist) -> CompliantToken:
    """The 2-of-3 token with X and Y verified and Z left unverified."""
    allowlist(token, "X", "Y")
    return token
