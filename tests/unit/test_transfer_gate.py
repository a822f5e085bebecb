"""Tests for allowlist gating on transfer / transfer_from."""

from __future__ import annotations

import pytest

from kyc_ledger.core.errors import (
    InsufficientAllowance,
    InsufficientBalance,
    RecipientNotVerified,
    SenderNotVerified,
)
from kyc_ledger.core.events import Transfer


class TestTransfer:
    def test_verified_parties_can_transfer(self, verified_token):
        assert verified_token.transfer("X", "Y", 100) is True
        assert verified_token.balance_of("X") == 900
        assert verified_token.balance_of("Y") == 100

    def test_unverified_sender(self, token, allowlist):
        allowlist(token, "Y")
        with pytest.raises(SenderNotVerified) as exc_info:
            token.transfer("X", "Y", 1)
        assert exc_info.value.account == "X"
        assert token.balance_of("X") == 1_000

    def test_unverified_recipient(self, verified_token):
        with pytest.raises(RecipientNotVerified) as exc_info:
            verified_token.transfer("X", "Z", 1)
        assert exc_info.value.account == "Z"
        assert verified_token.balance_of("Z") == 0

    def test_sender_checked_before_recipient(self, token):
        with pytest.raises(SenderNotVerified):
            token.transfer("X", "Z", 1)

    def test_gating_precedes_balance_check(self, token, allowlist):
        # Z has no balance at all, but the compliance error wins.
        allowlist(token, "Y")
        with pytest.raises(SenderNotVerified):
            token.transfer("Z", "Y", 10_000)

    def test_insufficient_balance_after_gate(self, verified_token):
        with pytest.raises(InsufficientBalance):
            verified_token.transfer("Y", "X", 1)

    def test_failed_transfer_emits_no_event(self, verified_token):
        before = len(verified_token.events(event_type=Transfer))
        with pytest.raises(RecipientNotVerified):
            verified_token.transfer("X", "Z", 5)
        assert len(verified_token.events(event_type=Transfer)) == before


class TestTransferFrom:
    def test_delegated_transfer(self, verified_token):
        verified_token.approve("X", "S", 300)
        assert verified_token.transfer_from("S", "X", "Y", 200) is True
        assert verified_token.balance_of("Y") == 200
        assert verified_token.allowance("X", "S") == 100

    def test_spender_need_not_be_verified(self, verified_token):
        assert not verified_token.is_verified("S")
        verified_token.approve("X", "S", 10)
        verified_token.transfer_from("S", "X", "Y", 10)
        assert verified_token.balance_of("Y") == 10

    def test_unverified_owner(self, token, allowlist):
        allowlist(token, "Y")
        token.approve("X", "S", 10)
        with pytest.raises(SenderNotVerified):
            token.transfer_from("S", "X", "Y", 10)
        assert token.allowance("X", "S") == 10

    def test_unverified_recipient(self, verified_token):
        verified_token.approve("X", "S", 10)
        with pytest.raises(RecipientNotVerified):
            verified_token.transfer_from("S", "X", "Z", 10)
        assert verified_token.allowance("X", "S") == 10

    def test_gating_precedes_allowance_check(self, token):
        with pytest.raises(SenderNotVerified):
            token.transfer_from("S", "X", "Y", 10)

    def test_insufficient_allowance(self, verified_token):
        verified_token.approve("X", "S", 5)
        with pytest.raises(InsufficientAllowance):
            verified_token.transfer_from("S", "X", "Y", 6)
        assert verified_token.balance_of("X") == 1_000

    def test_insufficient_balance(self, verified_token):
        verified_token.approve("Y", "S", 50)
        with pytest.raises(InsufficientBalance):
            verified_token.transfer_from("S", "Y", "X", 50)
        assert verified_token.allowance("Y", "S") == 50


class TestRemovalRevokesAccess:
    def test_removed_account_cannot_send(self, verified_token):
        op_id = verified_token.propose_remove_from_allowlist("C", "X")
        verified_token.sign("A", op_id)
        assert not verified_token.is_verified("X")
        with pytest.raises(SenderNotVerified):
            verified_token.transfer("X", "Y", 1)

    def test_removed_account_cannot_receive(self, verified_token):
        op_id = verified_token.propose_remove_from_allowlist("C", "Y")
        verified_token.sign("B", op_id)
        with pytest.raises(RecipientNotVerified):
            verified_token.transfer("X", "Y", 1)
