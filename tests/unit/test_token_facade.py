"""Tests for the CompliantToken entry points not covered elsewhere."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from kyc_ledger.core.enums import Topic
from kyc_ledger.core.errors import ConfigError
from kyc_ledger.core.events import Transfer
from kyc_ledger.token import CompliantToken, LedgerSnapshot


class TestConstruction:
    def test_metadata(self, token):
        assert token.name == "Compliant Token"
        assert token.symbol == "KYC"
        assert token.decimals == 18
        assert token.total_supply == 1_000
        assert token.balance_of("X") == 1_000

    def test_is_admin(self, token):
        assert token.is_admin("A")
        assert not token.is_admin("X")
        assert token.admins == ("A", "B", "C")
        assert token.quorum == 2

    def test_nobody_verified_initially(self, token):
        for account in ("A", "X", "Z"):
            assert not token.is_verified(account)

    def test_bad_quorum(self):
        with pytest.raises(ConfigError):
            CompliantToken(admins=["A"], quorum=2)

    def test_supply_needs_holder(self):
        with pytest.raises(ConfigError):
            CompliantToken(admins=["A"], quorum=1, initial_supply=5)

    def test_no_supply(self):
        token = CompliantToken(admins=["A"], quorum=1)
        assert token.total_supply == 0
        assert token.events() == []


class TestSnapshot:
    def test_snapshot_surface(self, verified_token):
        verified_token.transfer("X", "Y", 250)
        verified_token.approve("Y", "S", 40)
        pending = verified_token.propose_remove_from_allowlist("C", "Y")

        snap = verified_token.snapshot()
        assert isinstance(snap, LedgerSnapshot)
        assert snap.total_supply == 1_000
        assert snap.balances == {"X": 750, "Y": 250}
        assert snap.allowances == {"Y": {"S": 40}}
        assert snap.verified == {"X": True, "Y": True}
        assert snap.admins == ["A", "B", "C"]
        assert snap.quorum == 2
        assert [op.operation_id for op in snap.operations] == [0, 1, pending]
        assert snap.operations[pending].active

    def test_snapshot_serializes(self, verified_token):
        data = verified_token.snapshot().model_dump(mode="json")
        assert data["operations"][0]["kind"] == "add_to_allowlist"
        assert data["operations"][0]["signers"] == ["A", "B"]


class TestNotifications:
    def test_subscribe_by_topic(self, verified_token):
        seen = []
        verified_token.subscribe(seen.append, Topic.LEDGER)
        verified_token.approve("X", "S", 1)
        verified_token.transfer("X", "Y", 1)
        verified_token.propose_add_to_allowlist("A", "Z")
        assert [e.event_type for e in seen] == ["approval", "transfer"]

    def test_events_are_ordered(self, verified_token):
        sequences = [e.sequence for e in verified_token.events()]
        assert sequences == sorted(sequences)
        assert sequences == list(range(len(sequences)))

    def test_mint_is_first_event(self, token):
        first = token.events()[0]
        assert isinstance(first, Transfer)
        assert first.recipient == "X"

    def test_rejected_approve_leaves_no_trace(self, token):
        before = token.events()
        with pytest.raises(ValidationError):
            token.approve("X", 7, 5)
        assert token.allowance("X", 7) == 0
        assert token.snapshot().allowances == {}
        assert token.events() == before
