"""Tests for the fixed admin set and quorum."""

import pytest

from kyc_ledger.core.errors import ConfigError, OnlyAdminCanPerformThisAction
from kyc_ledger.governance.admin_registry import AdminRegistry


class TestConstruction:
    def test_valid_registry(self):
        reg = AdminRegistry(["A", "B", "C"], quorum=2)
        assert reg.admins == ("A", "B", "C")
        assert reg.quorum == 2
        assert len(reg) == 3

    def test_quorum_equal_to_admin_count(self):
        assert AdminRegistry(["A", "B"], quorum=2).quorum == 2

    def test_empty_admins_rejected(self):
        with pytest.raises(ConfigError, match="At least one admin"):
            AdminRegistry([], quorum=1)

    def test_duplicate_admins_rejected(self):
        with pytest.raises(ConfigError, match="Duplicate"):
            AdminRegistry(["A", "A"], quorum=1)

    def test_blank_admin_rejected(self):
        with pytest.raises(ConfigError):
            AdminRegistry(["A", ""], quorum=1)

    @pytest.mark.parametrize("quorum", [0, -1, 4])
    def test_quorum_out_of_range(self, quorum):
        with pytest.raises(ConfigError, match="Quorum must be between"):
            AdminRegistry(["A", "B", "C"], quorum=quorum)

    def test_bool_quorum_rejected(self):
        with pytest.raises(ConfigError):
            AdminRegistry(["A"], quorum=True)

    def test_admins_is_immutable_copy(self):
        source = ["A", "B"]
        reg = AdminRegistry(source, quorum=1)
        source.append("C")
        assert reg.admins == ("A", "B")
        assert not reg.is_admin("C")


class TestMembership:
    def test_is_admin(self):
        reg = AdminRegistry(["A", "B"], quorum=1)
        assert reg.is_admin("A")
        assert not reg.is_admin("Z")

    def test_require_admin_passes(self):
        AdminRegistry(["A"], quorum=1).require_admin("A")  # Should not raise

    def test_require_admin_raises(self):
        reg = AdminRegistry(["A"], quorum=1)
        with pytest.raises(OnlyAdminCanPerformThisAction) as exc_info:
            reg.require_admin("mallory")
        assert exc_info.value.code == "OnlyAdminCanPerformThisAction"
        assert exc_info.value.caller == "mallory"

    def test_no_mutation_entry_points(self):
        reg = AdminRegistry(["A"], quorum=1)
        for name in ("add_admin", "remove_admin", "set_quorum"):
            assert not hasattr(reg, name)
        with pytest.raises(AttributeError):
            reg.quorum = 5
