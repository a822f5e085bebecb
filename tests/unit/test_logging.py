"""Tests for structured logging setup (``observability/logger.py``)."""

from __future__ import annotations

import json
import logging

import pytest

from kyc_ledger.observability.logger import get_logger, new_trace_id, setup_logging


@pytest.fixture(autouse=True)
def _restore_root_logging():
    """Undo the handler and level setup_logging() installs on the root logger."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


def _last_json_line(text: str) -> dict:
    return json.loads(text.strip().splitlines()[-1])


class TestSetupLogging:
    def test_stdlib_records_carry_trace_id(self, capsys):
        setup_logging(level="INFO", format="json")
        tid = new_trace_id()
        logging.getLogger("kyc_ledger.ledger.ledger").info("Minted %d to %s", 5, "X")

        entry = _last_json_line(capsys.readouterr().err)
        assert entry["event"] == "Minted 5 to X"
        assert entry["trace_id"] == tid
        assert entry["logger"] == "kyc_ledger.ledger.ledger"
        assert entry["level"] == "info"

    def test_structlog_records_carry_trace_id(self, capsys):
        setup_logging(level="INFO", format="json")
        tid = new_trace_id()
        get_logger("kyc_ledger.cli").warning("call_failed", line=3)

        entry = _last_json_line(capsys.readouterr().err)
        assert entry["event"] == "call_failed"
        assert entry["line"] == 3
        assert entry["trace_id"] == tid

    def test_level_filters_and_handler_is_replaced(self, capsys):
        setup_logging(level="INFO", format="json")
        setup_logging(level="ERROR", format="json")
        logging.getLogger("kyc_ledger.token").info("dropped")
        logging.getLogger("kyc_ledger.token").error("kept")

        lines = capsys.readouterr().err.strip().splitlines()
        assert [json.loads(line)["event"] for line in lines] == ["kept"]
