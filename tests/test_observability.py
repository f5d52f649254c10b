"""Tests for the observability module."""

import json
import logging

import pytest

from claim_workflow.observability.logger import (
    ClaimLogger,
    HumanReadableFormatter,
    StructuredFormatter,
    _get_claim_context,
    claim_context,
    get_logger,
    log_claim_event,
)


def _record(msg="Test message", **attrs):
    record = logging.LogRecord(
        name="test",
        level=logging.INFO,
        pathname="test.py",
        lineno=1,
        msg=msg,
        args=(),
        exc_info=None,
    )
    for key, value in attrs.items():
        setattr(record, key, value)
    return record


class TestStructuredLogging:
    def test_get_logger_returns_claim_logger(self):
        logger = get_logger("test_claim_workflow_logger")
        assert isinstance(logger, ClaimLogger)

    def test_claim_logger_attaches_claim_id_and_status(self, caplog):
        logger = get_logger("test_logger_with_id")
        logger.set_claim_id("CLM-TEST123")
        logger.set_status("SUBMITTED")
        logger.logger.propagate = True
        with caplog.at_level(logging.INFO, logger="test_logger_with_id"):
            logger.info("Test message")
        assert caplog.records[-1].claim_id == "CLM-TEST123"
        assert caplog.records[-1].status == "SUBMITTED"

    def test_log_event_carries_event_data(self, caplog):
        logger = get_logger("test_logger_events", claim_id="CLM-EVT")
        logger.logger.propagate = True
        with caplog.at_level(logging.INFO, logger="test_logger_events"):
            logger.log_event("claim_edited", fields=["description"])
        record = caplog.records[-1]
        assert record.claim_id == "CLM-EVT"
        assert record.extra_data == {"event": "claim_edited", "fields": ["description"]}
        assert record.getMessage().startswith("[claim_edited]")

    def test_log_claim_event_with_plain_logger(self, caplog):
        logger = logging.getLogger("test_plain_logger")
        with caplog.at_level(logging.WARNING, logger="test_plain_logger"):
            log_claim_event(logger, "claim_edit_rejected", claim_id="CLM-1", level=logging.WARNING)
        assert caplog.records[-1].levelno == logging.WARNING
        assert caplog.records[-1].claim_id == "CLM-1"

    def test_claim_context_sets_and_restores(self):
        assert _get_claim_context() == {}
        with claim_context(claim_id="CLM-123", status="DRAFT", role="claims_admin"):
            ctx = _get_claim_context()
            assert ctx["claim_id"] == "CLM-123"
            assert ctx["status"] == "DRAFT"
            assert ctx["role"] == "claims_admin"
        assert _get_claim_context() == {}

    def test_claim_context_restored_on_error(self):
        with pytest.raises(RuntimeError):
            with claim_context(claim_id="CLM-ERR"):
                raise RuntimeError("boom")
        assert _get_claim_context() == {}


class TestFormatters:
    def test_structured_formatter_json_output(self):
        parsed = json.loads(StructuredFormatter().format(_record()))
        assert parsed["level"] == "INFO"
        assert parsed["message"] == "Test message"
        assert "timestamp" in parsed
        assert parsed["source"]["line"] == 1

    def test_structured_formatter_uses_context(self):
        with claim_context(claim_id="CLM-CTX", status="VALIDATION"):
            parsed = json.loads(StructuredFormatter(include_timestamp=False).format(_record()))
        assert parsed["claim_id"] == "CLM-CTX"
        assert parsed["status"] == "VALIDATION"
        assert "timestamp" not in parsed

    def test_record_attributes_win_over_context(self):
        with claim_context(claim_id="CLM-CTX"):
            parsed = json.loads(StructuredFormatter().format(_record(claim_id="CLM-REC")))
        assert parsed["claim_id"] == "CLM-REC"

    def test_human_formatter(self):
        text = HumanReadableFormatter().format(
            _record(claim_id="CLM-H", extra_data={"event": "claim_created"})
        )
        assert "[claim=CLM-H]" in text
        assert "test: Test message" in text
        assert "claim_created" in text
