"""
Structured logging tests.
"""

import logging

from util.logging import StructuredLogger, audit_event, logger, sanitize_payload


def test_log_visit_log_operation(caplog):
    with caplog.at_level(logging.INFO, logger="visitlog"):
        logger.log_visit_log_operation("save", visit_log_id="abc", visit_id="1111", details={"operation": "insert"})

    message = caplog.records[-1].getMessage()
    assert "Operation: visit_log.save" in message
    assert "Status: success" in message
    assert "'visit_log_id': 'abc'" in message
    assert "'operation': 'insert'" in message


def test_log_store_error(caplog):
    with caplog.at_level(logging.INFO, logger="visitlog"):
        logger.log_store_error("find_by_id", ConnectionError("refused"))

    record = caplog.records[-1]
    assert record.levelno == logging.ERROR
    assert "store.find_by_id" in record.getMessage()
    assert "ConnectionError" in record.getMessage()


def test_log_translation_issue(caplog):
    with caplog.at_level(logging.INFO, logger="visitlog"):
        logger.log_translation_issue("abc", "garbage", "visitId is not a UUID")

    record = caplog.records[-1]
    assert record.levelno == logging.WARNING
    assert "garbage" in record.getMessage()


def test_audit_event_redacts(caplog):
    with caplog.at_level(logging.INFO, logger="visitlog"):
        audit_event("maintenance.cleanup", {"operation": "x"}, {"token": "s3cr3t", "note": "ok"})

    message = caplog.records[-1].getMessage()
    assert "maintenance_cleanup" in message
    assert "s3cr3t" not in message
    assert "[REDACTED]" in message


def test_sanitize_payload_truncates():
    sanitized = sanitize_payload({"description": "x" * 150, "items": ["y" * 120], "count": 3})

    assert sanitized["description"] == "x" * 100 + "..."
    assert sanitized["items"] == ["y" * 100 + "..."]
    assert sanitized["count"] == 3


def test_handler_installed_once():
    first = StructuredLogger("visitlog.test_handlers")
    second = StructuredLogger("visitlog.test_handlers")

    assert first.logger is second.logger
    assert len(second.logger.handlers) == 1
