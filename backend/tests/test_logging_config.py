"""Tests for structured logging setup."""

import logging

from order_mail.logging_config import StructuredFormatter, get_logger


def test_formatter_fills_missing_context_fields():
    formatter = StructuredFormatter("[vendor:%(vendor)s method:%(parse_method)s] %(message)s")
    record = logging.LogRecord("t", logging.INFO, __file__, 1, "parsed", None, None)

    assert formatter.format(record) == "[vendor:None method:None] parsed"


def test_file_handlers_write_context(monkeypatch, tmp_path):
    monkeypatch.setattr("order_mail.logging_config.LOG_DIR", str(tmp_path))
    logger = get_logger("order_mail.tests.file_logging")

    logger.info("Parsed with rev", extra={"vendor": "rev", "sender_domain": "revrobotics.com"})
    logger.error("Parser failed", extra={"vendor": "rev"})

    all_logs = (tmp_path / "email_parsing.log").read_text()
    error_logs = (tmp_path / "email_parsing_errors.log").read_text()
    assert "[vendor:rev domain:revrobotics.com method:None] Parsed with rev" in all_logs
    assert "Parser failed" in error_logs
    assert "Parsed with rev" not in error_logs


def test_get_logger_does_not_duplicate_handlers(monkeypatch):
    monkeypatch.setattr("order_mail.logging_config.LOG_DIR", None)
    first = get_logger("order_mail.tests.handlers")
    second = get_logger("order_mail.tests.handlers")

    assert first is second
    assert len(second.handlers) == 1
