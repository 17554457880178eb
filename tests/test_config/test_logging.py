"""Tests for logging helpers."""

import logging
import sys

import pytest
import structlog
from structlog.testing import capture_logs

sys.path.append("src")

from herald.config.logging import (
    log_audit_event,
    mask_contact,
    mask_contact_details,
    parse_file_size,
    setup_logging,
)


class TestMaskContact:
    def test_email_keeps_domain(self):
        assert mask_contact("duty.officer@example.com") == "d***@example.com"

    def test_phone_keeps_last_digits(self):
        assert mask_contact("+15551234567") == "***4567"

    def test_short_and_empty_values(self):
        assert mask_contact("123") == "***"
        assert mask_contact(None) is None
        assert mask_contact("") == ""

    def test_processor_masks_only_contact_keys(self):
        event = {"event": "Sending", "to": "+15551234567", "alert_id": 3}

        result = mask_contact_details(None, "info", event)

        assert result == {"event": "Sending", "to": "***4567", "alert_id": 3}


class TestParseFileSize:
    @pytest.mark.parametrize(
        "size,expected",
        [("1024", 1024), ("512KB", 512 * 1024), ("10mb", 10 * 1024**2), ("1 GB", 1024**3)],
    )
    def test_units(self, size, expected):
        assert parse_file_size(size) == expected

    def test_invalid(self):
        with pytest.raises(ValueError):
            parse_file_size("ten megabytes")


class TestAuditEvents:
    def test_audit_event_is_captured(self):
        with capture_logs() as logs:
            log_audit_event("alert_sent", user_id=3, alert_id=9, sent=2)

        [entry] = logs
        assert entry["event"] == "Audit event"
        assert entry["audit_event"] == "alert_sent"
        assert entry["user_id"] == 3
        assert entry["alert_id"] == 9

    def test_audit_event_renders_through_configured_logging(self, caplog):
        setup_logging(level="INFO", format_type="structured", file_enabled=False)
        try:
            with caplog.at_level(logging.INFO, logger="audit"):
                log_audit_event("user_created", user_id=5, email="ops@example.com")
        finally:
            structlog.reset_defaults()

        rendered = " ".join(record.getMessage() for record in caplog.records)
        assert "user_created" in rendered
        assert "o***@example.com" in rendered
        assert "ops@example.com" not in rendered
