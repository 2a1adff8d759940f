"""Tests for configuration and the audit logger."""

import pytest
from uuid import uuid4

from pydantic import ValidationError

from boutique_bill.audit import AuditLogger
from boutique_bill.config import (
    AppSettings,
    AuthSettings,
    ExportSettings,
    get_settings,
    validate_all_settings,
)
from boutique_bill.models.audit import AuditEventBuilder, AuditEventType


class TestSettings:
    """Tests for settings defaults and validation."""

    def test_app_defaults(self):
        settings = AppSettings(_env_file=None)
        assert settings.currency_symbol == "₹"
        assert settings.measurement_unit == "inches"
        assert settings.messaging_base_url == "https://wa.me"
        assert settings.supported_formats_list == ["jpg", "jpeg", "png", "webp"]
        assert settings.max_upload_size_bytes == 10 * 1024 * 1024

    def test_messaging_base_url_trailing_slash(self):
        settings = AppSettings(_env_file=None, messaging_base_url="https://wa.me/")
        assert settings.messaging_base_url == "https://wa.me"

    def test_page_size_normalized(self):
        assert ExportSettings(page_size=" letter ").page_size == "LETTER"

    def test_unknown_page_size(self):
        with pytest.raises(ValidationError):
            ExportSettings(page_size="A3")

    def test_missing_font_falls_back(self, tmp_path):
        with pytest.warns(UserWarning):
            settings = ExportSettings(font_path=str(tmp_path / "missing.ttf"))
        assert settings.font_path is None

    def test_login_not_persisted_by_default(self, monkeypatch):
        monkeypatch.delenv("AUTH_PERSIST_LOGIN", raising=False)
        assert AuthSettings().persist_login is False

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("EXPORT_PAGE_SIZE", "letter")
        assert ExportSettings().page_size == "LETTER"

    def test_validate_all_settings(self):
        get_settings.cache_clear()
        results = validate_all_settings()
        assert all(results[name] for name in ("app", "export", "auth", "shop"))


class TestAuditLogger:
    """Tests for AuditLogger."""

    def test_events_are_kept_in_order(self):
        audit = AuditLogger()
        invoice_id, correlation_id = uuid4(), uuid4()
        audit.log_wizard_started(invoice_id, "INV-1", correlation_id)
        audit.log_step_advanced(invoice_id, "Shop Info", "Customer Info", correlation_id)
        assert [e.event_type for e in audit.events] == [
            AuditEventType.WIZARD_STARTED,
            AuditEventType.STEP_ADVANCED,
        ]

    def test_events_returns_a_copy(self):
        audit = AuditLogger()
        audit.log_user_logged_in("user@example.com")
        audit.events.clear()
        assert len(audit.events) == 1

    def test_oldest_events_are_dropped(self):
        audit = AuditLogger(max_events=3)
        for i in range(5):
            audit.log(AuditEventBuilder.login_failed(f"user{i}@example.com"))
        assert len(audit.events) == 3
        assert "user2@example.com" in audit.events[0].description

    def test_clear(self):
        audit = AuditLogger()
        audit.log_user_logged_in("user@example.com")
        audit.clear()
        assert audit.events == []
