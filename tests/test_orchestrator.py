"""Flow tests for InvoiceSession and component wiring."""

import pytest
from decimal import Decimal

from boutique_bill.audit import AuditLogger
from boutique_bill.auth import AuthService
from boutique_bill.models.audit import AuditEventType
from boutique_bill.orchestrator import InvoiceSession, create_app_components
from boutique_bill.services.export import InvoicePdfExporter, PreviewUnavailableError
from boutique_bill.services.image import ImageRejectedError
from boutique_bill.services.messaging import MissingPhoneNumberError
from boutique_bill.services.storage import InMemoryStorage
from boutique_bill.wizard import InvoiceWizard, Step


def event_types(session: InvoiceSession) -> list[AuditEventType]:
    return [e.event_type for e in session.audit_logger.events]


class TestInvoiceSession:
    """Tests for InvoiceSession."""

    def test_start_is_audited(self):
        session = InvoiceSession()
        assert event_types(session) == [AuditEventType.WIZARD_STARTED]

    def test_failed_advance_is_audited(self):
        session = InvoiceSession()
        assert session.advance() is False
        assert event_types(session)[-1] == AuditEventType.STEP_VALIDATION_FAILED
        assert "shop_name" in session.audit_logger.events[-1].details["errors"]

    def test_advance_and_retreat_are_audited(self):
        session = InvoiceSession()
        session.wizard.update(
            shop_name="Anjali Designer Studio",
            shop_address="12 MG Road, Bengaluru",
            invoice_number="INV-1",
        )
        assert session.advance() is True
        assert session.retreat() is True
        assert event_types(session)[-2:] == [
            AuditEventType.STEP_ADVANCED,
            AuditEventType.STEP_RETREATED,
        ]

    def test_export_before_preview_fails(self):
        session = InvoiceSession()
        with pytest.raises(PreviewUnavailableError):
            session.export_pdf()
        assert event_types(session)[-1] == AuditEventType.EXPORT_FAILED

    def test_export_on_preview(self, wizard_on_preview):
        session = InvoiceSession(wizard=wizard_on_preview)
        document = session.export_pdf()
        assert document.filename == "Invoice-INV-1001.pdf"
        assert document.content.startswith(b"%PDF")
        assert event_types(session)[-1] == AuditEventType.INVOICE_EXPORTED

    def test_preview_matches_totals(self, wizard_on_preview):
        session = InvoiceSession(wizard=wizard_on_preview)
        preview = session.preview()
        assert session.wizard.totals.balance == Decimal("1000")
        assert preview.balance.endswith("1000.00")

    def test_messaging_url_uses_current_message(self, wizard_on_preview):
        session = InvoiceSession(wizard=wizard_on_preview)
        session.wizard.edit_message("Ready!")
        assert session.messaging_url() == "https://wa.me/919876543210?text=Ready!"
        assert event_types(session)[-1] == AuditEventType.MESSAGE_HANDOFF

    def test_messaging_url_without_phone(self):
        session = InvoiceSession()
        with pytest.raises(MissingPhoneNumberError):
            session.messaging_url()
        assert event_types(session)[-1] == AuditEventType.MESSAGE_HANDOFF_FAILED

    def test_add_and_remove_service_are_audited(self):
        session = InvoiceSession()
        assert session.add_service() == 1
        assert session.remove_service(1) is True
        assert session.remove_service(0) is False
        assert event_types(session)[1:] == [
            AuditEventType.SERVICE_ADDED,
            AuditEventType.SERVICE_REMOVED,
        ]

    def test_attach_images(self, png_bytes):
        session = InvoiceSession()
        session.attach_logo(png_bytes, "logo.png", "image/png")
        session.attach_reference_image(0, png_bytes, "design.png", "image/png")
        assert session.invoice.shop_logo.startswith("data:image/")
        assert session.invoice.services[0].reference_image.startswith("data:image/")
        assert event_types(session)[-2:] == [
            AuditEventType.IMAGE_ATTACHED,
            AuditEventType.IMAGE_ATTACHED,
        ]

    def test_rejected_image_is_audited(self):
        session = InvoiceSession()
        with pytest.raises(ImageRejectedError):
            session.attach_reference_image(0, b"junk", "junk.jpg", "image/jpeg")
        assert session.invoice.services[0].reference_image is None
        assert event_types(session)[-1] == AuditEventType.IMAGE_REJECTED

    def test_new_invoice(self, wizard_on_preview):
        session = InvoiceSession(wizard=wizard_on_preview)
        old_correlation = session.correlation_id
        session.new_invoice()
        assert session.wizard.current_step == Step.SHOP_INFO
        assert session.correlation_id != old_correlation
        assert event_types(session)[-1] == AuditEventType.WIZARD_STARTED


class TestCreateAppComponents:
    """Tests for create_app_components."""

    def test_components_share_one_audit_log(self):
        session, auth_service, audit_logger = create_app_components(storage=InMemoryStorage())
        assert isinstance(session, InvoiceSession)
        assert isinstance(auth_service, AuthService)
        assert isinstance(audit_logger, AuditLogger)
        assert session.audit_logger is audit_logger

        auth_service.login("user@example.com", "password")
        assert audit_logger.events[-1].event_type == AuditEventType.USER_LOGGED_IN

    def test_session_gets_a_fresh_wizard(self):
        session, _, _ = create_app_components(storage=InMemoryStorage())
        assert isinstance(session.wizard, InvoiceWizard)
        assert session.wizard.current_step == Step.SHOP_INFO


class FailingExporter(InvoicePdfExporter):
    """Exporter whose renderer breaks, e.g. on an unreadable font file."""

    def export(self, preview):
        raise OSError("cannot open resource")


class TestUnexpectedErrors:
    """Unexpected failures are audited as system errors and re-raised."""

    def test_export_failure_is_audited(self, wizard_on_preview):
        session = InvoiceSession(wizard=wizard_on_preview, exporter=FailingExporter())
        with pytest.raises(OSError):
            session.export_pdf()

        event = session.audit_logger.events[-1]
        assert event.event_type == AuditEventType.SYSTEM_ERROR
        assert event.error_message == "cannot open resource"
        assert event.details["action"] == "export pdf"
        assert event.details["step"] == "Preview & Send"
        assert event.correlation_id == session.correlation_id

    def test_report_error(self):
        session = InvoiceSession()
        session.report_error(KeyError("services"), action="render")
        event = session.audit_logger.events[-1]
        assert event.event_type == AuditEventType.SYSTEM_ERROR
        assert event.description == "System error: KeyError"
        assert event.details["action"] == "render"


class TestLoginScope:
    """The login flag belongs to one set of components unless persisted."""

    def test_login_is_private_to_each_browser_session(self):
        _, first_auth, _ = create_app_components()
        _, second_auth, _ = create_app_components()

        assert first_auth.login("user@example.com", "password")
        assert first_auth.is_authenticated()
        assert second_auth.is_authenticated() is False

        second_auth.logout()
        assert first_auth.is_authenticated()

    def test_persisted_login_is_shared(self, monkeypatch, tmp_path):
        monkeypatch.setenv("AUTH_PERSIST_LOGIN", "true")
        monkeypatch.setenv("AUTH_STORAGE_PATH", str(tmp_path / "local_storage.json"))

        _, first_auth, _ = create_app_components()
        _, second_auth, _ = create_app_components()
        first_auth.login("user@example.com", "password")
        assert second_auth.is_authenticated()
        assert (tmp_path / "local_storage.json").exists()
