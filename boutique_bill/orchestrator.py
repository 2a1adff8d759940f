"""
Main Orchestrator for BoutiqueBill

This module ties together all the components and defines the
end-to-end invoice flow:
shop → customer → services → details → preview → export / send

DESIGN DECISION: The orchestrator enforces the boundaries:
- The wizard is the only thing that mutates the invoice
- Nothing leaves the app (PDF, message) before the preview step
- Every user action is audited

The UI talks to an InvoiceSession; it never reaches into the services
directly.
"""

from typing import Optional
from uuid import UUID

from boutique_bill.audit import AuditLogger, create_correlation_id
from boutique_bill.auth import AuthService
from boutique_bill.config import get_settings
from boutique_bill.models.invoice import Invoice, StoredImage
from boutique_bill.preview import InvoicePreview, build_preview
from boutique_bill.services.export import (
    ExportedDocument,
    InvoicePdfExporter,
    PreviewUnavailableError,
)
from boutique_bill.services.image import ImageRejectedError, ReferenceImageService
from boutique_bill.services.messaging import MissingPhoneNumberError, WhatsAppLinkService
from boutique_bill.services.storage import (
    InMemoryStorage,
    JsonFileStorage,
    LocalStorageInterface,
)
from boutique_bill.wizard import STEP_TITLES, InvoiceWizard, Step


class InvoiceSession:
    """
    Orchestrates one user's work on one invoice at a time.

    Flow:
    1. Fill in steps → advance() / retreat()
    2. Attach images → attach_logo() / attach_reference_image()
    3. Preview → preview()
    4. Hand off → export_pdf() / messaging_url()
    5. Start again → new_invoice()
    """

    def __init__(
        self,
        wizard: Optional[InvoiceWizard] = None,
        audit_logger: Optional[AuditLogger] = None,
        image_service: Optional[ReferenceImageService] = None,
        link_service: Optional[WhatsAppLinkService] = None,
        exporter: Optional[InvoicePdfExporter] = None,
    ):
        self.wizard = wizard or InvoiceWizard()
        self._audit_logger = audit_logger or AuditLogger()
        self._image_service = image_service or ReferenceImageService()
        self._link_service = link_service or WhatsAppLinkService()
        self._exporter = exporter or InvoicePdfExporter()
        self.correlation_id: UUID = create_correlation_id()
        self._audit_logger.log_wizard_started(
            invoice_id=self.invoice.invoice_id,
            invoice_number=self.invoice.invoice_number,
            correlation_id=self.correlation_id,
        )

    @property
    def invoice(self) -> Invoice:
        return self.wizard.invoice

    @property
    def audit_logger(self) -> AuditLogger:
        return self._audit_logger

    def _step_name(self, step: int) -> str:
        return STEP_TITLES[Step(step)]

    def report_error(self, error: Exception, action: str) -> None:
        """Audit an unexpected failure while working on the current invoice."""
        self._audit_logger.log_error(
            error_type=type(error).__name__,
            error_message=str(error),
            details={
                "action": action,
                "invoice_id": str(self.invoice.invoice_id),
                "step": self._step_name(self.wizard.current_step),
            },
            correlation_id=self.correlation_id,
        )

    # -------------------------------------------------------------------------
    # Navigation
    # -------------------------------------------------------------------------

    def advance(self) -> bool:
        """Validate the current step and move on. Audits either outcome."""
        from_step = self.wizard.current_step
        if self.wizard.is_last_step:
            return False

        moved = self.wizard.advance()
        if moved:
            self._audit_logger.log_step_advanced(
                invoice_id=self.invoice.invoice_id,
                from_step=self._step_name(from_step),
                to_step=self._step_name(self.wizard.current_step),
                correlation_id=self.correlation_id,
            )
        elif self.wizard.last_validation is not None:
            self._audit_logger.log_step_validation_failed(
                invoice_id=self.invoice.invoice_id,
                step=self._step_name(from_step),
                errors=self.wizard.last_validation.errors_by_field(),
                correlation_id=self.correlation_id,
            )
        return moved

    def retreat(self) -> bool:
        from_step = self.wizard.current_step
        moved = self.wizard.retreat()
        if moved:
            self._audit_logger.log_step_retreated(
                invoice_id=self.invoice.invoice_id,
                from_step=self._step_name(from_step),
                to_step=self._step_name(self.wizard.current_step),
                correlation_id=self.correlation_id,
            )
        return moved

    def new_invoice(self) -> None:
        """Discard the current draft and start a fresh one."""
        self.wizard.reset()
        self.correlation_id = create_correlation_id()
        self._audit_logger.log_wizard_started(
            invoice_id=self.invoice.invoice_id,
            invoice_number=self.invoice.invoice_number,
            correlation_id=self.correlation_id,
        )

    # -------------------------------------------------------------------------
    # Services and images
    # -------------------------------------------------------------------------

    def add_service(self) -> int:
        index = self.wizard.add_service()
        self._audit_logger.log_service_changed(
            invoice_id=self.invoice.invoice_id,
            added=True,
            service_count=len(self.invoice.services),
            correlation_id=self.correlation_id,
        )
        return index

    def remove_service(self, index: int) -> bool:
        removed = self.wizard.remove_service(index)
        if removed:
            self._audit_logger.log_service_changed(
                invoice_id=self.invoice.invoice_id,
                added=False,
                service_count=len(self.invoice.services),
                correlation_id=self.correlation_id,
            )
        return removed

    def _process_image(
        self,
        image_bytes: bytes,
        filename: str,
        mime_type: str,
        target: str,
    ) -> StoredImage:
        try:
            stored = self._image_service.process(image_bytes, filename, mime_type)
        except ImageRejectedError as e:
            self._audit_logger.log_image_rejected(
                invoice_id=self.invoice.invoice_id,
                filename=filename,
                reason=str(e),
                correlation_id=self.correlation_id,
            )
            raise
        except Exception as e:
            self.report_error(e, action=f"attach {target} image")
            raise

        self._audit_logger.log_image_attached(
            invoice_id=self.invoice.invoice_id,
            target=target,
            filename=filename,
            size_bytes=stored.size_bytes,
            correlation_id=self.correlation_id,
        )
        return stored

    def attach_logo(self, image_bytes: bytes, filename: str, mime_type: str) -> StoredImage:
        """
        Store the shop logo on the invoice.

        Raises:
            ImageRejectedError: If the image can't be used
        """
        stored = self._process_image(image_bytes, filename, mime_type, target="logo")
        self.wizard.set_logo(stored.data_url)
        return stored

    def attach_reference_image(
        self,
        service_index: int,
        image_bytes: bytes,
        filename: str,
        mime_type: str,
    ) -> StoredImage:
        """
        Store a reference image on one service.

        Raises:
            ImageRejectedError: If the image can't be used
        """
        stored = self._process_image(
            image_bytes,
            filename,
            mime_type,
            target=f"service {service_index + 1}",
        )
        self.wizard.set_reference_image(service_index, stored.data_url)
        return stored

    # -------------------------------------------------------------------------
    # Preview and handoff
    # -------------------------------------------------------------------------

    def preview(self) -> InvoicePreview:
        return build_preview(self.invoice, self.wizard.totals)

    def messaging_url(self) -> str:
        """
        Deep link carrying the current summary message.

        Raises:
            MissingPhoneNumberError: If the customer has no phone number
        """
        try:
            url = self._link_service.build_url(self.invoice.customer_phone, self.wizard.message)
        except MissingPhoneNumberError as e:
            self._audit_logger.log_message_handoff_failed(
                invoice_id=self.invoice.invoice_id,
                reason=str(e),
                correlation_id=self.correlation_id,
            )
            raise

        self._audit_logger.log_message_handoff(
            invoice_id=self.invoice.invoice_id,
            phone=self.invoice.customer_phone,
            message_length=len(self.wizard.message),
            correlation_id=self.correlation_id,
        )
        return url

    def export_pdf(self) -> ExportedDocument:
        """
        Render the preview to a PDF named after the invoice number.

        Raises:
            PreviewUnavailableError: If the wizard is not on the preview
                step or there is nothing to render
        """
        try:
            if not self.wizard.is_last_step:
                raise PreviewUnavailableError("Finish the previous steps to see the preview.")
            document = self._exporter.export(self.preview())
        except PreviewUnavailableError as e:
            self._audit_logger.log_export_failed(
                invoice_id=self.invoice.invoice_id,
                reason=str(e),
                correlation_id=self.correlation_id,
            )
            raise
        except Exception as e:
            self.report_error(e, action="export pdf")
            raise

        self._audit_logger.log_invoice_exported(
            invoice_id=self.invoice.invoice_id,
            filename=document.filename,
            size_bytes=document.size_bytes,
            correlation_id=self.correlation_id,
        )
        return document


def create_app_components(
    storage: Optional[LocalStorageInterface] = None,
) -> tuple[InvoiceSession, AuthService, AuditLogger]:
    """
    Create all application components.

    Args:
        storage: Where the logged-in flag is kept. Defaults to storage
                 private to these components (one browser session), or
                 to the shared JSON file when AUTH_PERSIST_LOGIN is set.

    Returns:
        (invoice_session, auth_service, audit_logger)
    """
    settings = get_settings()
    audit_logger = AuditLogger()

    if storage is None:
        if settings.auth.persist_login:
            storage = JsonFileStorage(settings.auth.storage_path)
        else:
            storage = InMemoryStorage()

    auth_service = AuthService(
        storage=storage,
        settings=settings.auth,
        audit_logger=audit_logger,
    )
    session = InvoiceSession(audit_logger=audit_logger)

    return session, auth_service, audit_logger
