"""
Audit Logger

DESIGN DECISION: Every significant user action in the wizard is logged.
This provides:
1. Traceability of how each invoice was built
2. Debugging capability
3. A session history the UI can show

The audit logger:
- Is synchronous; the wizard has a single mutator and nothing to wait on
- Keeps the current session's events in memory
- Supports correlation IDs to trace the events of one invoice
"""

from typing import Optional
from uuid import UUID, uuid4

import structlog

from boutique_bill.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


class AuditLogger:
    """
    Central audit logging service.

    Logs events both to:
    1. Structured local log (for debugging)
    2. An in-memory trail for the current session
    """

    def __init__(self, max_events: int = 500):
        """
        Initialize audit logger.

        Args:
            max_events: How many events to keep in memory.
                        Older events are dropped first.
        """
        self._events: list[AuditEvent] = []
        self._max_events = max_events
        self._logger = structlog.get_logger("boutique_bill.audit")

    @property
    def events(self) -> list[AuditEvent]:
        return list(self._events)

    def log(self, event: AuditEvent) -> None:
        """Log an audit event locally and keep it in the session trail."""
        log_dict = event.to_log_dict()

        if event.severity in (AuditSeverity.ERROR, AuditSeverity.CRITICAL):
            self._logger.error("audit_event", **log_dict)
        elif event.severity == AuditSeverity.WARNING:
            self._logger.warning("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

        self._events.append(event)
        if len(self._events) > self._max_events:
            del self._events[: len(self._events) - self._max_events]

    def clear(self) -> None:
        self._events.clear()

    def log_wizard_started(
        self,
        invoice_id: UUID,
        invoice_number: str,
        correlation_id: UUID,
    ) -> None:
        """Log the start of a new invoice."""
        self.log(AuditEventBuilder.wizard_started(
            invoice_id=invoice_id,
            invoice_number=invoice_number,
            correlation_id=correlation_id,
        ))

    def log_step_advanced(
        self,
        invoice_id: UUID,
        from_step: str,
        to_step: str,
        correlation_id: UUID,
    ) -> None:
        self.log(AuditEventBuilder.step_advanced(
            invoice_id=invoice_id,
            from_step=from_step,
            to_step=to_step,
            correlation_id=correlation_id,
        ))

    def log_step_retreated(
        self,
        invoice_id: UUID,
        from_step: str,
        to_step: str,
        correlation_id: UUID,
    ) -> None:
        self.log(AuditEventBuilder.step_retreated(
            invoice_id=invoice_id,
            from_step=from_step,
            to_step=to_step,
            correlation_id=correlation_id,
        ))

    def log_step_validation_failed(
        self,
        invoice_id: UUID,
        step: str,
        errors: dict[str, list[str]],
        correlation_id: UUID,
    ) -> None:
        """Log a blocked step transition."""
        self.log(AuditEventBuilder.step_validation_failed(
            invoice_id=invoice_id,
            step=step,
            errors=errors,
            correlation_id=correlation_id,
        ))

    def log_service_changed(
        self,
        invoice_id: UUID,
        added: bool,
        service_count: int,
        correlation_id: UUID,
    ) -> None:
        self.log(AuditEventBuilder.service_changed(
            invoice_id=invoice_id,
            added=added,
            service_count=service_count,
            correlation_id=correlation_id,
        ))

    def log_image_attached(
        self,
        invoice_id: UUID,
        target: str,
        filename: str,
        size_bytes: int,
        correlation_id: UUID,
    ) -> None:
        self.log(AuditEventBuilder.image_attached(
            invoice_id=invoice_id,
            target=target,
            filename=filename,
            size_bytes=size_bytes,
            correlation_id=correlation_id,
        ))

    def log_image_rejected(
        self,
        invoice_id: UUID,
        filename: str,
        reason: str,
        correlation_id: UUID,
    ) -> None:
        self.log(AuditEventBuilder.image_rejected(
            invoice_id=invoice_id,
            filename=filename,
            reason=reason,
            correlation_id=correlation_id,
        ))

    def log_message_handoff(
        self,
        invoice_id: UUID,
        phone: str,
        message_length: int,
        correlation_id: UUID,
    ) -> None:
        self.log(AuditEventBuilder.message_handoff(
            invoice_id=invoice_id,
            phone=phone,
            message_length=message_length,
            correlation_id=correlation_id,
        ))

    def log_message_handoff_failed(
        self,
        invoice_id: UUID,
        reason: str,
        correlation_id: UUID,
    ) -> None:
        self.log(AuditEventBuilder.message_handoff_failed(
            invoice_id=invoice_id,
            reason=reason,
            correlation_id=correlation_id,
        ))

    def log_invoice_exported(
        self,
        invoice_id: UUID,
        filename: str,
        size_bytes: int,
        correlation_id: UUID,
    ) -> None:
        self.log(AuditEventBuilder.invoice_exported(
            invoice_id=invoice_id,
            filename=filename,
            size_bytes=size_bytes,
            correlation_id=correlation_id,
        ))

    def log_export_failed(
        self,
        invoice_id: UUID,
        reason: str,
        correlation_id: UUID,
    ) -> None:
        self.log(AuditEventBuilder.export_failed(
            invoice_id=invoice_id,
            reason=reason,
            correlation_id=correlation_id,
        ))

    def log_user_logged_in(self, email: str) -> None:
        self.log(AuditEventBuilder.user_logged_in(email))

    def log_login_failed(self, email: str) -> None:
        self.log(AuditEventBuilder.login_failed(email))

    def log_user_logged_out(self, email: Optional[str]) -> None:
        self.log(AuditEventBuilder.user_logged_out(email))

    def log_error(
        self,
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log an error."""
        self.log(AuditEventBuilder.system_error(
            error_type=error_type,
            error_message=error_message,
            details=details,
            correlation_id=correlation_id,
        ))


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use this when a new invoice is started.
    Pass it through all subsequent operations on that invoice.
    """
    return uuid4()
