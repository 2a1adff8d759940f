"""
Audit Models for BoutiqueBill

Every significant user action in the wizard is recorded as an event.
This provides:
1. Traceability of how an invoice was put together
2. Debugging information when something goes wrong
3. A record of what was sent to the customer

DESIGN DECISION: Audit events are append-only. We never modify them.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """
    Types of events we audit.

    Each wizard action has its own event type.
    """
    # Wizard lifecycle
    WIZARD_STARTED = "wizard_started"
    STEP_ADVANCED = "step_advanced"
    STEP_RETREATED = "step_retreated"
    STEP_VALIDATION_FAILED = "step_validation_failed"

    # Line items
    SERVICE_ADDED = "service_added"
    SERVICE_REMOVED = "service_removed"

    # Images
    IMAGE_ATTACHED = "image_attached"
    IMAGE_REJECTED = "image_rejected"

    # Handoff
    MESSAGE_HANDOFF = "message_handoff"
    MESSAGE_HANDOFF_FAILED = "message_handoff_failed"
    INVOICE_EXPORTED = "invoice_exported"
    EXPORT_FAILED = "export_failed"

    # Login
    USER_LOGGED_IN = "user_logged_in"
    LOGIN_FAILED = "login_failed"
    USER_LOGGED_OUT = "user_logged_out"

    # System events
    SYSTEM_ERROR = "system_error"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class AuditEvent(BaseModel):
    """
    A single audit event.

    Every significant action creates one of these.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=datetime.utcnow,
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Context - what entity is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'invoice', 'image', 'user')"
    )
    entity_id: Optional[UUID] = Field(
        default=None,
        description="ID of the entity this event relates to"
    )

    # Correlation - for tracking related events
    correlation_id: Optional[UUID] = Field(
        default=None,
        description="ID to correlate related events (e.g., all events of one invoice)"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )

    error_message: Optional[str] = None

    is_user_action: bool = Field(
        default=False,
        description="Was this triggered by a user action?"
    )

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": str(self.entity_id) if self.entity_id else None,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.step_advanced(invoice_id, "Shop Info", "Customer Info", correlation_id)
        event = AuditEventBuilder.invoice_exported(invoice_id, "Invoice-1.pdf", ...)
    """

    @staticmethod
    def wizard_started(
        invoice_id: UUID,
        invoice_number: str,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.WIZARD_STARTED,
            entity_type="invoice",
            entity_id=invoice_id,
            correlation_id=correlation_id,
            description=f"New invoice started: {invoice_number}",
            details={"invoice_number": invoice_number},
            is_user_action=True,
        )

    @staticmethod
    def step_advanced(
        invoice_id: UUID,
        from_step: str,
        to_step: str,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STEP_ADVANCED,
            entity_type="invoice",
            entity_id=invoice_id,
            correlation_id=correlation_id,
            description=f"Advanced from {from_step} to {to_step}",
            details={"from_step": from_step, "to_step": to_step},
            is_user_action=True,
        )

    @staticmethod
    def step_retreated(
        invoice_id: UUID,
        from_step: str,
        to_step: str,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STEP_RETREATED,
            entity_type="invoice",
            entity_id=invoice_id,
            correlation_id=correlation_id,
            description=f"Went back from {from_step} to {to_step}",
            details={"from_step": from_step, "to_step": to_step},
            is_user_action=True,
        )

    @staticmethod
    def step_validation_failed(
        invoice_id: UUID,
        step: str,
        errors: dict[str, list[str]],
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STEP_VALIDATION_FAILED,
            severity=AuditSeverity.WARNING,
            entity_type="invoice",
            entity_id=invoice_id,
            correlation_id=correlation_id,
            description=f"{step} validation failed on {len(errors)} fields",
            details={"step": step, "errors": errors},
        )

    @staticmethod
    def service_changed(
        invoice_id: UUID,
        added: bool,
        service_count: int,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=(
                AuditEventType.SERVICE_ADDED if added else AuditEventType.SERVICE_REMOVED
            ),
            entity_type="invoice",
            entity_id=invoice_id,
            correlation_id=correlation_id,
            description=f"Service {'added' if added else 'removed'} ({service_count} total)",
            details={"service_count": service_count},
            is_user_action=True,
        )

    @staticmethod
    def image_attached(
        invoice_id: UUID,
        target: str,
        filename: str,
        size_bytes: int,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.IMAGE_ATTACHED,
            entity_type="image",
            entity_id=invoice_id,
            correlation_id=correlation_id,
            description=f"Image attached to {target}: {filename}",
            details={
                "target": target,
                "filename": filename,
                "file_size_bytes": size_bytes,
            },
            is_user_action=True,
        )

    @staticmethod
    def image_rejected(
        invoice_id: UUID,
        filename: str,
        reason: str,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.IMAGE_REJECTED,
            severity=AuditSeverity.WARNING,
            entity_type="image",
            entity_id=invoice_id,
            correlation_id=correlation_id,
            description=f"Image rejected: {filename}",
            error_message=reason,
            details={"filename": filename},
        )

    @staticmethod
    def message_handoff(
        invoice_id: UUID,
        phone: str,
        message_length: int,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.MESSAGE_HANDOFF,
            entity_type="invoice",
            entity_id=invoice_id,
            correlation_id=correlation_id,
            description=f"Summary message handed off to {phone}",
            details={"phone": phone, "message_length": message_length},
            is_user_action=True,
        )

    @staticmethod
    def message_handoff_failed(
        invoice_id: UUID,
        reason: str,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.MESSAGE_HANDOFF_FAILED,
            severity=AuditSeverity.WARNING,
            entity_type="invoice",
            entity_id=invoice_id,
            correlation_id=correlation_id,
            description="Summary message could not be handed off",
            error_message=reason,
        )

    @staticmethod
    def invoice_exported(
        invoice_id: UUID,
        filename: str,
        size_bytes: int,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.INVOICE_EXPORTED,
            entity_type="invoice",
            entity_id=invoice_id,
            correlation_id=correlation_id,
            description=f"Invoice exported: {filename}",
            details={"filename": filename, "size_bytes": size_bytes},
            is_user_action=True,
        )

    @staticmethod
    def export_failed(
        invoice_id: UUID,
        reason: str,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPORT_FAILED,
            severity=AuditSeverity.WARNING,
            entity_type="invoice",
            entity_id=invoice_id,
            correlation_id=correlation_id,
            description="Invoice export failed",
            error_message=reason,
        )

    @staticmethod
    def user_logged_in(email: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.USER_LOGGED_IN,
            entity_type="user",
            description=f"User logged in: {email}",
            details={"email": email},
            is_user_action=True,
        )

    @staticmethod
    def login_failed(email: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LOGIN_FAILED,
            severity=AuditSeverity.WARNING,
            entity_type="user",
            description=f"Login failed for {email or 'blank email'}",
            details={"email": email},
            is_user_action=True,
        )

    @staticmethod
    def user_logged_out(email: Optional[str]) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.USER_LOGGED_OUT,
            entity_type="user",
            description="User logged out",
            details={"email": email},
            is_user_action=True,
        )

    @staticmethod
    def system_error(
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SYSTEM_ERROR,
            severity=AuditSeverity.ERROR,
            description=f"System error: {error_type}",
            error_message=error_message,
            details=details or {},
            correlation_id=correlation_id,
        )
