"""
Data Models Package

This package contains all Pydantic models used in BoutiqueBill.
All data flowing through the wizard must conform to these schemas.
"""

from boutique_bill.models.invoice import (
    AuthenticatedUser,
    Invoice,
    InvoiceTotals,
    IssueSeverity,
    Measurement,
    MeasurementName,
    Service,
    StepValidationResult,
    StoredImage,
    ValidationIssue,
    coerce_amount,
    generate_invoice_number,
)
from boutique_bill.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Invoice models
    "AuthenticatedUser",
    "Invoice",
    "InvoiceTotals",
    "IssueSeverity",
    "Measurement",
    "MeasurementName",
    "Service",
    "StepValidationResult",
    "StoredImage",
    "ValidationIssue",
    "coerce_amount",
    "generate_invoice_number",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
