"""Validation package."""

from boutique_bill.validation.validator import (
    FIELD_RULES,
    MEASUREMENT_RULES,
    SERVICE_RULES,
    FieldRule,
    InvoiceStepValidator,
    RuleKind,
    check_field,
)

__all__ = [
    "FIELD_RULES",
    "MEASUREMENT_RULES",
    "SERVICE_RULES",
    "FieldRule",
    "InvoiceStepValidator",
    "RuleKind",
    "check_field",
]
