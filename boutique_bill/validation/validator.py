"""
Two-Stage Step Validation

DESIGN DECISION: Validation happens in two distinct stages:

STAGE 1 - FIELD RULES:
- Required strings (minimum / maximum length)
- Required dates
- Non-negative numbers
- Minimum number of services
- This is what blocks the user from moving to the next step

STAGE 2 - SEMANTIC CHECKS:
- Delivery date before invoice date
- Invoice date far in the future
- These are warnings only and never block a step

IMPORTANT: Validation NEVER silently fixes issues.
It reports them so the form can show them inline.
"""

from datetime import date, timedelta
from decimal import Decimal
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel

from boutique_bill.config import get_settings
from boutique_bill.models.invoice import (
    Invoice,
    IssueSeverity,
    Service,
    StepValidationResult,
    ValidationIssue,
)


class RuleKind(str, Enum):
    """The kinds of checks a field can be subject to."""
    REQUIRED_STRING = "required_string"
    REQUIRED_DATE = "required_date"
    NON_NEGATIVE_NUMBER = "non_negative_number"
    MIN_ITEMS = "min_items"
    OPTIONAL_TEXT = "optional_text"


class FieldRule(BaseModel):
    """How one field is checked, and what the user is told when it fails."""

    kind: RuleKind
    label: str
    min_length: int = 0
    max_length: Optional[int] = None
    message: Optional[str] = None
    too_long_message: Optional[str] = None


FIELD_RULES: dict[str, FieldRule] = {
    "shop_name": FieldRule(
        kind=RuleKind.REQUIRED_STRING,
        label="Shop name",
        min_length=2,
        max_length=200,
        message="Shop name is required.",
    ),
    "shop_address": FieldRule(
        kind=RuleKind.REQUIRED_STRING,
        label="Shop address",
        min_length=10,
        max_length=500,
        message="Shop address is required.",
    ),
    "invoice_number": FieldRule(
        kind=RuleKind.REQUIRED_STRING,
        label="Invoice number",
        min_length=1,
        max_length=50,
        message="Invoice number is required.",
    ),
    "customer_name": FieldRule(
        kind=RuleKind.REQUIRED_STRING,
        label="Customer name",
        min_length=2,
        max_length=200,
        message="Customer name must be at least 2 characters.",
    ),
    "customer_phone": FieldRule(
        kind=RuleKind.REQUIRED_STRING,
        label="Customer phone",
        min_length=10,
        max_length=15,
        message="A valid phone number is required.",
        too_long_message="Phone number is too long.",
    ),
    "invoice_date": FieldRule(
        kind=RuleKind.REQUIRED_DATE,
        label="Invoice date",
        message="Invoice date is required.",
    ),
    "delivery_date": FieldRule(
        kind=RuleKind.REQUIRED_DATE,
        label="Delivery date",
        message="Delivery date is required.",
    ),
    "services": FieldRule(
        kind=RuleKind.MIN_ITEMS,
        label="Services",
        min_length=1,
        message="At least one service is required.",
    ),
    "advance": FieldRule(
        kind=RuleKind.NON_NEGATIVE_NUMBER,
        label="Advance",
        message="Advance must be a non-negative number.",
    ),
    "notes": FieldRule(
        kind=RuleKind.OPTIONAL_TEXT,
        label="Notes",
        max_length=2000,
        too_long_message="Notes are too long.",
    ),
}

SERVICE_RULES: dict[str, FieldRule] = {
    "name": FieldRule(
        kind=RuleKind.REQUIRED_STRING,
        label="Service name",
        min_length=1,
        max_length=200,
        message="Service name is required.",
    ),
    "description": FieldRule(
        kind=RuleKind.OPTIONAL_TEXT,
        label="Description",
        max_length=500,
    ),
    "price": FieldRule(
        kind=RuleKind.NON_NEGATIVE_NUMBER,
        label="Price",
        message="Price must be a non-negative number.",
    ),
}

MEASUREMENT_RULES: dict[str, FieldRule] = {
    "value": FieldRule(
        kind=RuleKind.NON_NEGATIVE_NUMBER,
        label="Measurement",
        message="Measurement must be a non-negative number.",
    ),
}


def check_field(path: str, value: Any, rule: FieldRule) -> list[ValidationIssue]:
    """Apply one rule to one value. Returns the issues found (possibly none)."""
    issues = []

    if rule.kind in (RuleKind.REQUIRED_STRING, RuleKind.OPTIONAL_TEXT):
        text = (value or "").strip()
        if rule.kind == RuleKind.REQUIRED_STRING and not text:
            issues.append(ValidationIssue(
                field=path,
                issue_type="missing",
                message=rule.message or f"{rule.label} is required.",
            ))
        elif len(text) < rule.min_length:
            issues.append(ValidationIssue(
                field=path,
                issue_type="too_short",
                message=rule.message or (
                    f"{rule.label} must be at least {rule.min_length} characters."
                ),
            ))
        elif rule.max_length is not None and len(text) > rule.max_length:
            issues.append(ValidationIssue(
                field=path,
                issue_type="too_long",
                message=rule.too_long_message or f"{rule.label} is too long.",
            ))

    elif rule.kind == RuleKind.REQUIRED_DATE:
        if not isinstance(value, date):
            issues.append(ValidationIssue(
                field=path,
                issue_type="missing",
                message=rule.message or f"{rule.label} is required.",
            ))

    elif rule.kind == RuleKind.NON_NEGATIVE_NUMBER:
        # Invalid input was already coerced to 0 by the model
        if value is not None and Decimal(value) < 0:
            issues.append(ValidationIssue(
                field=path,
                issue_type="negative",
                message=rule.message or f"{rule.label} must be a non-negative number.",
            ))

    elif rule.kind == RuleKind.MIN_ITEMS:
        if len(value or ()) < rule.min_length:
            issues.append(ValidationIssue(
                field=path,
                issue_type="too_few_items",
                message=rule.message or (
                    f"At least {rule.min_length} {rule.label.lower()} required."
                ),
            ))

    return issues


class InvoiceStepValidator:
    """
    Validates the fields of one wizard step through a two-stage pipeline.

    Stage 1: Field rules (errors, block the step)
    Stage 2: Semantic checks (warnings, informational)
    """

    def __init__(self, today: Optional[date] = None):
        """
        Initialize validator.

        Args:
            today: Reference date for date checks. Defaults to date.today()
                   at validation time.
        """
        self._today = today
        self._settings = get_settings().app

    def _validate_service(self, index: int, service: Service) -> list[ValidationIssue]:
        issues = []
        for name, rule in SERVICE_RULES.items():
            issues.extend(check_field(f"services.{index}.{name}", getattr(service, name), rule))

        for m_index, measurement in enumerate(service.measurements):
            for name, rule in MEASUREMENT_RULES.items():
                issues.extend(check_field(
                    f"services.{index}.measurements.{m_index}.{name}",
                    getattr(measurement, name),
                    rule,
                ))
        return issues

    def _validate_rules(
        self,
        invoice: Invoice,
        fields: tuple[str, ...],
    ) -> tuple[bool, list[ValidationIssue]]:
        """
        Stage 1: Field rules.

        Returns: (is_valid, list_of_issues)
        """
        issues = []

        for name in fields:
            rule = FIELD_RULES.get(name)
            if rule is None:
                continue
            issues.extend(check_field(name, getattr(invoice, name), rule))

            if name == "services":
                for index, service in enumerate(invoice.services):
                    issues.extend(self._validate_service(index, service))

        is_valid = not any(issue.severity == IssueSeverity.ERROR for issue in issues)
        return is_valid, issues

    def _validate_semantic(
        self,
        invoice: Invoice,
        fields: tuple[str, ...],
    ) -> list[ValidationIssue]:
        """
        Stage 2: Semantic checks. Only warnings come out of here.

        Checks:
        - Delivery date before invoice date
        - Invoice date too far in the future
        """
        issues = []
        today = self._today or date.today()

        if (
            "delivery_date" in fields
            and invoice.invoice_date
            and invoice.delivery_date
            and invoice.delivery_date < invoice.invoice_date
        ):
            issues.append(ValidationIssue(
                field="delivery_date",
                issue_type="inconsistent",
                message="Delivery date is before the invoice date",
                severity=IssueSeverity.WARNING,
            ))

        max_future_date = today + timedelta(days=self._settings.future_date_tolerance_days)
        if (
            "invoice_date" in fields
            and invoice.invoice_date
            and invoice.invoice_date > max_future_date
        ):
            issues.append(ValidationIssue(
                field="invoice_date",
                issue_type="suspicious_date",
                message=f"Invoice date ({invoice.invoice_date}) is in the future",
                severity=IssueSeverity.WARNING,
            ))

        return issues

    def validate(
        self,
        invoice: Invoice,
        fields: tuple[str, ...],
        step: int = 0,
    ) -> StepValidationResult:
        """
        Run both stages for the given fields.

        Args:
            invoice: The draft to check
            fields: The field names declared for the step
            step: Index of the step being validated

        Returns:
            StepValidationResult with all issues found
        """
        is_valid, issues = self._validate_rules(invoice, fields)

        # Only run stage 2 if stage 1 passes
        if is_valid:
            issues.extend(self._validate_semantic(invoice, fields))

        return StepValidationResult(step=step, issues=issues)

    def validate_all(self, invoice: Invoice) -> StepValidationResult:
        """Check every known field, e.g. before exporting."""
        return self.validate(invoice, tuple(FIELD_RULES))

    def get_user_friendly_summary(self, result: StepValidationResult) -> str:
        """
        Generate a short summary of validation results for the form header.
        """
        if result.is_valid and not result.warnings:
            return "✅ All fields look good."

        lines = []

        if result.has_errors:
            lines.append("❌ Please fix the following before continuing:")
            for issue in result.issues:
                if issue.severity == IssueSeverity.ERROR:
                    lines.append(f"   • {issue.message}")

        if result.warnings:
            if lines:
                lines.append("")
            lines.append("⚠️ Please double-check:")
            for warning in result.warnings:
                lines.append(f"   • {warning}")

        return "\n".join(lines)
