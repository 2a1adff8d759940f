"""
Tests for BoutiqueBill

Test strategy:
1. Unit tests for individual components (models, validator, totals)
2. Flow tests for the wizard and the session orchestrator
3. No network access; images and PDFs are generated in memory
"""

import pytest
from datetime import date, datetime
from decimal import Decimal
from uuid import uuid4

from pydantic import ValidationError

from boutique_bill.models.invoice import (
    MAX_AMOUNT,
    Invoice,
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


class TestAmountCoercion:
    """Tests for the non-negative number coercion used by all amounts."""

    @pytest.mark.parametrize("raw", [None, "", "   ", "abc", "NaN", "Infinity", True])
    def test_invalid_input_becomes_zero(self, raw):
        """Empty and non-numeric input coerces to 0."""
        assert coerce_amount(raw) == Decimal("0")

    def test_numeric_strings_are_parsed(self):
        assert coerce_amount(" 1500.50 ") == Decimal("1500.50")

    def test_floats_keep_their_decimal_form(self):
        """0.1 stays 0.1, not its binary approximation."""
        assert coerce_amount(0.1) == Decimal("0.1")

    @pytest.mark.parametrize("raw", ["1e30", "-1e30", "1e1000000", 1e30, "1000000000000"])
    def test_amounts_beyond_the_limit_become_zero(self, raw):
        """Huge values can never reach the totals or the formatter."""
        assert coerce_amount(raw) == Decimal("0")

    def test_limit_itself_is_accepted(self):
        assert coerce_amount(MAX_AMOUNT) == MAX_AMOUNT
        assert coerce_amount("-999999999999.99") == -MAX_AMOUNT

    def test_negative_numbers_are_kept(self):
        """Negatives are not fixed silently; the validator reports them."""
        assert coerce_amount("-5") == Decimal("-5")


class TestInvoiceModels:
    """Tests for the invoice draft models."""

    def test_invoice_defaults(self):
        """A new draft has one blank service, zero advance and today's dates."""
        invoice = Invoice()
        assert len(invoice.services) == 1
        assert invoice.services[0].name == ""
        assert invoice.advance == Decimal("0")
        assert invoice.invoice_date == date.today()
        assert invoice.delivery_date == date.today()
        assert invoice.invoice_number.startswith("INV-")
        assert invoice.shop_logo is None
        assert invoice.notes is None

    def test_generate_invoice_number_format(self):
        number = generate_invoice_number(date(2026, 10, 19))
        assert number.startswith("INV-20261019-")
        assert len(number) == len("INV-20261019-") + 4

    def test_service_price_coerced_on_assignment(self):
        """Assignments go through the same coercion as construction."""
        service = Service(name="Blouse")
        service.price = "not a number"
        assert service.price == Decimal("0")
        service.price = "750"
        assert service.price == Decimal("750")

    def test_blank_optional_fields_become_none(self):
        service = Service(name="Blouse", description="   ", reference_image="")
        assert service.description is None
        assert service.reference_image is None

        invoice = Invoice(notes="", shop_logo="  ")
        assert invoice.notes is None
        assert invoice.shop_logo is None

    def test_whitespace_is_stripped(self):
        invoice = Invoice(customer_name="  Priya  ")
        assert invoice.customer_name == "Priya"

    def test_blank_date_becomes_none(self):
        invoice = Invoice(delivery_date="")
        assert invoice.delivery_date is None

    def test_datetime_is_reduced_to_date(self):
        invoice = Invoice(invoice_date=datetime(2026, 10, 19, 15, 30))
        assert invoice.invoice_date == date(2026, 10, 19)

    def test_measurement_accepts_label(self):
        measurement = Measurement(name="Sleeve Length", value="21.5")
        assert measurement.name == MeasurementName.SLEEVE_LENGTH
        assert measurement.value == Decimal("21.5")

    def test_measurement_rejects_unknown_name(self):
        with pytest.raises(ValidationError):
            Measurement(name="Inseam", value=30)

    def test_draft_allows_empty_services(self):
        """Emptiness is the validator's business, not the model's."""
        invoice = Invoice(services=[])
        assert invoice.services == []

    def test_stored_image_rejects_unknown_type(self):
        with pytest.raises(ValueError):
            StoredImage(
                original_filename="x.gif",
                mime_type="image/gif",
                width=1,
                height=1,
                size_bytes=1,
                data_url="data:image/gif;base64,AA==",
            )


class TestStepValidationResult:
    """Tests for StepValidationResult."""

    def test_errors_block_and_are_grouped_by_field(self):
        result = StepValidationResult(
            step=2,
            issues=[
                ValidationIssue(field="services.0.name", issue_type="missing", message="Service name is required."),
                ValidationIssue(field="services.0.price", issue_type="negative", message="Price must be a non-negative number."),
            ],
        )
        assert result.has_errors is True
        assert result.is_valid is False
        assert result.error_count == 2
        assert result.errors_by_field() == {
            "services.0.name": ["missing"],
            "services.0.price": ["negative"],
        }
        assert result.message_for("services.0.name") == "Service name is required."
        assert result.message_for("customer_name") is None

    def test_warnings_only_do_not_block(self):
        result = StepValidationResult(
            step=1,
            issues=[
                ValidationIssue(
                    field="delivery_date",
                    issue_type="inconsistent",
                    message="Delivery date is before the invoice date",
                    severity=IssueSeverity.WARNING,
                ),
            ],
        )
        assert result.has_errors is False
        assert result.error_count == 0
        assert result.warnings == ["Delivery date is before the invoice date"]
        assert result.errors_by_field() == {}


class TestAuditModels:
    """Tests for audit-related models."""

    def test_audit_event_creation(self):
        event = AuditEvent(
            event_type=AuditEventType.STEP_ADVANCED,
            description="Advanced",
        )
        assert event.severity == AuditSeverity.INFO
        assert event.is_user_action is False

    def test_audit_event_to_log_dict(self):
        event = AuditEventBuilder.invoice_exported(
            invoice_id=uuid4(),
            filename="Invoice-INV-1.pdf",
            size_bytes=2048,
            correlation_id=uuid4(),
        )
        log_dict = event.to_log_dict()
        assert "event_id" in log_dict
        assert log_dict["event_type"] == "invoice_exported"
        assert log_dict["details"]["filename"] == "Invoice-INV-1.pdf"

    def test_validation_failed_is_a_warning(self):
        event = AuditEventBuilder.step_validation_failed(
            invoice_id=uuid4(),
            step="Services & Measurements",
            errors={"services.0.name": ["missing"]},
            correlation_id=uuid4(),
        )
        assert event.event_type == AuditEventType.STEP_VALIDATION_FAILED
        assert event.severity == AuditSeverity.WARNING
        assert "1 fields" in event.description

    def test_service_changed_picks_event_type(self):
        invoice_id, correlation_id = uuid4(), uuid4()
        added = AuditEventBuilder.service_changed(invoice_id, True, 2, correlation_id)
        removed = AuditEventBuilder.service_changed(invoice_id, False, 1, correlation_id)
        assert added.event_type == AuditEventType.SERVICE_ADDED
        assert removed.event_type == AuditEventType.SERVICE_REMOVED

    def test_login_failed_with_blank_email(self):
        event = AuditEventBuilder.login_failed("")
        assert "blank email" in event.description


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
