"""Tests for totals, formatting and the customer summary message."""

import pytest
from datetime import date
from decimal import Decimal

from boutique_bill.models.invoice import Invoice, Measurement, MeasurementName, Service
from boutique_bill.totals import (
    build_summary_message,
    compute_balance,
    compute_total,
    compute_totals,
    format_long_date,
    format_measurements,
    format_money,
    visible_measurements,
)


class TestComputeTotal:
    """Tests for compute_total."""

    def test_sum_of_prices(self):
        services = [Service(name="A", price=100), Service(name="B", price="250.50")]
        assert compute_total(services) == Decimal("350.50")

    def test_empty_list_is_zero(self):
        assert compute_total([]) == Decimal("0")
        assert compute_total(None) == Decimal("0")

    def test_mappings_with_bad_prices(self):
        """Missing or non-numeric prices count as 0."""
        services = [{"price": "abc"}, {"price": 10}, {}, {"price": None}]
        assert compute_total(services) == Decimal("10")

    def test_order_does_not_matter(self):
        a = [Service(price="0.1"), Service(price="0.2"), Service(price="3")]
        assert compute_total(a) == compute_total(list(reversed(a))) == Decimal("3.3")


class TestComputeBalance:
    """Tests for compute_balance."""

    def test_exact_difference(self):
        assert compute_balance(Decimal("1500"), Decimal("500")) == Decimal("1000")

    def test_overpayment_gives_negative_balance(self):
        """The balance is not clamped at zero."""
        assert compute_balance(500, 800) == Decimal("-300")

    @pytest.mark.parametrize("advance", [None, "", "abc"])
    def test_invalid_advance_counts_as_zero(self, advance):
        assert compute_balance(100, advance) == Decimal("100")

    def test_compute_totals_for_invoice(self, sample_invoice):
        totals = compute_totals(sample_invoice)
        assert totals.total == Decimal("1500")
        assert totals.advance == Decimal("500")
        assert totals.balance == Decimal("1000")


class TestFormatting:
    """Tests for money, date and measurement formatting."""

    def test_money_has_two_decimals_and_no_separators(self):
        assert format_money(Decimal("1000"), "₹") == "₹1000.00"
        assert format_money(Decimal("123456.7"), "₹") == "₹123456.70"

    def test_money_rounds_half_up(self):
        assert format_money(Decimal("0.005"), "") == "0.01"

    def test_negative_money(self):
        assert format_money(Decimal("-200"), "₹") == "₹-200.00"

    @pytest.mark.parametrize(
        "day,expected",
        [
            (1, "October 1st, 2026"),
            (2, "October 2nd, 2026"),
            (3, "October 3rd, 2026"),
            (4, "October 4th, 2026"),
            (11, "October 11th, 2026"),
            (12, "October 12th, 2026"),
            (13, "October 13th, 2026"),
            (19, "October 19th, 2026"),
            (21, "October 21st, 2026"),
            (22, "October 22nd, 2026"),
            (23, "October 23rd, 2026"),
        ],
    )
    def test_long_date(self, day, expected):
        assert format_long_date(date(2026, 10, day)) == expected

    def test_long_date_for_missing_date(self):
        assert format_long_date(None) == ""

    def test_zero_measurements_are_hidden(self):
        service = Service(
            name="Kurti",
            measurements=[
                Measurement(name=MeasurementName.CHEST, value="34"),
                Measurement(name=MeasurementName.WAIST, value=0),
                Measurement(name=MeasurementName.SLEEVE_LENGTH, value="21.50"),
            ],
        )
        assert [m.name for m in visible_measurements(service)] == [
            MeasurementName.CHEST,
            MeasurementName.SLEEVE_LENGTH,
        ]
        assert format_measurements(service) == "Chest: 34, Sleeve Length: 21.5"


class TestSummaryMessage:
    """Tests for the message sent to the customer."""

    def test_full_message(self, sample_invoice):
        message = build_summary_message(sample_invoice, Decimal("1500"), Decimal("1000"), "₹", "inches")
        assert message == "\n".join([
            "Hello Priya Sharma,",
            "",
            "Here are your order details from Anjali Designer Studio:",
            "Invoice No: INV-1001",
            "",
            "Services:",
            "1. Blouse Stitching (with lining) - ₹1000.00",
            "   Measurements (inches): Chest: 34",
            "2. Fall & Pico - ₹500.00",
            "",
            "Total Amount: ₹1500.00",
            "Advance Paid: ₹500.00",
            "Balance Due: ₹1000.00",
            "",
            "Your order will be ready for delivery on October 30th, 2026.",
            "",
            "Thank you,",
            "Anjali Designer Studio",
        ])

    def test_zero_measurement_not_in_message(self, sample_invoice):
        message = build_summary_message(sample_invoice, 1500, 1000, "₹")
        assert "Chest: 34" in message
        assert "Waist" not in message

    def test_message_is_deterministic(self, sample_invoice):
        first = build_summary_message(sample_invoice, 1500, 1000, "₹")
        second = build_summary_message(sample_invoice, 1500, 1000, "₹")
        assert first == second

    def test_message_without_names_or_delivery_date(self):
        invoice = Invoice(
            invoice_number="INV-7",
            delivery_date=None,
            services=[Service(price=300)],
        )
        message = build_summary_message(invoice, 300, 300, "₹")
        assert message.startswith("Hello,\n")
        assert "order details from BoutiqueBill:" in message
        assert "1. Service - ₹300.00" in message
        assert "We will confirm your delivery date shortly." in message
        assert message.endswith("Thank you,\nBoutiqueBill")

    def test_negative_balance_in_message(self):
        invoice = Invoice(services=[Service(name="Hem", price=500)], advance=800)
        totals = compute_totals(invoice)
        message = build_summary_message(invoice, totals.total, totals.balance, "₹")
        assert "Balance Due: ₹-300.00" in message
