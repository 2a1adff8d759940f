"""
Totals & Summary Message

Everything the preview shows that is not typed in by the user is derived
here: the total, the balance due and the message sent to the customer.

IMPORTANT: The balance is NOT clamped. An advance larger than the total
yields a negative balance, which is how an overpayment is tracked.
"""

from collections.abc import Iterable, Mapping
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Optional

from boutique_bill.config import get_settings
from boutique_bill.models.invoice import (
    ZERO,
    Invoice,
    InvoiceTotals,
    Measurement,
    Service,
    coerce_amount,
)


FALLBACK_SHOP_NAME = "BoutiqueBill"
CENTS = Decimal("0.01")


def _price_of(service: Any) -> Decimal:
    if isinstance(service, Mapping):
        return coerce_amount(service.get("price"))
    return coerce_amount(getattr(service, "price", None))


def compute_total(services: Optional[Iterable[Any]]) -> Decimal:
    """
    Sum of service prices.

    Accepts Service models or plain mappings. A missing or non-numeric
    price counts as 0; an empty list totals 0.
    """
    total = ZERO
    for service in services or ():
        total += _price_of(service)
    return total


def compute_balance(total: Any, advance: Any) -> Decimal:
    """Balance due: total minus advance, negative when overpaid."""
    return coerce_amount(total) - coerce_amount(advance)


def compute_totals(invoice: Invoice) -> InvoiceTotals:
    total = compute_total(invoice.services)
    return InvoiceTotals(
        total=total,
        advance=invoice.advance,
        balance=compute_balance(total, invoice.advance),
    )


def visible_measurements(service: Service) -> list[Measurement]:
    """Measurements worth showing: only those actually taken (value > 0)."""
    return [m for m in service.measurements if m.value > 0]


# =============================================================================
# FORMATTING
# =============================================================================

def format_money(amount: Any, currency_symbol: Optional[str] = None) -> str:
    """
    Format an amount with two decimals, e.g. ₹1000.00

    No thousands separator, matching what customers see on the printed bill.
    """
    symbol = currency_symbol if currency_symbol is not None else get_settings().app.currency_symbol
    value = coerce_amount(amount).quantize(CENTS, rounding=ROUND_HALF_UP)
    return f"{symbol}{value}"


def format_measurement_value(value: Decimal) -> str:
    """34 stays 34, 34.50 becomes 34.5"""
    normalized = value.normalize()
    return f"{normalized:f}"


def _ordinal(day: int) -> str:
    if 11 <= day % 100 <= 13:
        suffix = "th"
    else:
        suffix = {1: "st", 2: "nd", 3: "rd"}.get(day % 10, "th")
    return f"{day}{suffix}"


def format_long_date(value: Optional[date]) -> str:
    """Long-form date, e.g. October 19th, 2026. Empty string for no date."""
    if value is None:
        return ""
    return f"{value:%B} {_ordinal(value.day)}, {value.year}"


def format_measurements(service: Service) -> str:
    """'Chest: 34, Waist: 30' for the measurements that were taken."""
    return ", ".join(
        f"{m.name.value}: {format_measurement_value(m.value)}"
        for m in visible_measurements(service)
    )


# =============================================================================
# SUMMARY MESSAGE
# =============================================================================

def build_summary_message(
    invoice: Invoice,
    total: Any,
    balance: Any,
    currency_symbol: Optional[str] = None,
    measurement_unit: Optional[str] = None,
) -> str:
    """
    Build the text sent to the customer.

    Deterministic: the same invoice, total and balance always produce the
    same message. Measurements with a value of 0 are left out.
    """
    app_settings = get_settings().app
    symbol = currency_symbol if currency_symbol is not None else app_settings.currency_symbol
    unit = measurement_unit or app_settings.measurement_unit
    shop_name = invoice.shop_name or FALLBACK_SHOP_NAME

    lines = [
        f"Hello {invoice.customer_name}," if invoice.customer_name else "Hello,",
        "",
        f"Here are your order details from {shop_name}:",
        f"Invoice No: {invoice.invoice_number}",
        "",
        "Services:",
    ]

    for position, service in enumerate(invoice.services, start=1):
        label = service.name or "Service"
        if service.description:
            label = f"{label} ({service.description})"
        lines.append(f"{position}. {label} - {format_money(service.price, symbol)}")

        measured = format_measurements(service)
        if measured:
            lines.append(f"   Measurements ({unit}): {measured}")

    lines.extend([
        "",
        f"Total Amount: {format_money(total, symbol)}",
        f"Advance Paid: {format_money(invoice.advance, symbol)}",
        f"Balance Due: {format_money(balance, symbol)}",
        "",
    ])

    if invoice.delivery_date:
        lines.append(
            f"Your order will be ready for delivery on "
            f"{format_long_date(invoice.delivery_date)}."
        )
    else:
        lines.append("We will confirm your delivery date shortly.")

    lines.extend([
        "",
        "Thank you,",
        shop_name,
    ])

    return "\n".join(lines)
