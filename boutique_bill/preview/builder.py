"""
Invoice Preview

Turns the draft and its totals into display-ready text. The Streamlit
preview and the PDF exporter both render this one structure, so what the
customer receives is what the shop saw on screen.
"""

from typing import Optional

from pydantic import BaseModel, Field

from boutique_bill.config import get_settings
from boutique_bill.models.invoice import Invoice, InvoiceTotals
from boutique_bill.totals import (
    format_long_date,
    format_measurement_value,
    format_money,
    visible_measurements,
)


class PreviewRow(BaseModel):
    """One service line of the preview table."""

    name: str
    description: Optional[str] = None
    price: str
    measurements: list[str] = Field(
        default_factory=list,
        description="'Chest: 34' style labels, only for values above 0"
    )
    reference_image: Optional[str] = None


class InvoicePreview(BaseModel):
    """Everything the printable invoice shows, already formatted."""

    shop_name: str
    shop_address: str = ""
    shop_logo: Optional[str] = None
    invoice_number: str
    invoice_date: str = ""
    delivery_date: str = ""
    customer_name: str = ""
    customer_phone: str = ""
    rows: list[PreviewRow] = Field(default_factory=list)
    total: str
    advance: str
    balance: str
    notes: Optional[str] = None
    measurement_unit: str = "inches"

    @property
    def has_measurements(self) -> bool:
        return any(row.measurements for row in self.rows)


def build_preview(
    invoice: Invoice,
    totals: InvoiceTotals,
    currency_symbol: Optional[str] = None,
) -> InvoicePreview:
    """Format the draft for display."""
    app_settings = get_settings().app
    symbol = currency_symbol if currency_symbol is not None else app_settings.currency_symbol

    rows = [
        PreviewRow(
            name=service.name,
            description=service.description,
            price=format_money(service.price, symbol),
            measurements=[
                f"{m.name.value}: {format_measurement_value(m.value)}"
                for m in visible_measurements(service)
            ],
            reference_image=service.reference_image,
        )
        for service in invoice.services
    ]

    return InvoicePreview(
        shop_name=invoice.shop_name,
        shop_address=invoice.shop_address,
        shop_logo=invoice.shop_logo,
        invoice_number=invoice.invoice_number,
        invoice_date=format_long_date(invoice.invoice_date),
        delivery_date=format_long_date(invoice.delivery_date),
        customer_name=invoice.customer_name,
        customer_phone=invoice.customer_phone,
        rows=rows,
        total=format_money(totals.total, symbol),
        advance=format_money(totals.advance, symbol),
        balance=format_money(totals.balance, symbol),
        notes=invoice.notes,
        measurement_unit=app_settings.measurement_unit,
    )
