"""Shared fixtures for BoutiqueBill tests."""

from datetime import date
from decimal import Decimal
from io import BytesIO

import pytest
from PIL import Image

from boutique_bill.models.invoice import (
    Invoice,
    Measurement,
    MeasurementName,
    Service,
)
from boutique_bill.wizard import InvoiceWizard


def make_image_bytes(size=(800, 600), mode="RGB", fmt="PNG") -> bytes:
    color = (120, 40, 90, 255) if mode == "RGBA" else "white"
    img = Image.new(mode, size, color)
    buffer = BytesIO()
    img.save(buffer, format=fmt)
    return buffer.getvalue()


@pytest.fixture
def png_bytes() -> bytes:
    return make_image_bytes()


@pytest.fixture
def sample_invoice() -> Invoice:
    """A complete invoice: total 1500, advance 500."""
    return Invoice(
        shop_name="Anjali Designer Studio",
        shop_address="12 MG Road, Bengaluru 560001",
        invoice_number="INV-1001",
        invoice_date=date(2026, 10, 19),
        delivery_date=date(2026, 10, 30),
        customer_name="Priya Sharma",
        customer_phone="919876543210",
        services=[
            Service(
                name="Blouse Stitching",
                description="with lining",
                price=Decimal("1000"),
                measurements=[
                    Measurement(name=MeasurementName.CHEST, value=34),
                    Measurement(name=MeasurementName.WAIST, value=0),
                ],
            ),
            Service(name="Fall & Pico", price=Decimal("500")),
        ],
        advance=Decimal("500"),
        notes="Use golden thread",
    )


def fill_shop_and_customer(wizard: InvoiceWizard) -> None:
    """Fill the first two steps and move to the services step."""
    wizard.update(
        shop_name="Anjali Designer Studio",
        shop_address="12 MG Road, Bengaluru 560001",
        invoice_number="INV-1001",
    )
    assert wizard.advance()
    wizard.update(
        customer_name="Priya Sharma",
        customer_phone="919876543210",
        invoice_date=date(2026, 10, 19),
        delivery_date=date(2026, 10, 30),
    )
    assert wizard.advance()


def fill_to_preview(wizard: InvoiceWizard) -> None:
    """Fill every step and land on the preview."""
    fill_shop_and_customer(wizard)
    wizard.update_service(0, name="Blouse Stitching", price=1500)
    assert wizard.advance()
    wizard.update(advance=500)
    assert wizard.advance()


@pytest.fixture
def wizard_on_services() -> InvoiceWizard:
    wizard = InvoiceWizard()
    fill_shop_and_customer(wizard)
    return wizard


@pytest.fixture
def wizard_on_preview() -> InvoiceWizard:
    wizard = InvoiceWizard()
    fill_to_preview(wizard)
    return wizard


@pytest.fixture
def image_bytes():
    """Factory fixture: image_bytes(size=(w, h), mode="RGBA")."""
    return make_image_bytes
