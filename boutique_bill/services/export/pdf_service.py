"""
Invoice PDF Export

The preview is rasterized to an image with Pillow and placed on a single
page with fixed margins using reportlab. The PDF therefore looks exactly
like the preview image, whatever fonts the reader has installed.

This service handles:
1. Laying out the preview on a Pillow canvas
2. Scaling the image onto one page (A4 or Letter)
3. Naming the file after the invoice number
"""

import re
from io import BytesIO
from typing import Optional

from PIL import Image, ImageDraw, ImageFont
from pydantic import BaseModel, Field
from reportlab.lib.pagesizes import A4, LETTER
from reportlab.lib.units import mm
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

from boutique_bill.config import ExportSettings, get_settings
from boutique_bill.preview import InvoicePreview
from boutique_bill.services.image import decode_data_url


PAGE_SIZES = {"A4": A4, "LETTER": LETTER}

INK = (33, 37, 41)
MUTED = (108, 117, 125)
ACCENT = (122, 48, 108)
RULE = (222, 226, 230)
BAND = (244, 240, 245)
WHITE = (255, 255, 255)


class ExportError(Exception):
    """Base exception for export errors."""
    pass


class PreviewUnavailableError(ExportError):
    """There is nothing to render."""
    pass


class ExportedDocument(BaseModel):
    """A rendered PDF ready to be offered for download."""

    filename: str
    content: bytes = Field(repr=False)
    mime_type: str = "application/pdf"

    @property
    def size_bytes(self) -> int:
        return len(self.content)


def export_filename(invoice_number: str, prefix: str = "Invoice") -> str:
    """Invoice-INV-20261019-AB12.pdf; unsafe characters become '_'."""
    safe = re.sub(r"[^A-Za-z0-9_-]+", "_", invoice_number.strip()).strip("_")
    return f"{prefix}-{safe or 'draft'}.pdf"


class _Cursor:
    """Vertical write position on the raster canvas."""

    def __init__(self, y: float):
        self.y = y

    def down(self, amount: float) -> None:
        self.y += amount


class InvoicePdfExporter:
    """
    Renders an InvoicePreview to a single-page PDF.

    Usage:
        exporter = InvoicePdfExporter()
        document = exporter.export(build_preview(invoice, totals))
    """

    def __init__(self, settings: Optional[ExportSettings] = None):
        self._settings = settings or get_settings().export
        self._currency_symbol = get_settings().app.currency_symbol

    # -------------------------------------------------------------------------
    # Rasterizing
    # -------------------------------------------------------------------------

    def _font(self, size: int) -> ImageFont.ImageFont:
        if self._settings.font_path:
            return ImageFont.truetype(self._settings.font_path, size)
        return ImageFont.load_default(size=size)

    def _text(self, value: str) -> str:
        # The built-in font has no glyph for most currency symbols
        if self._settings.font_path:
            return value
        return value.replace(self._currency_symbol, self._settings.currency_label)

    @staticmethod
    def _wrap(draw: ImageDraw.ImageDraw, text: str, font, width: float) -> list[str]:
        lines = []
        for paragraph in text.splitlines() or [""]:
            current = ""
            for word in paragraph.split():
                candidate = f"{current} {word}".strip()
                if current and draw.textlength(candidate, font=font) > width:
                    lines.append(current)
                    current = word
                else:
                    current = candidate
            lines.append(current)
        return lines

    def render_image(self, preview: InvoicePreview) -> Image.Image:
        """
        Draw the preview onto an image.

        The canvas grows with the content, so long invoices are never cut.

        Raises:
            PreviewUnavailableError: If the preview has no service rows
        """
        if not preview.rows:
            raise PreviewUnavailableError("The invoice has no services to show.")

        width = self._settings.raster_width_px
        img, bottom = self._draw(preview, width * 4)
        if bottom > img.height:
            # Drawing past the edge is clipped but still measured; redraw to fit
            img, bottom = self._draw(preview, bottom)
        return img.crop((0, 0, width, bottom))

    def _draw(self, preview: InvoicePreview, height: int) -> tuple[Image.Image, int]:
        """Lay the preview out on a canvas of the given height. Returns the content bottom."""
        width = self._settings.raster_width_px
        pad = int(width * 0.06)
        inner = width - 2 * pad
        unit = max(12, width // 48)

        title_font = self._font(unit * 3)
        heading_font = self._font(int(unit * 1.5))
        body_font = self._font(unit)
        small_font = self._font(int(unit * 0.85))
        line_gap = int(unit * 1.5)

        # Tall canvas, cropped to the content by the caller
        img = Image.new("RGB", (width, height), WHITE)
        draw = ImageDraw.Draw(img)
        cursor = _Cursor(pad)

        def right(text: str, y: float, font, fill=INK) -> None:
            text = self._text(text)
            draw.text((width - pad - draw.textlength(text, font=font), y), text, font=font, fill=fill)

        def left(text: str, y: float, font, fill=INK, x: float = pad) -> None:
            draw.text((x, y), self._text(text), font=font, fill=fill)

        def rule(thickness: int = 2) -> None:
            draw.rectangle((pad, cursor.y, width - pad, cursor.y + thickness), fill=RULE)
            cursor.down(thickness + unit)

        # Header band
        header_top = cursor.y
        logo = decode_data_url(preview.shop_logo)
        if logo is not None:
            logo = logo.convert("RGBA")
            logo.thumbnail((unit * 6, unit * 6))
            img.paste(logo, (width - pad - logo.width, int(header_top)), logo)

        left("INVOICE", cursor.y, title_font, ACCENT)
        cursor.down(unit * 3.6)
        left(f"Invoice No: {preview.invoice_number}", cursor.y, body_font, MUTED)
        cursor.down(line_gap)
        if preview.invoice_date:
            left(f"Invoice Date: {preview.invoice_date}", cursor.y, body_font, MUTED)
            cursor.down(line_gap)

        shop_y = header_top + (unit * 6.5 if logo is not None else 0)
        right(preview.shop_name, shop_y, heading_font, INK)
        address_y = shop_y + unit * 2
        for line in self._wrap(draw, preview.shop_address, small_font, inner / 2):
            if line:
                right(line, address_y, small_font, MUTED)
                address_y += int(unit * 1.2)

        cursor.y = max(cursor.y, address_y) + unit
        rule()

        # Bill to / delivery
        left("Bill To:", cursor.y, body_font, INK)
        right("Delivery Date:", cursor.y, body_font, INK)
        cursor.down(line_gap)
        left(preview.customer_name, cursor.y, body_font, ACCENT)
        right(preview.delivery_date, cursor.y, body_font, INK)
        cursor.down(line_gap)
        left(f"Phone: {preview.customer_phone}", cursor.y, body_font, INK)
        cursor.down(line_gap + unit)

        # Services table
        draw.rectangle((pad, cursor.y - unit * 0.4, width - pad, cursor.y + unit * 1.6), fill=BAND)
        left("Service Description", cursor.y, body_font, MUTED)
        right("Price", cursor.y, body_font, MUTED)
        cursor.down(unit * 2.4)

        name_width = inner * 0.7
        for row in preview.rows:
            right(row.price, cursor.y, body_font)
            for line in self._wrap(draw, row.name, body_font, name_width):
                left(line, cursor.y, body_font)
                cursor.down(line_gap)
            if row.description:
                for line in self._wrap(draw, row.description, small_font, name_width):
                    left(line, cursor.y, small_font, MUTED)
                    cursor.down(int(unit * 1.2))
            if row.measurements:
                measured = f"Measurements ({preview.measurement_unit}): " + ", ".join(row.measurements)
                for line in self._wrap(draw, measured, small_font, name_width):
                    left(line, cursor.y, small_font, MUTED)
                    cursor.down(int(unit * 1.2))
            cursor.down(unit * 0.4)
            rule(1)

        # Totals
        for label, value, font in (
            ("Total", preview.total, heading_font),
            ("Advance Paid", preview.advance, body_font),
            ("Balance Due", preview.balance, heading_font),
        ):
            left(label, cursor.y, font, ACCENT if label == "Balance Due" else INK)
            right(value, cursor.y, font, ACCENT if label == "Balance Due" else INK)
            cursor.down(line_gap * (1.3 if font is heading_font else 1))

        if preview.notes:
            cursor.down(unit)
            rule()
            left("Notes:", cursor.y, heading_font)
            cursor.down(unit * 2)
            for line in self._wrap(draw, preview.notes, body_font, inner):
                left(line, cursor.y, body_font)
                cursor.down(line_gap)

        return img, int(cursor.y + pad)

    # -------------------------------------------------------------------------
    # PDF
    # -------------------------------------------------------------------------

    def export(self, preview: InvoicePreview) -> ExportedDocument:
        """
        Render the preview into a one-page PDF.

        The image is scaled to fit inside the page margins, keeping its
        aspect ratio, and anchored to the top of the page.

        Raises:
            PreviewUnavailableError: If there is nothing to render
        """
        image = self.render_image(preview)

        page_width, page_height = PAGE_SIZES[self._settings.page_size]
        margin = self._settings.margin_mm * mm
        scale = min(
            (page_width - 2 * margin) / image.width,
            (page_height - 2 * margin) / image.height,
        )
        draw_width = image.width * scale
        draw_height = image.height * scale

        buffer = BytesIO()
        pdf = canvas.Canvas(buffer, pagesize=(page_width, page_height))
        pdf.setTitle(f"Invoice {preview.invoice_number}")
        pdf.setAuthor(preview.shop_name or "BoutiqueBill")
        pdf.setCreator("BoutiqueBill")
        pdf.drawImage(
            ImageReader(image),
            margin,
            page_height - margin - draw_height,
            width=draw_width,
            height=draw_height,
        )
        pdf.showPage()
        pdf.save()

        return ExportedDocument(
            filename=export_filename(preview.invoice_number, self._settings.file_name_prefix),
            content=buffer.getvalue(),
        )
