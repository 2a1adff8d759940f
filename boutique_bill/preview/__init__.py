"""Printable invoice preview package."""

from boutique_bill.preview.builder import InvoicePreview, PreviewRow, build_preview

__all__ = ["InvoicePreview", "PreviewRow", "build_preview"]
