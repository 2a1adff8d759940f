"""Export services package."""

from boutique_bill.services.export.pdf_service import (
    ExportError,
    ExportedDocument,
    InvoicePdfExporter,
    PreviewUnavailableError,
    export_filename,
)

__all__ = [
    "ExportError",
    "ExportedDocument",
    "InvoicePdfExporter",
    "PreviewUnavailableError",
    "export_filename",
]
