"""Services package."""

from boutique_bill.services.export import (
    ExportError,
    ExportedDocument,
    InvoicePdfExporter,
    PreviewUnavailableError,
)
from boutique_bill.services.image import (
    ImageError,
    ImageRejectedError,
    ImageTooLargeError,
    ReferenceImageService,
)
from boutique_bill.services.messaging import (
    MessagingError,
    MissingPhoneNumberError,
    WhatsAppLinkService,
)
from boutique_bill.services.storage import (
    CorruptStorageError,
    InMemoryStorage,
    JsonFileStorage,
    LocalStorageInterface,
    StorageError,
)

__all__ = [
    # Export
    "ExportError",
    "ExportedDocument",
    "InvoicePdfExporter",
    "PreviewUnavailableError",
    # Image services
    "ImageError",
    "ImageRejectedError",
    "ImageTooLargeError",
    "ReferenceImageService",
    # Messaging
    "MessagingError",
    "MissingPhoneNumberError",
    "WhatsAppLinkService",
    # Storage services
    "CorruptStorageError",
    "InMemoryStorage",
    "JsonFileStorage",
    "LocalStorageInterface",
    "StorageError",
]
