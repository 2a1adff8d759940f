"""Image processing services package."""

from boutique_bill.services.image.image_service import (
    ImageError,
    ImageRejectedError,
    ImageTooLargeError,
    ReferenceImageService,
    decode_data_url,
)

__all__ = [
    "ImageError",
    "ImageRejectedError",
    "ImageTooLargeError",
    "ReferenceImageService",
    "decode_data_url",
]
