"""
Reference Image Service using Pillow

Handles the shop logo and the per-service reference images (photos of a
design the customer wants, a sample garment, etc).

This service handles:
1. Type and size checks on uploaded or camera-captured bytes
2. Decoding with Pillow (anything Pillow can't open is rejected)
3. Orientation fix and downscaling
4. Re-encoding as a base64 data URL stored on the invoice

CRITICAL: We never keep an image we could not decode. A broken image
would only surface later, when the PDF is rendered.
"""

import base64
import binascii
from io import BytesIO
from typing import Optional

from PIL import Image, ImageOps, UnidentifiedImageError

from boutique_bill.config import get_settings
from boutique_bill.models.invoice import StoredImage


MIME_BY_FORMAT = {
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "png": "image/png",
    "webp": "image/webp",
}


class ImageError(Exception):
    """Base exception for image handling errors."""
    pass


class ImageRejectedError(ImageError):
    """The image can't be used (wrong type, too large, unreadable)."""
    pass


class ImageTooLargeError(ImageRejectedError):
    """The uploaded file exceeds the configured size limit."""
    pass


class ReferenceImageService:
    """
    Service for turning uploads into embeddable images.

    Flow:
    1. Receive raw image bytes
    2. Check type and size
    3. Decode, fix orientation, downscale
    4. Return a StoredImage with a data URL
    """

    def __init__(self):
        self._app_settings = get_settings().app

    @property
    def allowed_mime_types(self) -> set[str]:
        return {
            MIME_BY_FORMAT[fmt]
            for fmt in self._app_settings.supported_formats_list
            if fmt in MIME_BY_FORMAT
        }

    def _check_upload(self, image_bytes: bytes, mime_type: str) -> None:
        if mime_type.lower() not in self.allowed_mime_types:
            raise ImageRejectedError(
                f"Unsupported image type: {mime_type}. "
                f"Please upload one of: {self._app_settings.supported_image_formats}"
            )
        if not image_bytes:
            raise ImageRejectedError("The uploaded image is empty.")
        if len(image_bytes) > self._app_settings.max_upload_size_bytes:
            raise ImageTooLargeError(
                f"Image is larger than {self._app_settings.max_upload_size_mb} MB."
            )

    def process(
        self,
        image_bytes: bytes,
        filename: str,
        mime_type: str,
    ) -> StoredImage:
        """
        Validate, downscale and encode an image.

        Raises:
            ImageRejectedError: If the image can't be used
        """
        self._check_upload(image_bytes, mime_type)

        try:
            img = Image.open(BytesIO(image_bytes))
            img.load()
        except (UnidentifiedImageError, OSError) as e:
            raise ImageRejectedError(f"Could not read image {filename}: {e}") from e

        img = ImageOps.exif_transpose(img)
        max_side = self._app_settings.max_image_dimension
        img.thumbnail((max_side, max_side))

        # Keep transparency (logos); everything else becomes JPEG
        if img.mode in ("RGBA", "LA") or (img.mode == "P" and "transparency" in img.info):
            img = img.convert("RGBA")
            output_format, output_mime = "PNG", "image/png"
        else:
            img = img.convert("RGB")
            output_format, output_mime = "JPEG", "image/jpeg"

        buffer = BytesIO()
        save_options = {"quality": 85, "optimize": True} if output_format == "JPEG" else {}
        img.save(buffer, format=output_format, **save_options)
        encoded = buffer.getvalue()

        return StoredImage(
            original_filename=filename,
            mime_type=output_mime,
            width=img.width,
            height=img.height,
            size_bytes=len(encoded),
            data_url=f"data:{output_mime};base64,{base64.b64encode(encoded).decode('ascii')}",
        )


def decode_data_url(data_url: Optional[str]) -> Optional[Image.Image]:
    """
    Open an image stored as a data URL.

    Returns None when there is no image or it can't be decoded, so a bad
    logo never stops an export.
    """
    if not data_url or not data_url.startswith("data:") or "," not in data_url:
        return None
    _, payload = data_url.split(",", 1)
    try:
        img = Image.open(BytesIO(base64.b64decode(payload)))
        img.load()
    except (binascii.Error, UnidentifiedImageError, OSError, ValueError):
        return None
    return img
