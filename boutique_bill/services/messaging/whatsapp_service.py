"""
Messaging Handoff

We never send anything ourselves. We build a deep link of the form

    https://wa.me/<phone>?text=<url-encoded message>

and let the user's messaging app take it from there.
"""

import re
from typing import Optional
from urllib.parse import quote

from boutique_bill.config import get_settings


# Characters encodeURIComponent leaves alone, so links match what browsers build
URI_COMPONENT_SAFE = "-_.!~*'()"

_PHONE_NOISE = re.compile(r"[\s\-().]")


class MessagingError(Exception):
    """Base exception for messaging handoff errors."""
    pass


class MissingPhoneNumberError(MessagingError):
    """There is no phone number to send the message to."""
    pass


def normalize_phone(phone: Optional[str]) -> str:
    """Strip spaces, dashes, brackets and a leading '+' from a phone number."""
    cleaned = _PHONE_NOISE.sub("", phone or "")
    return cleaned.lstrip("+")


class WhatsAppLinkService:
    """Builds messaging deep links for the customer summary."""

    def __init__(self, base_url: Optional[str] = None):
        self._base_url = (base_url or get_settings().app.messaging_base_url).rstrip("/")

    def build_url(self, phone: Optional[str], message: str) -> str:
        """
        Build the deep link.

        Raises:
            MissingPhoneNumberError: If the phone number is empty
        """
        number = normalize_phone(phone)
        if not number:
            raise MissingPhoneNumberError("Customer phone number is not provided.")
        return f"{self._base_url}/{number}?text={quote(message, safe=URI_COMPONENT_SAFE)}"


def build_whatsapp_url(phone: Optional[str], message: str, base_url: Optional[str] = None) -> str:
    """Shortcut for WhatsAppLinkService(base_url).build_url(phone, message)."""
    return WhatsAppLinkService(base_url).build_url(phone, message)
