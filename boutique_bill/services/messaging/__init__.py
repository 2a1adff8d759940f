"""Messaging handoff package."""

from boutique_bill.services.messaging.whatsapp_service import (
    MessagingError,
    MissingPhoneNumberError,
    WhatsAppLinkService,
    build_whatsapp_url,
    normalize_phone,
)

__all__ = [
    "MessagingError",
    "MissingPhoneNumberError",
    "WhatsAppLinkService",
    "build_whatsapp_url",
    "normalize_phone",
]
