"""WhatsApp message builders and messenger facade."""

from .whatsapp_messenger import (
    WhatsAppMessenger,
    build_reply_envelope,
    mark_as_read,
    react,
    reply,
    send_contact,
    send_location,
    send_text,
)

__all__ = [
    "WhatsAppMessenger",
    "build_reply_envelope",
    "mark_as_read",
    "react",
    "reply",
    "send_contact",
    "send_location",
    "send_text",
]
