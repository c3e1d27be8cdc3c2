"""WhatsApp error types and helpers."""

from wacloud.messaging.whatsapp.utils.error_helpers import (
    EmptyResponseBodyError,
    ReplyOptionsError,
    RequestConstructionError,
    ResponseDecodeError,
    WhatsAppAPIError,
    WhatsAppError,
    handle_whatsapp_error,
    is_authentication_error,
)

__all__ = [
    "WhatsAppError",
    "RequestConstructionError",
    "ReplyOptionsError",
    "EmptyResponseBodyError",
    "ResponseDecodeError",
    "WhatsAppAPIError",
    "handle_whatsapp_error",
    "is_authentication_error",
]
