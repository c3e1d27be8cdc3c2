"""WhatsApp client package."""

from .transport import (
    AiohttpTransport,
    AiohttpTransportResponse,
    HTTPTransport,
    TransportResponse,
    WhatsAppRequest,
)
from .whatsapp_client import RequestParams, WhatsAppUrlBuilder, build_request, send

__all__ = [
    "AiohttpTransport",
    "AiohttpTransportResponse",
    "HTTPTransport",
    "TransportResponse",
    "WhatsAppRequest",
    "RequestParams",
    "WhatsAppUrlBuilder",
    "build_request",
    "send",
]
