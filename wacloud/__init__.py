"""
wacloud - WhatsApp Cloud API client

Builds outbound message envelopes, dispatches them through an injected HTTP
transport and decodes the API's success and error responses.

Clean Import Interface:
- Only the essentials are exposed at top level
- Models and errors are available via wacloud.messaging.whatsapp paths
"""

from importlib.metadata import PackageNotFoundError, version

from .messaging.whatsapp.client import (
    AiohttpTransport,
    RequestParams,
    build_request,
    send,
)
from .messaging.whatsapp.messenger import (
    WhatsAppMessenger,
    mark_as_read,
    react,
    reply,
    send_contact,
    send_location,
    send_text,
)

try:
    __version__ = version("wacloud")
except PackageNotFoundError:  # Running from a source checkout
    __version__ = "0.0.0"

__all__ = [
    "AiohttpTransport",
    "RequestParams",
    "build_request",
    "send",
    "WhatsAppMessenger",
    "mark_as_read",
    "react",
    "reply",
    "send_contact",
    "send_location",
    "send_text",
]
