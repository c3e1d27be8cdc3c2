"""WhatsApp models package."""

from .basic_models import (
    MessageResult,
    Reaction,
    ReactRequest,
    ReplyParams,
    SendOutcome,
    SendTextRequest,
    Text,
)
from .envelope_models import (
    ContactEnvelope,
    LocationEnvelope,
    MessageEnvelope,
    ReactionEnvelope,
    ReadStatusEnvelope,
    ReplyContext,
    ReplyEnvelope,
    TextEnvelope,
    message_envelope_adapter,
    serialize_envelope,
)
from .response_models import (
    ErrorResponse,
    GraphError,
    Response,
    ResponseContact,
    ResponseMessage,
    ResponseMessageId,
)
from .specialized_models import (
    ContactAddress,
    ContactCard,
    ContactEmail,
    ContactName,
    ContactOrganization,
    ContactPhone,
    ContactUrl,
    Location,
    SendContactRequest,
    SendLocationRequest,
)

__all__ = [
    "MessageResult",
    "SendOutcome",
    "Text",
    "Reaction",
    "SendTextRequest",
    "ReactRequest",
    "ReplyParams",
    "Location",
    "ContactAddress",
    "ContactCard",
    "ContactEmail",
    "ContactName",
    "ContactOrganization",
    "ContactPhone",
    "ContactUrl",
    "SendLocationRequest",
    "SendContactRequest",
    "TextEnvelope",
    "LocationEnvelope",
    "ReactionEnvelope",
    "ContactEnvelope",
    "MessageEnvelope",
    "ReplyContext",
    "ReplyEnvelope",
    "ReadStatusEnvelope",
    "message_envelope_adapter",
    "serialize_envelope",
    "Response",
    "ResponseMessage",
    "ResponseMessageId",
    "ResponseContact",
    "ErrorResponse",
    "GraphError",
]
