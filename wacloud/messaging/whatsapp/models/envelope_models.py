"""
Outbound message envelopes.

Every message-send body is an envelope: fixed `messaging_product`, a recipient,
and a `type` discriminant naming the single payload field it carries. Each
message kind is its own model, so a discriminant can never disagree with the
payload it travels with.

Envelope kinds:
- TextEnvelope: type="text", carries `text`
- LocationEnvelope: type="location", carries `location`
- ReactionEnvelope: type="reaction", carries `reaction`, no `recipient_type`
- ContactEnvelope: type="contact", carries `contacts`
- ReplyEnvelope: any declared type plus a `context` reference; its payload
  field is named after the declared type at construction time
"""

from typing import Annotated, Any, Literal, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    TypeAdapter,
    field_validator,
    model_serializer,
)
from pydantic_core import to_jsonable_python

from wacloud.messaging.whatsapp.models.basic_models import Reaction, Text
from wacloud.messaging.whatsapp.models.specialized_models import ContactCard, Location
from wacloud.schemas.core.types import MessageType

MESSAGING_PRODUCT = "whatsapp"

# Keys a reply's dynamic payload field must not shadow
_RESERVED_REPLY_FIELDS = frozenset({"messaging_product", "context", "to", "type"})


class _Envelope(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    messaging_product: Literal["whatsapp"] = MESSAGING_PRODUCT
    to: str = Field(..., min_length=1)


class _IndividualEnvelope(_Envelope):
    recipient_type: Literal["individual"] = "individual"


class TextEnvelope(_IndividualEnvelope):
    type: Literal["text"] = "text"
    text: Text


class LocationEnvelope(_IndividualEnvelope):
    type: Literal["location"] = "location"
    location: Location


class ReactionEnvelope(_Envelope):
    type: Literal["reaction"] = "reaction"
    reaction: Reaction


class ContactEnvelope(_IndividualEnvelope):
    type: Literal["contact"] = "contact"
    contacts: list[ContactCard] = Field(..., min_length=1)


MessageEnvelope = Annotated[
    Union[TextEnvelope, LocationEnvelope, ReactionEnvelope, ContactEnvelope],
    Field(discriminator="type"),
]

message_envelope_adapter: TypeAdapter[MessageEnvelope] = TypeAdapter(MessageEnvelope)


class ReplyContext(BaseModel):
    model_config = ConfigDict(frozen=True)

    message_id: str = Field(..., min_length=1)


class ReplyEnvelope(BaseModel):
    """Envelope that answers an earlier message.

    Serializes as

        {"messaging_product": "whatsapp", "context": {"message_id": ...},
         "to": ..., "type": <type>, <type>: <content>}

    `content` is opaque to this layer and is emitted exactly as it serializes
    on its own.
    """

    model_config = ConfigDict(frozen=True)

    messaging_product: Literal["whatsapp"] = MESSAGING_PRODUCT
    context: ReplyContext
    to: str = Field(..., min_length=1)
    type: str = Field(..., min_length=1)
    content: Any = Field(None, exclude=True)

    @field_validator("type", mode="before")
    @classmethod
    def normalize_type(cls, v):
        if isinstance(v, MessageType):
            return v.value
        return v

    @field_validator("type")
    @classmethod
    def validate_type_not_reserved(cls, v: str) -> str:
        if v in _RESERVED_REPLY_FIELDS:
            raise ValueError(f"'{v}' cannot be used as a reply message type")
        return v

    @model_serializer(mode="wrap")
    def _serialize_with_content(self, handler) -> dict[str, Any]:
        data = handler(self)
        data[self.type] = to_jsonable_python(self.content, exclude_none=True)
        return data


class ReadStatusEnvelope(BaseModel):
    """Status update that marks an inbound message as read."""

    model_config = ConfigDict(frozen=True)

    messaging_product: Literal["whatsapp"] = MESSAGING_PRODUCT
    status: Literal["read"] = "read"
    message_id: str = Field(..., min_length=1)


def serialize_envelope(
    envelope: TextEnvelope
    | LocationEnvelope
    | ReactionEnvelope
    | ContactEnvelope
    | ReplyEnvelope
    | ReadStatusEnvelope,
) -> bytes:
    """Serialize an envelope into the UTF-8 JSON request body."""
    return envelope.model_dump_json(exclude_none=True).encode("utf-8")
