"""
Basic message models for WhatsApp messaging.

Pydantic schemas for the text, reaction, reply and read-status operations and
the MessageResult returned by the WhatsAppMessenger facade.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from wacloud.messaging.whatsapp.models.response_models import ErrorResponse, Response
from wacloud.schemas.core.types import MessageType


class Text(BaseModel):
    """Text body. `preview_url` is always serialized, even when false."""

    model_config = ConfigDict(frozen=True)

    preview_url: bool = False
    body: str = Field(..., max_length=4096)


class Reaction(BaseModel):
    """Reaction body: an emoji attached to an earlier message."""

    model_config = ConfigDict(frozen=True)

    message_id: str = Field(..., min_length=1)
    emoji: str


class SendTextRequest(BaseModel):
    """Input of the text builder."""

    model_config = ConfigDict(frozen=True)

    recipient: str = Field(..., min_length=1, description="Recipient phone number")
    message: str = Field(..., max_length=4096, description="Text content")
    preview_url: bool = Field(False, description="Render a preview for the first URL")


class ReactRequest(BaseModel):
    """Input of the reaction builder."""

    model_config = ConfigDict(frozen=True)

    recipient: str = Field(..., min_length=1)
    message_id: str = Field(..., min_length=1, description="Message to react to")
    emoji: str = Field(..., description="Emoji; an empty string removes the reaction")


class ReplyParams(BaseModel):
    """Options for replying to a previous message.

    `content` is opaque: it is serialized as-is under the field named by
    `message_type` (a Text for MessageType.TEXT, a Location for LOCATION, ...).
    """

    model_config = ConfigDict(frozen=True)

    recipient: str = Field(..., min_length=1)
    context: str = Field(..., min_length=1, description="ID of the message to reply to")
    message_type: MessageType | str
    content: Any


class SendOutcome(str, Enum):
    """How a messenger call ended."""

    SUCCESS = "success"
    API_ERROR = "api_error"
    TRANSPORT_ERROR = "transport_error"
    DECODE_ERROR = "decode_error"
    EMPTY_BODY = "empty_body"
    REQUEST_ERROR = "request_error"


class MessageResult(BaseModel):
    """Result of a messaging operation.

    Callers branch on `outcome` instead of catching exceptions.
    """

    outcome: SendOutcome
    message_id: str | None = None
    recipient: str | None = None
    status_code: int | None = None
    error: str | None = None
    error_code: int | None = None
    response: Response | None = None
    error_response: ErrorResponse | None = None
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    tenant_id: str | None = None  # phone_number_id of the sender

    @property
    def success(self) -> bool:
        return self.outcome is SendOutcome.SUCCESS
