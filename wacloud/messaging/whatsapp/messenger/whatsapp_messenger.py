"""
WhatsApp message builders and the messenger facade.

Each builder turns a validated request into its envelope, serializes it and
dispatches it through `send`:
- send_text, send_location, react, send_contact: one envelope kind each
- reply: any declared message type plus a reference to the message answered
- mark_as_read: read-status update for an inbound message

The builders raise on failure. WhatsAppMessenger wraps them for callers that
prefer a MessageResult with an explicit outcome.
"""

from collections.abc import Awaitable, Callable
from typing import Any

from pydantic import ValidationError
from pydantic_core import PydanticSerializationError

from wacloud.core.logging.context import clear_request_context, set_request_context
from wacloud.core.logging.logger import get_logger
from wacloud.messaging.whatsapp.client.transport import HTTPTransport
from wacloud.messaging.whatsapp.client.whatsapp_client import RequestParams, send
from wacloud.messaging.whatsapp.models.basic_models import (
    MessageResult,
    ReactRequest,
    Reaction,
    ReplyParams,
    SendOutcome,
    SendTextRequest,
    Text,
)
from wacloud.messaging.whatsapp.models.envelope_models import (
    ContactEnvelope,
    LocationEnvelope,
    ReactionEnvelope,
    ReadStatusEnvelope,
    ReplyContext,
    ReplyEnvelope,
    TextEnvelope,
    serialize_envelope,
)
from wacloud.messaging.whatsapp.models.response_models import Response
from wacloud.messaging.whatsapp.models.specialized_models import (
    ContactCard,
    Location,
    SendContactRequest,
    SendLocationRequest,
)
from wacloud.messaging.whatsapp.utils.error_helpers import (
    ReplyOptionsError,
    RequestConstructionError,
    handle_whatsapp_error,
)
from wacloud.schemas.core.types import MessageType

logger = get_logger(__name__)


def _serialize(envelope) -> bytes:
    try:
        return serialize_envelope(envelope)
    except PydanticSerializationError as e:
        raise RequestConstructionError(
            f"failed to serialize {type(envelope).__name__}: {e}",
            step="serialize payload",
        ) from e


async def send_text(
    transport: HTTPTransport, params: RequestParams, request: SendTextRequest
) -> Response:
    """Send a text message to the recipient."""
    envelope = TextEnvelope(
        to=request.recipient,
        text=Text(preview_url=request.preview_url, body=request.message),
    )
    return await send(transport, params, _serialize(envelope))


async def send_location(
    transport: HTTPTransport, params: RequestParams, request: SendLocationRequest
) -> Response:
    envelope = LocationEnvelope(to=request.recipient, location=request.location)
    return await send(transport, params, _serialize(envelope))


async def react(
    transport: HTTPTransport, params: RequestParams, request: ReactRequest
) -> Response:
    """Send a reaction to a message.

    Reactions carry no `recipient_type`. If the target message is more than
    30 days old, was deleted, or is itself a reaction, the API accepts the
    call but the reaction is never delivered; a webhook with code 131009
    reports it later.
    """
    envelope = ReactionEnvelope(
        to=request.recipient,
        reaction=Reaction(message_id=request.message_id, emoji=request.emoji),
    )
    return await send(transport, params, _serialize(envelope))


async def send_contact(
    transport: HTTPTransport, params: RequestParams, request: SendContactRequest
) -> Response:
    envelope = ContactEnvelope(to=request.recipient, contacts=request.contacts)
    return await send(transport, params, _serialize(envelope))


def build_reply_envelope(options: ReplyParams) -> ReplyEnvelope:
    """Compose the reply envelope for the given options.

    Raises:
        RequestConstructionError: If the declared type cannot name a field
    """
    try:
        return ReplyEnvelope(
            context=ReplyContext(message_id=options.context),
            to=options.recipient,
            type=options.message_type,
            content=options.content,
        )
    except ValidationError as e:
        raise RequestConstructionError(
            f"invalid reply options: {e}", step="build reply"
        ) from e


async def reply(
    transport: HTTPTransport, params: RequestParams, options: ReplyParams | None
) -> Response:
    """Reply to an earlier message.

    Any message kind can be a reply: the recipient sees the new message with
    a contextual bubble showing the message referenced by `options.context`.
    No bubble is shown for template replies, nor for image, video, PTT or
    audio replies on KaiOS.

    Raises:
        ReplyOptionsError: If options is None
    """
    if options is None:
        raise ReplyOptionsError()
    envelope = build_reply_envelope(options)
    return await send(transport, params, _serialize(envelope))


async def mark_as_read(
    transport: HTTPTransport, params: RequestParams, message_id: str
) -> Response:
    envelope = ReadStatusEnvelope(message_id=message_id)
    return await send(transport, params, _serialize(envelope))


class WhatsAppMessenger:
    """
    Messaging facade bound to one transport and one sender.

    Every method returns a MessageResult; API, decode, empty-body, request
    and transport failures are reported through `outcome` instead of raised.
    Cancellation is never converted.
    """

    def __init__(self, transport: HTTPTransport, params: RequestParams):
        """Initialize messenger.

        Args:
            transport: Transport used for every call
            params: Base endpoint parameters (sender, credentials, endpoint)
        """
        self.transport = transport
        self.params = params
        self.logger = get_logger(__name__)

    @property
    def tenant_id(self) -> str:
        """Sender phone_number_id."""
        return self.params.sender_id

    async def _run(
        self,
        operation: str,
        recipient: str | None,
        call: Callable[[], Awaitable[Response]],
    ) -> MessageResult:
        clear_request_context()
        set_request_context(tenant_id=self.tenant_id, user_id=recipient)
        try:
            # Requests are validated inside call, so bad parameters land here too
            response = await call()
        except ValidationError as e:
            error = RequestConstructionError(
                f"invalid {operation} parameters: {e}", step="validate request"
            )
            error.__cause__ = e
            return handle_whatsapp_error(
                error=error,
                operation=operation,
                recipient=recipient,
                tenant_id=self.tenant_id,
                logger=self.logger,
            )
        except Exception as e:
            return handle_whatsapp_error(
                error=e,
                operation=operation,
                recipient=recipient,
                tenant_id=self.tenant_id,
                logger=self.logger,
            )

        self.logger.info(f"{operation} succeeded, id: {response.message_id}")
        return MessageResult(
            outcome=SendOutcome.SUCCESS,
            message_id=response.message_id,
            recipient=recipient,
            status_code=response.status_code,
            response=response,
            tenant_id=self.tenant_id,
        )

    async def send_text(
        self, text: str, recipient: str, preview_url: bool = False
    ) -> MessageResult:
        return await self._run(
            "send text message",
            recipient,
            lambda: send_text(
                self.transport,
                self.params,
                SendTextRequest(recipient=recipient, message=text, preview_url=preview_url),
            ),
        )

    async def send_location(
        self,
        recipient: str,
        latitude: float,
        longitude: float,
        name: str | None = None,
        address: str | None = None,
    ) -> MessageResult:
        def call() -> Awaitable[Response]:
            request = SendLocationRequest(
                recipient=recipient,
                location=Location(
                    latitude=latitude, longitude=longitude, name=name, address=address
                ),
            )
            return send_location(self.transport, self.params, request)

        return await self._run("send location", recipient, call)

    async def react(self, recipient: str, message_id: str, emoji: str) -> MessageResult:
        return await self._run(
            "send reaction",
            recipient,
            lambda: react(
                self.transport,
                self.params,
                ReactRequest(recipient=recipient, message_id=message_id, emoji=emoji),
            ),
        )

    async def send_contact(
        self, recipient: str, contacts: list[ContactCard]
    ) -> MessageResult:
        return await self._run(
            "send contact card",
            recipient,
            lambda: send_contact(
                self.transport,
                self.params,
                SendContactRequest(recipient=recipient, contacts=contacts),
            ),
        )

    async def reply(
        self,
        recipient: str,
        reply_to_message_id: str,
        message_type: MessageType | str,
        content: Any,
    ) -> MessageResult:
        def call() -> Awaitable[Response]:
            options = ReplyParams(
                recipient=recipient,
                context=reply_to_message_id,
                message_type=message_type,
                content=content,
            )
            return reply(self.transport, self.params, options)

        return await self._run("send reply", recipient, call)

    async def mark_as_read(self, message_id: str) -> MessageResult:
        # A read receipt has no recipient; the message id goes in message_id
        result = await self._run(
            "mark as read",
            None,
            lambda: mark_as_read(self.transport, self.params, message_id),
        )
        # Status updates return {"success": true} rather than a message id
        if result.success:
            return result.model_copy(update={"message_id": message_id})
        return result
