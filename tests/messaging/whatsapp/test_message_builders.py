"""
Tests for the envelope builders and the reply builder.
"""

import json

import pytest
from pydantic import ValidationError

from wacloud.messaging.whatsapp.messenger import (
    build_reply_envelope,
    mark_as_read,
    react,
    reply,
    send_contact,
    send_location,
    send_text,
)
from wacloud.messaging.whatsapp.models import (
    ContactCard,
    ContactName,
    ContactPhone,
    Location,
    ReactRequest,
    ReplyParams,
    SendContactRequest,
    SendLocationRequest,
    SendTextRequest,
    Text,
    TextEnvelope,
    message_envelope_adapter,
)
from wacloud.messaging.whatsapp.utils import ReplyOptionsError, RequestConstructionError
from wacloud.schemas.core.types import MessageType


@pytest.mark.asyncio
class TestEnvelopeBuilders:
    async def test_send_text_envelope(self, params, ok_transport):
        response = await send_text(
            ok_transport,
            params,
            SendTextRequest(recipient="123", message="hi", preview_url=False),
        )

        assert response.status_code == 200
        assert ok_transport.last_payload == {
            "messaging_product": "whatsapp",
            "to": "123",
            "recipient_type": "individual",
            "type": "text",
            "text": {"preview_url": False, "body": "hi"},
        }

    async def test_send_location_envelope(self, params, ok_transport):
        location = Location(latitude=37.4847, longitude=-122.1477, name="Philz Coffee")

        await send_location(
            ok_transport, params, SendLocationRequest(recipient="123", location=location)
        )

        assert ok_transport.last_payload == {
            "messaging_product": "whatsapp",
            "to": "123",
            "recipient_type": "individual",
            "type": "location",
            "location": {
                "latitude": 37.4847,
                "longitude": -122.1477,
                "name": "Philz Coffee",
            },
        }

    async def test_react_envelope_has_no_recipient_type(self, params, ok_transport):
        await react(
            ok_transport,
            params,
            ReactRequest(recipient="123", message_id="wamid.ABC", emoji="😀"),
        )

        payload = ok_transport.last_payload
        assert payload["type"] == "reaction"
        assert payload["reaction"] == {"message_id": "wamid.ABC", "emoji": "😀"}
        assert "recipient_type" not in payload
        assert "😀".encode() in ok_transport.requests[0].body

    async def test_send_contact_envelope(self, params, ok_transport):
        card = ContactCard(
            name=ContactName(formatted_name="Ana Lima", first_name="Ana"),
            phones=[ContactPhone(phone="+1 555 0100", type="CELL")],
        )

        await send_contact(
            ok_transport, params, SendContactRequest(recipient="123", contacts=[card])
        )

        payload = ok_transport.last_payload
        assert payload["type"] == "contact"
        assert payload["recipient_type"] == "individual"
        assert payload["contacts"] == [
            {
                "name": {"formatted_name": "Ana Lima", "first_name": "Ana"},
                "phones": [{"phone": "+1 555 0100", "type": "CELL"}],
            }
        ]

    async def test_mark_as_read_envelope(self, params, ok_transport):
        await mark_as_read(ok_transport, params, "wamid.ABC")

        assert ok_transport.last_payload == {
            "messaging_product": "whatsapp",
            "status": "read",
            "message_id": "wamid.ABC",
        }


class TestEnvelopeUnion:
    def test_discriminant_selects_variant(self):
        envelope = message_envelope_adapter.validate_python(
            {"to": "123", "type": "text", "text": {"body": "hi"}}
        )
        assert isinstance(envelope, TextEnvelope)

    def test_mismatched_payload_is_rejected(self):
        with pytest.raises(ValidationError):
            message_envelope_adapter.validate_python(
                {"to": "123", "type": "text", "location": {"latitude": 1, "longitude": 2}}
            )

    def test_reaction_rejects_recipient_type(self):
        with pytest.raises(ValidationError):
            message_envelope_adapter.validate_python(
                {
                    "to": "123",
                    "type": "reaction",
                    "recipient_type": "individual",
                    "reaction": {"message_id": "wamid.ABC", "emoji": "x"},
                }
            )

    def test_reply_type_cannot_shadow_envelope_fields(self):
        options = ReplyParams(
            recipient="123", context="wamid.PREV", message_type="to", content="x"
        )
        with pytest.raises(RequestConstructionError):
            build_reply_envelope(options)


@pytest.mark.asyncio
class TestReply:
    async def test_text_reply_envelope(self, params, ok_transport):
        options = ReplyParams(
            recipient="123",
            context="wamid.PREV",
            message_type=MessageType.TEXT,
            content=Text(body="your-text-message-content"),
        )

        await reply(ok_transport, params, options)

        body = ok_transport.requests[0].body
        assert json.loads(body) == {
            "messaging_product": "whatsapp",
            "context": {"message_id": "wamid.PREV"},
            "to": "123",
            "type": "text",
            "text": {"preview_url": False, "body": "your-text-message-content"},
        }
        assert list(json.loads(body)) == [
            "messaging_product",
            "context",
            "to",
            "type",
            "text",
        ]

    async def test_content_field_named_after_declared_type(self, params, ok_transport):
        options = ReplyParams(
            recipient="123",
            context="wamid.PREV",
            message_type="image",
            content={"link": "https://example.com/cat.png", "caption": "cat"},
        )

        await reply(ok_transport, params, options)

        payload = ok_transport.last_payload
        assert payload["type"] == "image"
        assert payload["image"] == {"link": "https://example.com/cat.png", "caption": "cat"}

    async def test_none_options_rejected_before_dispatch(self, params, ok_transport):
        with pytest.raises(ReplyOptionsError, match="options cannot be None"):
            await reply(ok_transport, params, None)

        assert ok_transport.requests == []

    @pytest.mark.parametrize("recipient", ['12"3', "12\\3", '"}, "to": "999'])
    async def test_quotes_and_backslashes_do_not_corrupt_json(
        self, params, ok_transport, recipient
    ):
        options = ReplyParams(
            recipient=recipient,
            context='wamid."ABC\\',
            message_type=MessageType.TEXT,
            content=Text(body="hi"),
        )

        await reply(ok_transport, params, options)

        payload = ok_transport.last_payload
        assert payload["to"] == recipient
        assert payload["context"] == {"message_id": 'wamid."ABC\\'}

    async def test_unserializable_content_is_construction_error(self, params, ok_transport):
        options = ReplyParams(
            recipient="123",
            context="wamid.PREV",
            message_type=MessageType.TEXT,
            content=object(),
        )

        with pytest.raises(RequestConstructionError) as exc_info:
            await reply(ok_transport, params, options)

        assert exc_info.value.step == "serialize payload"
        assert ok_transport.requests == []
