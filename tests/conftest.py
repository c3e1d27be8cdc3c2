"""
Pytest configuration and common fixtures for wacloud tests.

Provides an in-memory transport and shared request parameters.
"""

import json

import pytest

from wacloud.core.logging.context import clear_request_context
from wacloud.messaging.whatsapp.client import RequestParams, WhatsAppRequest

SUCCESS_BODY = {
    "messaging_product": "whatsapp",
    "contacts": [{"input": "123", "wa_id": "123"}],
    "messages": [{"id": "wamid.HBgLMTIzNDU2Nzg5MA=="}],
}

ERROR_BODY = {
    "error": {
        "message": "(#131030) Recipient phone number not in allowed list",
        "type": "OAuthException",
        "code": 131030,
        "error_data": {
            "messaging_product": "whatsapp",
            "details": "Recipient phone number not in allowed list",
        },
        "fbtrace_id": "Az8or2yhqkZfEZ-_4Qn_Bam",
    }
}


class FakeResponse:
    """TransportResponse double that counts releases."""

    def __init__(
        self,
        status: int = 200,
        body: bytes | None = b"",
        headers: dict[str, str] | None = None,
        read_error: Exception | None = None,
    ):
        self.status = status
        self.headers = headers or {"Content-Type": "application/json"}
        self._body = body
        self._read_error = read_error
        self.release_count = 0

    async def read(self) -> bytes | None:
        if self._read_error is not None:
            raise self._read_error
        return self._body

    def release(self) -> None:
        self.release_count += 1


class FakeTransport:
    """HTTPTransport double that records requests."""

    def __init__(self, response: FakeResponse | None = None, error: BaseException | None = None):
        self.response = response
        self.error = error
        self.requests: list[WhatsAppRequest] = []

    async def execute(self, request: WhatsAppRequest) -> FakeResponse:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return self.response

    @property
    def last_payload(self) -> dict:
        return json.loads(self.requests[-1].body)


def json_response(status: int, payload: dict) -> FakeResponse:
    return FakeResponse(status=status, body=json.dumps(payload).encode())


@pytest.fixture
def params() -> RequestParams:
    return RequestParams(
        base_url="https://graph.facebook.com/",
        api_version="v21.0",
        sender_id="1098765432",
        endpoint="messages",
        method="POST",
        headers={"Content-Type": "application/json"},
        bearer_token="test_token",
    )


@pytest.fixture
def ok_transport() -> FakeTransport:
    return FakeTransport(json_response(200, SUCCESS_BODY))


@pytest.fixture(autouse=True)
def setup_test_env(monkeypatch):
    """Set up test environment variables."""
    monkeypatch.setenv("ENVIRONMENT", "DEV")
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")
    monkeypatch.setenv("WP_PHONE_ID", "test_phone_id")
    monkeypatch.setenv("WP_ACCESS_TOKEN", "test_token")
    yield
    clear_request_context()
