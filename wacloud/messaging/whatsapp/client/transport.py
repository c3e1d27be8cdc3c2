"""
HTTP transport seam for the WhatsApp client.

The dispatcher only needs "execute(request) -> response"; connection pooling,
TLS, proxies and retries belong to whatever implements HTTPTransport. The
aiohttp implementation wraps a session owned by the caller.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable

import aiohttp
from yarl import URL

from wacloud.core.config.settings import settings


@dataclass(frozen=True)
class WhatsAppRequest:
    """A fully assembled outbound request.

    `body` is None for requests without a body; otherwise it is sent verbatim.
    """

    method: str
    url: str
    headers: Mapping[str, str] = field(default_factory=dict)
    body: bytes | None = None


@runtime_checkable
class TransportResponse(Protocol):
    """Response handle returned by a transport.

    `read` returns None when the response carries no body at all. `release`
    frees the underlying connection and must tolerate repeated calls.
    `headers.items()` yields one pair per value, so repeated headers such as
    Set-Cookie come through as several pairs (aiohttp's CIMultiDictProxy does).
    """

    status: int
    headers: Mapping[str, str]

    async def read(self) -> bytes | None: ...

    def release(self) -> None: ...


@runtime_checkable
class HTTPTransport(Protocol):
    """Anything that can execute a WhatsAppRequest."""

    async def execute(self, request: WhatsAppRequest) -> TransportResponse: ...


class AiohttpTransportResponse:
    """TransportResponse backed by an aiohttp.ClientResponse."""

    def __init__(self, response: aiohttp.ClientResponse):
        self._response = response
        self._released = False

    @property
    def status(self) -> int:
        return self._response.status

    @property
    def headers(self) -> Mapping[str, str]:
        return self._response.headers

    async def read(self) -> bytes | None:
        return await self._response.read()

    def release(self) -> None:
        if self._released:
            return
        self._released = True
        self._response.release()


class AiohttpTransport:
    """HTTPTransport over a persistent aiohttp session.

    The session is injected and owned by the caller; this class never closes it.
    """

    def __init__(
        self,
        session: aiohttp.ClientSession,
        timeout: aiohttp.ClientTimeout | None = None,
    ):
        self.session = session
        self.timeout = timeout or aiohttp.ClientTimeout(total=settings.request_timeout)

    async def execute(self, request: WhatsAppRequest) -> AiohttpTransportResponse:
        # The URL is already percent-encoded by the request builder
        response = await self.session.request(
            request.method,
            URL(request.url, encoded=True),
            headers=dict(request.headers),
            data=request.body,
            timeout=self.timeout,
        )
        return AiohttpTransportResponse(response)
