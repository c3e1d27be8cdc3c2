"""
WhatsApp Cloud API request building and dispatch.

Key Design Decisions:
- One call is exactly one HTTP exchange: no retries, no rate limiting
- The transport is injected; this module never opens connections itself
- Status 200 decodes into Response, anything else into a WhatsAppAPIError
  carrying the decoded body and the real HTTP status
"""

import posixpath
import re
from urllib.parse import parse_qsl, quote, urlencode, urlsplit, urlunsplit

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from wacloud.core.config.settings import Settings, settings
from wacloud.core.logging.logger import get_logger
from wacloud.messaging.whatsapp.client.transport import HTTPTransport, WhatsAppRequest
from wacloud.messaging.whatsapp.models.response_models import (
    ErrorResponse,
    Response,
    ResponseMessage,
)
from wacloud.messaging.whatsapp.utils.error_helpers import (
    ERROR_CODE_INVALID_TOKEN,
    EmptyResponseBodyError,
    RequestConstructionError,
    ResponseDecodeError,
    WhatsAppAPIError,
)

HTTP_METHODS = frozenset(
    {"GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS", "CONNECT", "TRACE"}
)

# Characters that cannot appear in a path segment once joined
_UNSAFE_SEGMENT_CHARS = re.compile(r"[\x00-\x20\x7f?#\\]")
# A "%" must start a complete escape; valid escapes pass through as-is
_BROKEN_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")
_PATH_SAFE_CHARS = "%!$&'()*+,;=:@-._~"

logger = get_logger(__name__)


class RequestParams(BaseModel):
    """Per-call endpoint parameters.

    URL shape: {base_url}/{api_version}/{sender_id}/{endpoint}?{query}
    """

    model_config = ConfigDict(frozen=True)

    base_url: str = Field(..., min_length=1, description="Graph API base URL")
    api_version: str = Field(..., min_length=1, description="Graph API version")
    sender_id: str = Field(..., min_length=1, description="Sender phone_number_id")
    endpoint: str = Field(..., min_length=1, description="Endpoint, e.g. 'messages'")
    method: str = "POST"
    headers: dict[str, str] = Field(default_factory=dict)
    query: dict[str, str] = Field(default_factory=dict)
    bearer_token: str | None = None

    @field_validator("method")
    @classmethod
    def validate_method(cls, v: str) -> str:
        method = v.upper()
        if method not in HTTP_METHODS:
            raise ValueError(f"'{v}' is not a valid HTTP method")
        return method

    @classmethod
    def from_settings(
        cls,
        endpoint: str = "messages",
        method: str = "POST",
        headers: dict[str, str] | None = None,
        query: dict[str, str] | None = None,
        bearer_token: str | None = None,
        config: Settings | None = None,
    ) -> "RequestParams":
        """Build parameters from environment settings.

        Explicit arguments win over settings. JSON content type is assumed
        unless the caller supplies headers.

        Raises:
            ValueError: If WP_PHONE_ID or WP_ACCESS_TOKEN is not configured
        """
        config = config or settings
        phone_id, access_token = config.require_whatsapp_credentials()
        return cls(
            base_url=config.base_url,
            api_version=config.api_version,
            sender_id=phone_id,
            endpoint=endpoint,
            method=method,
            headers=headers if headers is not None else {"Content-Type": "application/json"},
            query=query or {},
            bearer_token=bearer_token or access_token,
        )


class WhatsAppUrlBuilder:
    """Builds URLs for WhatsApp Business API endpoints.

    Segments are joined with path semantics: redundant slashes collapse,
    "." and ".." resolve, and each piece is percent-encoded. Existing escapes
    such as "%20" are kept; a stray "%" is rejected.
    """

    def __init__(self, base_url: str, api_version: str, sender_id: str):
        """Initialize URL builder with configuration.

        Args:
            base_url: Graph API base URL
            api_version: WhatsApp API version
            sender_id: WhatsApp Business phone number ID

        Raises:
            RequestConstructionError: If base_url is not an absolute http(s) URL
        """
        try:
            parts = urlsplit(base_url)
        except ValueError as e:
            raise RequestConstructionError(f"invalid base URL {base_url!r}: {e}") from e
        if parts.scheme not in ("http", "https") or not parts.netloc:
            raise RequestConstructionError(
                f"invalid base URL {base_url!r}: expected an absolute http(s) URL"
            )
        self._base = parts
        self.api_version = api_version
        self.sender_id = sender_id

    @staticmethod
    def join_path(*segments: str) -> str:
        """Join path segments into a normalized, encoded absolute path."""
        pieces: list[str] = []
        for segment in segments:
            if _UNSAFE_SEGMENT_CHARS.search(segment):
                raise RequestConstructionError(
                    f"failed to join url parts: {segment!r} contains characters "
                    "that are not allowed in a path segment"
                )
            if _BROKEN_ESCAPE.search(segment):
                raise RequestConstructionError(
                    f"failed to join url parts: {segment!r} contains an invalid "
                    "percent-escape"
                )
            pieces.extend(p for p in segment.split("/") if p)

        path = posixpath.normpath("/" + "/".join(pieces))
        if path != "/" and segments and segments[-1].endswith("/"):
            path += "/"
        return quote(path, safe="/" + _PATH_SAFE_CHARS)

    def get_endpoint_url(self, endpoint: str) -> str:
        """Build the URL for an endpoint under the sender.

        Args:
            endpoint: API endpoint path (e.g. "messages")

        Returns:
            Complete URL for the endpoint, keeping any query on the base URL
        """
        path = self.join_path(
            self._base.path, self.api_version, self.sender_id, endpoint
        )
        return urlunsplit(
            (self._base.scheme, self._base.netloc, path, self._base.query, "")
        )

    def get_messages_url(self) -> str:
        """Build URL for sending messages."""
        return self.get_endpoint_url("messages")


def _canonical_header_key(key: str) -> str:
    """Canonical MIME header form: "content-type" -> "Content-Type"."""
    return "-".join(part.capitalize() for part in key.strip().split("-"))


def _collect_headers(headers) -> dict[str, list[str]]:
    """Group header values by canonical key, keeping repeated headers."""
    collected: dict[str, list[str]] = {}
    for key, value in headers.items():
        collected.setdefault(_canonical_header_key(key), []).append(value)
    return collected


def _apply_query(url: str, query: dict[str, str]) -> str:
    parts = urlsplit(url)
    merged = dict(parse_qsl(parts.query, keep_blank_values=True))
    merged.update(query)
    encoded = urlencode(sorted(merged.items()))
    return urlunsplit((parts.scheme, parts.netloc, parts.path, encoded, parts.fragment))


def build_request(params: RequestParams, payload: bytes | None = None) -> WhatsAppRequest:
    """Assemble a transport-ready request.

    Args:
        params: Endpoint parameters for this call
        payload: Raw body bytes, sent verbatim; None sends no body

    Returns:
        WhatsAppRequest with URL, merged headers and body

    Raises:
        RequestConstructionError: If the URL cannot be assembled
    """
    url = WhatsAppUrlBuilder(
        params.base_url, params.api_version, params.sender_id
    ).get_endpoint_url(params.endpoint)

    headers: dict[str, str] = {}
    for key, value in params.headers.items():
        headers[_canonical_header_key(key)] = value

    # Bearer auth always wins over a caller-supplied Authorization header
    if params.bearer_token:
        headers["Authorization"] = f"Bearer {params.bearer_token}"

    if params.query:
        url = _apply_query(url, params.query)

    return WhatsAppRequest(
        method=params.method, url=url, headers=headers, body=payload
    )


async def send(
    transport: HTTPTransport,
    params: RequestParams,
    payload: bytes | None = None,
) -> Response:
    """Execute one request and decode its outcome.

    Args:
        transport: Transport used to execute the request
        params: Endpoint parameters for this call
        payload: Raw request body, or None for no body

    Returns:
        Response for an HTTP 200 with a decodable body

    Raises:
        RequestConstructionError: If the request cannot be assembled
        EmptyResponseBodyError: If the response has no body at all
        ResponseDecodeError: If the body does not decode into the expected shape
        WhatsAppAPIError: For any non-200 status with a decodable error body
        Exception: Transport failures (network, timeout, cancellation), unchanged
    """
    request = build_request(params, payload)
    logger.debug(f"{request.method} {request.url}")

    response = await transport.execute(request)
    try:
        body = await response.read()
    finally:
        response.release()

    status = response.status
    logger.debug(f"{request.method} {request.url} -> HTTP {status}")

    if body is None:
        raise EmptyResponseBodyError(status)

    if status != 200:
        try:
            decoded = ErrorResponse.model_validate_json(body)
        except ValidationError as e:
            raise ResponseDecodeError(status, body, "error response") from e

        error = WhatsAppAPIError(decoded.with_status(status))
        if status == 401 or error.error_code == ERROR_CODE_INVALID_TOKEN:
            logger.error(
                f"WhatsApp access token rejected for sender {params.sender_id}: "
                f"{error.response.details}"
            )
        else:
            logger.warning(f"WhatsApp API error: {error.response.details}")
        raise error

    try:
        message = ResponseMessage.model_validate_json(body)
    except ValidationError as e:
        raise ResponseDecodeError(status, body, "response message") from e

    return Response(
        status_code=status,
        headers=_collect_headers(response.headers),
        message=message,
    )
