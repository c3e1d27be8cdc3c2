"""
WhatsApp error handling utilities.

Defines the exceptions raised while building, dispatching and decoding Cloud
API calls, and the helper that turns any of them into a MessageResult for the
messenger facade.

Error kinds:
- RequestConstructionError: parameters or payload could not form a request
- EmptyResponseBodyError: the transport returned a response without a body
- ResponseDecodeError: a body was present but did not decode
- WhatsAppAPIError: non-200 status with a decoded error body

Transport failures (aiohttp.ClientError, TimeoutError, cancellation) are not
wrapped; they reach the caller unchanged.
"""

import asyncio

import aiohttp

from wacloud.core.logging.logger import ContextLogger
from wacloud.messaging.whatsapp.models.basic_models import MessageResult, SendOutcome
from wacloud.messaging.whatsapp.models.response_models import ErrorResponse

# Graph API code for an expired or invalid access token
ERROR_CODE_INVALID_TOKEN = 190


class WhatsAppError(Exception):
    """Base exception for failures raised by this package."""

    def __init__(self, message: str, step: str):
        self.message = message
        self.step = step
        super().__init__(message)


class RequestConstructionError(WhatsAppError):
    """Raised when request parameters or payload cannot form a request."""

    def __init__(self, message: str, step: str = "build request"):
        super().__init__(message, step)


class ReplyOptionsError(RequestConstructionError):
    """Raised when reply is called without options."""

    def __init__(self):
        super().__init__("options cannot be None", step="build reply")


class EmptyResponseBodyError(WhatsAppError):
    """Raised when a response arrives with no body at all."""

    def __init__(self, status_code: int):
        self.status_code = status_code
        super().__init__("empty response body", step="read response")


class ResponseDecodeError(WhatsAppError):
    """Raised when a response body cannot be decoded into the expected shape."""

    def __init__(self, status_code: int, body: bytes, expected: str):
        self.status_code = status_code
        self.body = body
        self.expected = expected
        super().__init__(
            f"failed to decode {expected} from HTTP {status_code} response body",
            step="decode response",
        )


class WhatsAppAPIError(WhatsAppError):
    """Structured API error: non-200 status with a decoded error body."""

    def __init__(self, response: ErrorResponse):
        self.response = response
        api_message = response.error.message if response.error else None
        super().__init__(
            f"WhatsApp API error (HTTP {response.code}): {api_message or 'no message'}",
            step="api",
        )

    @property
    def code(self) -> int:
        """HTTP status of the exchange."""
        return self.response.code

    @property
    def error_code(self) -> int | None:
        """Graph API error code from the body."""
        return self.response.error.code if self.response.error else None

    @property
    def error_subcode(self) -> int | None:
        return self.response.error.error_subcode if self.response.error else None

    @property
    def fbtrace_id(self) -> str | None:
        return self.response.error.fbtrace_id if self.response.error else None

    @property
    def details(self) -> str | None:
        error = self.response.error
        if error and error.error_data:
            return error.error_data.details
        return None


TRANSPORT_ERRORS = (aiohttp.ClientError, asyncio.TimeoutError, OSError)


def is_authentication_error(error: Exception) -> bool:
    """Check if an exception indicates an authentication failure.

    Args:
        error: The exception to check

    Returns:
        True for HTTP 401 or the Graph API invalid-token code
    """
    if isinstance(error, WhatsAppAPIError):
        return error.code == 401 or error.error_code == ERROR_CODE_INVALID_TOKEN
    if isinstance(error, aiohttp.ClientResponseError):
        return error.status == 401
    return False


def handle_whatsapp_error(
    error: Exception,
    operation: str,
    recipient: str | None,
    tenant_id: str,
    logger: ContextLogger,
) -> MessageResult:
    """Turn a failed call into a MessageResult with consistent logging.

    Args:
        error: The exception raised by the call
        operation: Description of the operation that failed (e.g., "send text message")
        recipient: The recipient identifier, None for calls without one
        tenant_id: Sender phone_number_id for logging context
        logger: Logger instance for error logging

    Returns:
        MessageResult describing the failure

    Raises:
        The original error when it is none of the known kinds
    """
    if is_authentication_error(error):
        logger.error(f"CRITICAL: WhatsApp Authentication Failed - Cannot {operation}!")
        logger.error(f"Check WhatsApp access token for tenant {tenant_id}")

    target = f"{operation} to {recipient}" if recipient else operation

    result = MessageResult(
        outcome=SendOutcome.TRANSPORT_ERROR,
        recipient=recipient,
        error=str(error),
        tenant_id=tenant_id,
    )

    if isinstance(error, WhatsAppAPIError):
        logger.warning(f"Failed to {target}: {error.response.details}")
        return result.model_copy(
            update={
                "outcome": SendOutcome.API_ERROR,
                "status_code": error.code,
                "error_code": error.error_code,
                "error_response": error.response,
            }
        )
    if isinstance(error, ResponseDecodeError):
        logger.error(f"Failed to {target}: {error}")
        return result.model_copy(
            update={"outcome": SendOutcome.DECODE_ERROR, "status_code": error.status_code}
        )
    if isinstance(error, EmptyResponseBodyError):
        logger.error(f"Failed to {target}: {error}")
        return result.model_copy(
            update={"outcome": SendOutcome.EMPTY_BODY, "status_code": error.status_code}
        )
    if isinstance(error, RequestConstructionError):
        logger.error(f"Failed to {target}: {error}")
        return result.model_copy(update={"outcome": SendOutcome.REQUEST_ERROR})
    if isinstance(error, TRANSPORT_ERRORS):
        logger.error(f"Failed to {target}: {error!r}")
        return result

    raise error
