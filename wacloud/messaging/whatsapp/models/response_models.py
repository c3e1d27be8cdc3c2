"""
WhatsApp Cloud API response models.

Success bodies decode into ResponseMessage; any non-200 body decodes into
ErrorResponse, whose `code` is replaced by the HTTP status actually observed.

Example success body:

    {
      "messaging_product": "whatsapp",
      "contacts": [{"input": "PHONE_NUMBER", "wa_id": "WHATSAPP_ID"}],
      "messages": [{"id": "wamid.ID"}]
    }

Example error body:

    {
      "error": {
        "message": "(#131030) Recipient phone number not in allowed list",
        "type": "OAuthException",
        "code": 131030,
        "error_data": {"messaging_product": "whatsapp", "details": "..."},
        "fbtrace_id": "Az8or2yhqkZfEZ-_4Qn_Bam"
      }
    }
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ResponseContact(BaseModel):
    """Recipient echo returned for every accepted message."""

    model_config = ConfigDict(extra="allow", frozen=True)

    input: str | None = Field(None, description="Recipient as supplied in the request")
    wa_id: str | None = Field(None, description="Resolved WhatsApp ID")


class ResponseMessageId(BaseModel):
    """Identifier of an accepted message (prefixed with `wamid.`)."""

    model_config = ConfigDict(extra="allow", frozen=True)

    id: str
    message_status: str | None = None


class ResponseMessage(BaseModel):
    """Body of a successful send."""

    model_config = ConfigDict(extra="allow", frozen=True)

    messaging_product: str | None = None
    contacts: list[ResponseContact] = Field(default_factory=list)
    messages: list[ResponseMessageId] = Field(default_factory=list)
    success: bool | None = None  # Returned by status updates such as mark-as-read

    @property
    def message_ids(self) -> list[str]:
        return [message.id for message in self.messages]


class Response(BaseModel):
    """Decoded result of an HTTP 200 exchange.

    `headers` keeps every value of a repeated header, keyed by canonical name.
    """

    model_config = ConfigDict(frozen=True)

    status_code: int
    headers: dict[str, list[str]] = Field(default_factory=dict)
    message: ResponseMessage

    def get_header(self, name: str) -> str | None:
        """First value of a header, matched case-insensitively."""
        name = name.lower()
        for key, values in self.headers.items():
            if key.lower() == name and values:
                return values[0]
        return None

    @property
    def message_id(self) -> str | None:
        """First message identifier, if the API returned one."""
        ids = self.message.message_ids
        return ids[0] if ids else None


class ErrorData(BaseModel):
    model_config = ConfigDict(extra="allow", frozen=True)

    messaging_product: str | None = None
    details: str | None = None


class GraphError(BaseModel):
    """The `error` object of a Graph API error body."""

    model_config = ConfigDict(extra="allow", frozen=True)

    message: str | None = None
    type: str | None = None
    code: int | None = None
    error_subcode: int | None = None
    error_user_title: str | None = None
    error_user_msg: str | None = None
    error_data: ErrorData | None = None
    fbtrace_id: str | None = None


class ErrorResponse(BaseModel):
    """Decoded body of any non-200 exchange.

    `code` is always the HTTP status of the exchange; the API's own numeric
    code stays available as `error.code`.
    """

    model_config = ConfigDict(extra="allow", frozen=True)

    code: int = 0
    error: GraphError | None = None

    def with_status(self, status_code: int) -> "ErrorResponse":
        return self.model_copy(update={"code": status_code})

    @property
    def details(self) -> dict[str, Any]:
        """Flattened error fields for logging and result objects."""
        error = self.error
        return {
            "code": self.code,
            "message": error.message if error else None,
            "type": error.type if error else None,
            "error_code": error.code if error else None,
            "error_subcode": error.error_subcode if error else None,
            "fbtrace_id": error.fbtrace_id if error else None,
            "details": error.error_data.details if error and error.error_data else None,
        }
