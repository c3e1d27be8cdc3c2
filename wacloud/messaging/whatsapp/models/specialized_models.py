"""
WhatsApp location and contact payload models.

Pydantic v2 models for the `location` and `contacts` bodies of outbound
messages, plus the request objects the location and contact builders accept.
Field names match the Cloud API wire format so the models serialize as-is.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Note: contact type fields are free-form strings ("HOME", "WORK", "CELL", ...)
# because the Cloud API accepts any value.


class Location(BaseModel):
    """Geographic location body."""

    model_config = ConfigDict(frozen=True)

    latitude: float = Field(..., ge=-90, le=90, description="Latitude (-90 to 90)")
    longitude: float = Field(
        ..., ge=-180, le=180, description="Longitude (-180 to 180)"
    )
    name: str | None = Field(None, max_length=100, description="Location name")
    address: str | None = Field(None, max_length=1000, description="Location address")


class ContactAddress(BaseModel):
    """Contact address information."""

    street: str | None = None
    city: str | None = None
    state: str | None = None
    zip: str | None = None
    country: str | None = None
    country_code: str | None = Field(None, pattern=r"^[A-Z]{2}$")
    type: str | None = None


class ContactEmail(BaseModel):
    """Contact email information."""

    email: str = Field(..., pattern=r"^[^@]+@[^@]+\.[^@]+$")
    type: str | None = None


class ContactName(BaseModel):
    """Contact name information."""

    formatted_name: str = Field(..., min_length=1, max_length=100)
    first_name: str | None = None
    last_name: str | None = None
    middle_name: str | None = None
    suffix: str | None = None
    prefix: str | None = None

    @field_validator("formatted_name")
    @classmethod
    def validate_formatted_name_required(cls, v):
        """Validate that formatted_name is not blank."""
        if not v.strip():
            raise ValueError("formatted_name is required and cannot be empty")
        return v.strip()


class ContactOrganization(BaseModel):
    """Contact organization information."""

    company: str | None = None
    department: str | None = None
    title: str | None = None


class ContactPhone(BaseModel):
    """Contact phone information."""

    phone: str | None = None
    type: str | None = None
    wa_id: str | None = None


class ContactUrl(BaseModel):
    """Contact URL information."""

    url: str = Field(..., pattern=r"^https?://")
    type: str | None = None


class ContactCard(BaseModel):
    """A single contact as shared in a contacts message."""

    addresses: list[ContactAddress] | None = None
    birthday: str | None = Field(None, pattern=r"^\d{4}-\d{2}-\d{2}$")
    emails: list[ContactEmail] | None = None
    name: ContactName
    org: ContactOrganization | None = None
    phones: list[ContactPhone] | None = None
    urls: list[ContactUrl] | None = None


class SendLocationRequest(BaseModel):
    """Input of the location builder."""

    model_config = ConfigDict(frozen=True)

    recipient: str = Field(..., min_length=1, description="Recipient phone number")
    location: Location


class SendContactRequest(BaseModel):
    """Input of the contact builder."""

    model_config = ConfigDict(frozen=True)

    recipient: str = Field(..., min_length=1, description="Recipient phone number")
    contacts: list[ContactCard] = Field(..., min_length=1)
