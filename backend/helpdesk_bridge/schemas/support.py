from __future__ import annotations

from typing import Any, Optional

from pydantic import Field, field_validator

from helpdesk_bridge.schemas.common import APIModel


class TicketCreateRequest(APIModel):
    """Payload for opening a public support ticket."""

    email: Optional[str] = Field(default=None)
    subject: Optional[str] = Field(default=None)
    message: Optional[str] = Field(default=None)

    @field_validator("email", "subject", "message", mode="before")
    @classmethod
    def _drop_non_strings(cls, value: Any) -> Optional[str]:
        # Non-string values are treated as missing so they get the normal failure response.
        return value if isinstance(value, str) else None


class TicketCreateResponse(APIModel):
    """Result of a ticket submission; failures share one shape."""

    success: bool
    ticket_id: Optional[str] = Field(default=None)
    redirect_url: Optional[str] = Field(default=None)
    error_message: Optional[str] = Field(default=None)


class TicketConfirmationResponse(APIModel):
    title: str
    ticket_id: str
    expected_response_time: str
    description: str


class CustomerInfoResponse(APIModel):
    """Customer details served to the helpdesk callback."""

    name: Optional[str] = Field(default=None)
    metadata: dict[str, Any] = Field(default_factory=dict)
