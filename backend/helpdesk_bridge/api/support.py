from __future__ import annotations

from typing import Optional
from urllib.parse import quote

from fastapi import APIRouter, Depends

from helpdesk_bridge.core.security import sanitize_text
from helpdesk_bridge.schemas.support import (
    CustomerInfoResponse,
    TicketConfirmationResponse,
    TicketCreateRequest,
    TicketCreateResponse,
)
from helpdesk_bridge.services.customer_info_service import (
    CustomerInfoService,
    get_customer_info_service,
)
from helpdesk_bridge.services.ticket_service import SupportTicketService, get_ticket_service

router = APIRouter(prefix="/api/support", tags=["support"])

MAX_EMAIL_LEN = 254
MAX_SUBJECT_LEN = 200
MAX_MESSAGE_LEN = 10000
EXPECTED_RESPONSE_TIME = "24 hours"


@router.post("/tickets", response_model=TicketCreateResponse)
async def create_ticket(
    payload: TicketCreateRequest,
    ticket_service: SupportTicketService = Depends(get_ticket_service),
) -> TicketCreateResponse:
    """Open a helpdesk conversation for a known account.

    CAPTCHA verification and rate limiting happen in front of this route.
    """

    outcome = await ticket_service.create(
        email=sanitize_text(payload.email or "", MAX_EMAIL_LEN),
        subject=sanitize_text(payload.subject or "", MAX_SUBJECT_LEN),
        message=sanitize_text(payload.message or "", MAX_MESSAGE_LEN),
    )
    if not outcome.success or not outcome.ticket_id:
        return TicketCreateResponse(success=False, error_message=outcome.error)
    return TicketCreateResponse(
        success=True,
        ticket_id=outcome.ticket_id,
        redirect_url=f"{router.prefix}/tickets/{quote(outcome.ticket_id, safe='')}/confirmation",
    )


@router.get("/tickets/{ticket_id}/confirmation", response_model=TicketConfirmationResponse)
async def ticket_confirmation(ticket_id: str) -> TicketConfirmationResponse:
    return TicketConfirmationResponse(
        title="Support Ticket Submitted",
        ticket_id=ticket_id,
        expected_response_time=EXPECTED_RESPONSE_TIME,
        description="Your support ticket has been submitted successfully",
    )


@router.get("/customer-info", response_model=CustomerInfoResponse)
async def customer_info(
    email: Optional[str] = None,
    customer_info_service: CustomerInfoService = Depends(get_customer_info_service),
) -> CustomerInfoResponse:
    """Serve customer details to the helpdesk; unknown emails get an empty record."""

    info = await customer_info_service.customer_info(email)
    return CustomerInfoResponse(**info)
