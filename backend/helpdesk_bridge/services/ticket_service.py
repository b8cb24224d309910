from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Protocol

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from helpdesk_bridge.core.security import is_valid_email
from helpdesk_bridge.helpdesk.base import BridgeResult
from helpdesk_bridge.repos.user_repo import UserRepo

logger = logging.getLogger("helpdesk_bridge.tickets")

MISSING_FIELDS_ERROR = "Please fill in all required fields."
CHECK_EMAIL_ERROR = "Please check your email address and try again."
TICKET_FAILED_ERROR = "Sorry, we couldn't create your support ticket. Please try again."
UNAVAILABLE_ERROR = "Sorry, the support service is unavailable. Please try again later."


@dataclass(frozen=True)
class TicketOutcome:
    """Externally visible result of a ticket-creation attempt."""

    success: bool
    ticket_id: Optional[str] = None
    conversation_slug: Optional[str] = None
    error: Optional[str] = None

    @classmethod
    def failure(cls, error: str) -> "TicketOutcome":
        return cls(success=False, error=error)


class ConversationBridge(Protocol):
    async def create_conversation_for_unauthenticated_user(
        self, email: str, subject: str, message: str
    ) -> BridgeResult:
        """Create a conversation with an initial message."""


class SupportTicketService:
    """Create helpdesk tickets on behalf of known accounts."""

    def __init__(
        self,
        sessionmaker: async_sessionmaker[AsyncSession],
        bridge: ConversationBridge,
    ) -> None:
        self._sessionmaker = sessionmaker
        self._bridge = bridge

    async def create(self, email: str, subject: str, message: str) -> TicketOutcome:
        """Validate the requester and open a conversation upstream.

        Validation and account checks run before any network call. Unknown
        and malformed emails get the same response so the endpoint cannot be
        used to probe which addresses are registered.
        """

        email = (email or "").strip()
        subject = (subject or "").strip()
        message = (message or "").strip()

        if not email or not subject or not message:
            return TicketOutcome.failure(MISSING_FIELDS_ERROR)
        if not is_valid_email(email):
            return TicketOutcome.failure(CHECK_EMAIL_ERROR)

        try:
            if not await self._account_exists(email):
                return TicketOutcome.failure(CHECK_EMAIL_ERROR)
            result = await self._bridge.create_conversation_for_unauthenticated_user(
                email=email, subject=subject, message=message
            )
        except Exception:  # noqa: BLE001
            logger.exception("Error creating public support ticket")
            return TicketOutcome.failure(UNAVAILABLE_ERROR)

        if result.success:
            logger.info("Public support ticket created: %s", result.conversation_slug)
            return TicketOutcome(
                success=True,
                ticket_id=result.conversation_slug,
                conversation_slug=result.conversation_slug,
            )

        if result.is_partial:
            logger.error(
                "Support ticket partially created: conversation %s has no message (%s)",
                result.conversation_slug,
                result.error,
            )
        else:
            logger.error("Failed to create public support ticket: %s", result.error)
        return TicketOutcome.failure(TICKET_FAILED_ERROR)

    async def _account_exists(self, email: str) -> bool:
        async with self._sessionmaker() as db:
            return await UserRepo(db).exists(email)


def get_ticket_service(request: Request) -> SupportTicketService:
    """Dependency to access the ticket service from app state."""

    return request.app.state.ticket_service
