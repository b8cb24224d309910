from __future__ import annotations

from typing import Any, Optional

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from helpdesk_bridge.db.session import get_session
from helpdesk_bridge.repos.user_repo import UserRepo
from helpdesk_bridge.utils.time_utils import utc_now

CUSTOMER_INFO_SOURCE = "existing_user_support_ticket"


class CustomerInfoService:
    """Answer the helpdesk's customer-info callback for known accounts."""

    def __init__(self, db: AsyncSession) -> None:
        self._users = UserRepo(db)

    async def customer_info(self, email: Optional[str]) -> dict[str, Any]:
        """Return account details, or an empty record for anything unknown.

        The shape is identical for unknown and empty emails.
        """

        email = (email or "").strip()
        if not email:
            return _empty_info()
        user = await self._users.get_by_email(email)
        if user is None:
            return _empty_info()
        return {
            "name": (user.name or "").strip() or None,
            "metadata": {
                "source": CUSTOMER_INFO_SOURCE,
                "submitted_at": utc_now().isoformat(),
                "user_id": user.id,
                "registered_at": user.created_at.isoformat() if user.created_at else None,
            },
        }


def _empty_info() -> dict[str, Any]:
    return {"name": None, "metadata": {}}


def get_customer_info_service(db: AsyncSession = Depends(get_session)) -> CustomerInfoService:
    """Dependency building a customer info service on the request's DB session."""

    return CustomerInfoService(db)
