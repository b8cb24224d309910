from __future__ import annotations

from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from helpdesk_bridge.db.models import User
from helpdesk_bridge.utils.time_utils import utc_now


class UserRepo:
    """Repository for host account lookups."""

    def __init__(self, db: AsyncSession) -> None:
        self._db = db

    async def create_user(self, user_id: str, email: str, name: Optional[str] = None) -> User:
        """Persist a new account and return it."""

        user = User(id=user_id, email=email, name=name, created_at=utc_now())
        self._db.add(user)
        await self._db.flush()
        return user

    async def get_by_email(self, email: str) -> Optional[User]:
        """Fetch an account by exact email."""

        if not email:
            return None
        result = await self._db.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()

    async def exists(self, email: str) -> bool:
        return await self.get_by_email(email) is not None
