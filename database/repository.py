"""
SQL-backed credential store.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from core.store import DuplicateIdentityError, ProfileRecords, UserStore
from database.models import User, UserIntroduction, UserRights, UserWallet

logger = logging.getLogger(__name__)


class SqlUserStore(UserStore):
    """``UserStore`` over an ``AsyncSession``; the caller owns commit/rollback."""

    def __init__(self, session: AsyncSession):
        self._session = session

    async def _first(self, stmt) -> Optional[User]:
        result = await self._session.execute(stmt.limit(1))
        return result.scalar_one_or_none()

    async def _exists(self, *criteria) -> bool:
        result = await self._session.execute(select(User.user_id).where(*criteria).limit(1))
        return result.scalar_one_or_none() is not None

    # ── Lookups ─────────────────────────────────────────────────────────

    async def find_by_account(self, account: str) -> Optional[User]:
        return await self._first(select(User).where(User.account == account))

    async def find_by_email(self, email: str) -> Optional[User]:
        return await self._first(select(User).where(func.lower(User.email) == email.lower()))

    async def find_by_id(self, user_id: int) -> Optional[User]:
        return await self._session.get(User, user_id)

    async def find_profile_records(self, user_id: int) -> Optional[ProfileRecords]:
        result = await self._session.execute(
            select(User)
            .where(User.user_id == user_id)
            .options(
                selectinload(User.introduction),
                selectinload(User.rights),
                selectinload(User.wallet),
            )
        )
        user = result.scalar_one_or_none()
        if user is None:
            return None
        return ProfileRecords(
            user=user,
            introduction=user.introduction,
            rights=user.rights,
            wallet=user.wallet,
        )

    # ── Uniqueness ──────────────────────────────────────────────────────

    async def exists_by_account(self, account: str) -> bool:
        return await self._exists(User.account == account)

    async def exists_by_username(self, user_name: str) -> bool:
        return await self._exists(User.user_name == user_name)

    async def exists_by_email(self, email: str) -> bool:
        return await self._exists(func.lower(User.email) == email.lower())

    # ── Writes ──────────────────────────────────────────────────────────

    async def insert(
        self,
        user: User,
        *,
        introduction: Optional[UserIntroduction] = None,
        rights: Optional[UserRights] = None,
        wallet: Optional[UserWallet] = None,
    ) -> int:
        identity = (user.account, user.user_name, user.email)
        user.introduction = introduction
        user.rights = rights
        user.wallet = wallet
        try:
            # Savepoint: a rejected insert must not discard earlier work in the transaction.
            async with self._session.begin_nested():
                self._session.add(user)
                await self._session.flush()
        except IntegrityError as exc:
            field = await self._colliding_field(*identity)
            logger.warning("Insert rejected by unique constraint on %s: %s", field, exc.orig)
            raise DuplicateIdentityError(field) from exc
        return user.user_id

    async def _colliding_field(self, account: str, user_name: str, email: str) -> str:
        # Constraint names differ per dialect; re-query to find the field.
        if await self.exists_by_account(account):
            return "account"
        if await self.exists_by_username(user_name):
            return "user_name"
        if await self.exists_by_email(email):
            return "email"
        return "account"

    async def touch_last_login(self, user_id: int, when: datetime) -> None:
        await self._session.execute(
            update(User).where(User.user_id == user_id).values(last_login_at=when)
        )
        await self._session.flush()

    async def update_introduction(self, user_id: int, changes: Dict[str, Any]) -> bool:
        records = await self.find_profile_records(user_id)
        if records is None:
            return False

        intro = records.introduction
        if intro is None:
            intro = UserIntroduction(user_id=user_id, email=records.user.email)
            records.user.introduction = intro
        for key, value in changes.items():
            setattr(intro, key, value)
        intro.updated_at = datetime.now(timezone.utc)
        await self._session.flush()
        return True
