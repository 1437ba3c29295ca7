"""
Profile aggregation: flatten a user and its optional records into one view.
"""

from __future__ import annotations

import logging
from typing import Optional

from core.store import ProfileRecords, UserStore
from utils.schemas import UserProfile

logger = logging.getLogger(__name__)


def build_profile(records: ProfileRecords) -> UserProfile:
    """
    Merge ``records`` into a ``UserProfile``.

    Absent related records are a normal state for new or partially
    provisioned accounts: strings fall back to ``""``, permissions to
    ``False`` and the balance to ``0``.
    """
    user = records.user
    intro = records.introduction
    rights = records.rights
    wallet = records.wallet

    return UserProfile(
        user_id=user.user_id,
        user_name=user.user_name,
        account=user.account,
        email=user.email,
        created_at=user.created_at,
        last_login_at=user.last_login_at,
        is_active=bool(user.is_active) if user.is_active is not None else True,
        is_email_verified=bool(user.is_email_verified),
        nickname=(intro.nickname or "") if intro else "",
        gender=(intro.gender or "") if intro else "",
        cellphone=(intro.cellphone or "") if intro else "",
        address=(intro.address or "") if intro else "",
        date_of_birth=intro.date_of_birth if intro else None,
        bio=(intro.bio or "") if intro else "",
        user_status=bool(rights.user_status) if rights else False,
        shopping_permission=bool(rights.shopping_permission) if rights else False,
        message_permission=bool(rights.message_permission) if rights else False,
        sales_authority=bool(rights.sales_authority) if rights else False,
        points=(wallet.points or 0) if wallet else 0,
    )


class ProfileAggregator:
    def __init__(self, store: UserStore):
        self._store = store

    async def get_user_profile(self, user_id: int) -> Optional[UserProfile]:
        """Return the aggregated profile, or None for an unknown user."""
        records = await self._store.find_profile_records(user_id)
        if records is None:
            logger.info("Profile requested for unknown user %s", user_id)
            return None
        return build_profile(records)
