"""
Abstract credential store used by the auth orchestrator.

The SQL implementation lives in ``database/repository.py``; anything that
persists users, password digests and the one-to-one profile records can
implement this interface.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional

from database.models import User, UserIntroduction, UserRights, UserWallet


class DuplicateIdentityError(Exception):
    """A unique identity field (account, user_name, email) is already taken."""

    def __init__(self, field: str):
        super().__init__(f"{field} already exists")
        self.field = field


@dataclass
class ProfileRecords:
    """A user plus its optional related records; any of the three may be None."""

    user: User
    introduction: Optional[UserIntroduction] = None
    rights: Optional[UserRights] = None
    wallet: Optional[UserWallet] = None


class UserStore(ABC):
    """Abstract base for credential stores."""

    # ── Lookups ─────────────────────────────────────────────────────────

    @abstractmethod
    async def find_by_account(self, account: str) -> Optional[User]:
        ...

    @abstractmethod
    async def find_by_email(self, email: str) -> Optional[User]:
        """Case-insensitive email lookup."""
        ...

    @abstractmethod
    async def find_by_id(self, user_id: int) -> Optional[User]:
        ...

    @abstractmethod
    async def find_profile_records(self, user_id: int) -> Optional[ProfileRecords]:
        """Return the user with its introduction, rights and wallet, or None."""
        ...

    # ── Uniqueness ──────────────────────────────────────────────────────

    @abstractmethod
    async def exists_by_account(self, account: str) -> bool:
        ...

    @abstractmethod
    async def exists_by_username(self, user_name: str) -> bool:
        ...

    @abstractmethod
    async def exists_by_email(self, email: str) -> bool:
        ...

    # ── Writes ──────────────────────────────────────────────────────────

    @abstractmethod
    async def insert(
        self,
        user: User,
        *,
        introduction: Optional[UserIntroduction] = None,
        rights: Optional[UserRights] = None,
        wallet: Optional[UserWallet] = None,
    ) -> int:
        """
        Persist a new user and its related records as one unit.

        Returns the assigned ``user_id``.  Raises ``DuplicateIdentityError``
        when a unique constraint rejects the insert; nothing is written in
        that case.
        """
        ...

    @abstractmethod
    async def touch_last_login(self, user_id: int, when: datetime) -> None:
        ...

    @abstractmethod
    async def update_introduction(self, user_id: int, changes: Dict[str, Any]) -> bool:
        """
        Apply ``changes`` to the user's introduction, creating it if absent.

        Returns False when the user does not exist.
        """
        ...
