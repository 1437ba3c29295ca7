"""
Shared fixtures: an in-memory ``UserStore`` and a fully wired ``AuthService``.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional

import pytest

from auth.jwt import TokenIssuer, TokenSettings
from auth.password import PasswordHasher
from core.auth_service import AuthService
from core.store import DuplicateIdentityError, ProfileRecords, UserStore
from database.models import User, UserIntroduction, UserRights, UserWallet


class InMemoryUserStore(UserStore):
    def __init__(self):
        self.users: Dict[int, User] = {}
        self.introductions: Dict[int, UserIntroduction] = {}
        self.rights: Dict[int, UserRights] = {}
        self.wallets: Dict[int, UserWallet] = {}
        self._next_id = 1

    async def find_by_account(self, account: str) -> Optional[User]:
        return next((u for u in self.users.values() if u.account == account), None)

    async def find_by_email(self, email: str) -> Optional[User]:
        return next((u for u in self.users.values() if u.email.lower() == email.lower()), None)

    async def find_by_id(self, user_id: int) -> Optional[User]:
        return self.users.get(user_id)

    async def find_profile_records(self, user_id: int) -> Optional[ProfileRecords]:
        user = self.users.get(user_id)
        if user is None:
            return None
        return ProfileRecords(
            user=user,
            introduction=self.introductions.get(user_id),
            rights=self.rights.get(user_id),
            wallet=self.wallets.get(user_id),
        )

    async def exists_by_account(self, account: str) -> bool:
        return await self.find_by_account(account) is not None

    async def exists_by_username(self, user_name: str) -> bool:
        return any(u.user_name == user_name for u in self.users.values())

    async def exists_by_email(self, email: str) -> bool:
        return await self.find_by_email(email) is not None

    async def insert(self, user, *, introduction=None, rights=None, wallet=None) -> int:
        if await self.exists_by_account(user.account):
            raise DuplicateIdentityError("account")
        user_id = self._next_id
        self._next_id += 1
        user.user_id = user_id
        self.users[user_id] = user
        for table, record in (
            (self.introductions, introduction),
            (self.rights, rights),
            (self.wallets, wallet),
        ):
            if record is not None:
                record.user_id = user_id
                table[user_id] = record
        return user_id

    async def touch_last_login(self, user_id: int, when: datetime) -> None:
        self.users[user_id].last_login_at = when

    async def update_introduction(self, user_id: int, changes: Dict[str, Any]) -> bool:
        if user_id not in self.users:
            return False
        intro = self.introductions.setdefault(user_id, UserIntroduction(user_id=user_id))
        for key, value in changes.items():
            setattr(intro, key, value)
        return True

    def add_bare_user(self, **fields) -> User:
        """Insert a user with no introduction, rights or wallet."""
        user = User(user_id=self._next_id, is_active=True, **fields)
        self.users[user.user_id] = user
        self._next_id += 1
        return user


@pytest.fixture()
def token_settings() -> TokenSettings:
    return TokenSettings(secret="test-secret-key-for-testing-purposes-only-0123456789")


@pytest.fixture()
def token_issuer(token_settings: TokenSettings) -> TokenIssuer:
    return TokenIssuer(token_settings)


@pytest.fixture()
def hasher() -> PasswordHasher:
    # Minimum bcrypt cost keeps the suite fast.
    return PasswordHasher(rounds=4)


@pytest.fixture()
def store() -> InMemoryUserStore:
    return InMemoryUserStore()


@pytest.fixture()
def auth_service(store, hasher, token_issuer) -> AuthService:
    return AuthService(store, hasher, token_issuer)


@pytest.fixture()
def register_payload() -> Dict[str, Any]:
    return {
        "user_name": "Test User",
        "account": "testuser",
        "email": "test@example.com",
        "password": "password123",
        "confirm_password": "password123",
        "gender": "M",
        "id_number": "A123456789",
        "cellphone": "0912345678",
        "address": "123 Test Road",
        "date_of_birth": "1990-01-01",
        "introduction": "This is a test user",
    }
