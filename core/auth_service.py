"""
Auth orchestrator: registration, login, token refresh and profile access.

All collaborators are injected: a ``UserStore`` for persistence, a
``PasswordHasher`` and a ``TokenIssuer`` already configured with their
secrets.  Expected failures come back as result models; storage errors
propagate to the caller unchanged.

Login has no rate limiting or lockout, and logout does not revoke tokens.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone
from typing import Optional

from auth.jwt import REFRESH_TOKEN, InvalidTokenError, TokenIssuer, user_id_from_claims
from auth.password import PasswordHasher
from core.profile import ProfileAggregator
from core.store import DuplicateIdentityError, UserStore
from database.models import User, UserIntroduction, UserRights, UserWallet
from utils.schemas import (
    AuthError,
    LoginResult,
    RegisterRequest,
    RegisterResult,
    UpdateProfileRequest,
    UserProfile,
)

logger = logging.getLogger(__name__)

_FIELD_MESSAGES = {
    "account": "Account already exists",
    "user_name": "User name already exists",
    "email": "Email already registered",
}
_INVALID_CREDENTIALS = "Invalid account or password"


class AuthService:
    def __init__(self, store: UserStore, hasher: PasswordHasher, tokens: TokenIssuer):
        self._store = store
        self._hasher = hasher
        self._tokens = tokens
        self._profiles = ProfileAggregator(store)

    # ── Register ────────────────────────────────────────────────────────

    async def register(self, req: RegisterRequest) -> RegisterResult:
        account = req.account.strip()
        user_name = req.user_name.strip()
        email = req.email.strip().lower()
        logger.info("Registering account %s", account)

        field = await self._find_collision(account, user_name, email)
        if field is not None:
            logger.warning("Registration rejected: %s already taken (%s)", field, account)
            return _duplicate(field)

        password_hash = await asyncio.to_thread(self._hasher.hash, req.password)
        now = datetime.now(timezone.utc)
        user = User(
            user_name=user_name,
            account=account,
            email=email,
            password_hash=password_hash,
            created_at=now,
            is_active=True,
            is_email_verified=False,
        )
        introduction = UserIntroduction(
            nickname=user_name,
            gender=req.gender,
            id_number=req.id_number,
            cellphone=req.cellphone,
            email=email,
            address=req.address,
            date_of_birth=req.date_of_birth,
            bio=req.introduction or "",
            created_at=now,
        )
        rights = UserRights(
            user_status=True,
            shopping_permission=True,
            message_permission=True,
            sales_authority=False,
            updated_at=now,
        )
        wallet = UserWallet(points=0, updated_at=now)

        try:
            user_id = await self._store.insert(
                user, introduction=introduction, rights=rights, wallet=wallet,
            )
        except DuplicateIdentityError as exc:
            # Lost a race with a concurrent registration for the same identity.
            logger.warning("Registration rejected at insert: %s already taken", exc.field)
            return _duplicate(exc.field)

        logger.info("Registered user %s (%s)", user_id, account)
        return RegisterResult(success=True, message="Registration successful", user_id=user_id)

    async def _find_collision(self, account: str, user_name: str, email: str) -> Optional[str]:
        if await self._store.exists_by_account(account):
            return "account"
        if await self._store.exists_by_username(user_name):
            return "user_name"
        if await self._store.exists_by_email(email):
            return "email"
        return None

    # ── Login ───────────────────────────────────────────────────────────

    async def login(self, account_or_email: str, password: str) -> LoginResult:
        identifier = account_or_email.strip()
        logger.info("Login attempt for %s", identifier)

        user = await self._store.find_by_account(identifier)
        if user is None:
            user = await self._store.find_by_email(identifier)

        if not await asyncio.to_thread(self._check_password, password, user):
            logger.warning("Login failed for %s", identifier)
            return LoginResult(
                success=False,
                message=_INVALID_CREDENTIALS,
                error=AuthError.INVALID_CREDENTIALS,
            )

        if user.is_active is False:
            logger.warning("Login refused for disabled user %s", user.user_id)
            return LoginResult(
                success=False,
                message="Account is disabled",
                error=AuthError.ACCOUNT_DISABLED,
            )

        await self._store.touch_last_login(user.user_id, datetime.now(timezone.utc))
        logger.info("Login: %s (%s)", user.account, user.user_id)
        return self._issue_pair(user, "Login successful")

    # ── Refresh / logout ────────────────────────────────────────────────

    async def refresh(self, refresh_token: str) -> LoginResult:
        try:
            claims = self._tokens.verify(refresh_token, token_type=REFRESH_TOKEN)
            user_id = user_id_from_claims(claims)
        except InvalidTokenError as exc:
            logger.info("Refresh rejected: %s", exc)
            return _invalid_token()

        user = await self._store.find_by_id(user_id)
        if user is None or user.is_active is False:
            logger.info("Refresh rejected: user %s missing or disabled", user_id)
            return _invalid_token()

        return self._issue_pair(user, "Token refreshed")

    async def logout(self, user_id: int) -> bool:
        logger.info("Logout: user %s", user_id)
        return True

    # ── Profile ─────────────────────────────────────────────────────────

    async def get_user_profile(self, user_id: int) -> Optional[UserProfile]:
        return await self._profiles.get_user_profile(user_id)

    async def update_profile(
        self, user_id: int, changes: UpdateProfileRequest,
    ) -> Optional[UserProfile]:
        updated = await self._store.update_introduction(
            user_id, changes.model_dump(exclude_unset=True),
        )
        if not updated:
            return None
        logger.info("Updated profile for user %s", user_id)
        return await self._profiles.get_user_profile(user_id)

    # ── Helpers ─────────────────────────────────────────────────────────

    def _check_password(self, password: str, user: Optional[User]) -> bool:
        # Unknown users are checked against a dummy hash: one bcrypt run per login either way.
        password_hash = user.password_hash if user is not None else self._hasher.dummy_hash
        verified = self._hasher.verify(password, password_hash)
        return verified and user is not None

    def _issue_pair(self, user: User, message: str) -> LoginResult:
        access = self._tokens.issue_access_token(user.user_id, user.account)
        refresh = self._tokens.issue_refresh_token(user.user_id, user.account)
        return LoginResult(
            success=True,
            message=message,
            user_id=user.user_id,
            token=access.token,
            refresh_token=refresh.token,
            expires_at=access.expires_at,
        )


def _duplicate(field: str) -> RegisterResult:
    return RegisterResult(
        success=False,
        message=_FIELD_MESSAGES.get(field, f"{field} already exists"),
        error=AuthError.DUPLICATE_IDENTITY,
        field=field,
    )


def _invalid_token() -> LoginResult:
    return LoginResult(
        success=False,
        message="Invalid or expired refresh token",
        error=AuthError.INVALID_TOKEN,
    )
