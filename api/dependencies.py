"""
FastAPI dependencies (shared across routes).
"""

from __future__ import annotations

from typing import AsyncGenerator

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from auth.dependencies import get_password_hasher, get_token_issuer
from auth.jwt import TokenIssuer
from auth.password import PasswordHasher
from core.auth_service import AuthService
from database.repository import SqlUserStore
from database.session import get_db_session


async def db_session(session: AsyncSession = Depends(get_db_session)) -> AsyncGenerator[AsyncSession, None]:
    """Re-export so routes import from a single place."""
    yield session


async def get_auth_service(
    session: AsyncSession = Depends(db_session),
    hasher: PasswordHasher = Depends(get_password_hasher),
    tokens: TokenIssuer = Depends(get_token_issuer),
) -> AuthService:
    """Build a request-scoped ``AuthService`` over the request's DB session."""
    return AuthService(SqlUserStore(session), hasher, tokens)
