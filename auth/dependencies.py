"""
FastAPI dependencies for authentication.

Provides the configured ``PasswordHasher`` / ``TokenIssuer`` and the
``get_current_user_id`` dependency used across all protected routes.
"""

from __future__ import annotations

import logging
from functools import lru_cache

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from auth.jwt import InvalidTokenError, TokenIssuer, user_id_from_claims
from auth.password import PasswordHasher
from config.settings import config

logger = logging.getLogger(__name__)

_bearer_scheme = HTTPBearer()


@lru_cache
def get_token_issuer() -> TokenIssuer:
    return TokenIssuer(config.token_settings())


@lru_cache
def get_password_hasher() -> PasswordHasher:
    return PasswordHasher(rounds=config.bcrypt_rounds)


async def get_current_user_id(
    credentials: HTTPAuthorizationCredentials = Depends(_bearer_scheme),
    tokens: TokenIssuer = Depends(get_token_issuer),
) -> int:
    """
    Extract and verify the Bearer token, returning the authenticated
    ``user_id``.
    """
    try:
        claims = tokens.verify(credentials.credentials)
        return user_id_from_claims(claims)
    except InvalidTokenError as exc:
        logger.debug("Rejected bearer token: %s", exc)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Invalid or expired token: {exc}",
            headers={"WWW-Authenticate": "Bearer"},
        )
