"""
JWT creation and verification.

Tokens are HS256-signed JWTs (PyJWT) carrying the user id, account,
issue time and expiry.  Validity is decided by signature, expiry, issuer
and audience only; there is no server-side revocation list.

Signing configuration is passed in as a ``TokenSettings`` instance rather
than read from ``config`` so the issuer can be built per test or per app.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import jwt
from pydantic import BaseModel

ACCESS_TOKEN = "access"
REFRESH_TOKEN = "refresh"


class InvalidTokenError(Exception):
    """Raised when a token fails signature, expiry or claim checks."""


class TokenSettings(BaseModel):
    secret: str
    algorithm: str = "HS256"
    issuer: str = "GameCore"
    audience: str = "GameCore_Users"
    access_token_expiry_minutes: int = 1440
    refresh_token_expiry_days: int = 30


class IssuedToken(BaseModel):
    token: str
    expires_at: datetime


class TokenIssuer:
    def __init__(self, settings: TokenSettings):
        self._settings = settings

    @property
    def access_expiry(self) -> timedelta:
        return timedelta(minutes=self._settings.access_token_expiry_minutes)

    @property
    def refresh_expiry(self) -> timedelta:
        return timedelta(days=self._settings.refresh_token_expiry_days)

    def issue(self, claims: Dict[str, Any], expiry: timedelta) -> IssuedToken:
        """Sign ``claims`` with registered claims added; ``expiry`` is relative to now."""
        now = datetime.now(timezone.utc)
        expires_at = now + expiry
        payload = dict(claims)
        payload.update(
            {
                "jti": uuid.uuid4().hex,
                "iat": now,
                "exp": expires_at,
                "iss": self._settings.issuer,
                "aud": self._settings.audience,
            }
        )
        token = jwt.encode(payload, self._settings.secret, algorithm=self._settings.algorithm)
        return IssuedToken(token=token, expires_at=expires_at)

    def issue_access_token(self, user_id: int, account: str) -> IssuedToken:
        return self.issue(_user_claims(user_id, account, ACCESS_TOKEN), self.access_expiry)

    def issue_refresh_token(self, user_id: int, account: str) -> IssuedToken:
        return self.issue(_user_claims(user_id, account, REFRESH_TOKEN), self.refresh_expiry)

    def verify(self, token: str, *, token_type: Optional[str] = ACCESS_TOKEN) -> Dict[str, Any]:
        """
        Decode and validate ``token``, returning its claims.

        Raises ``InvalidTokenError`` on a bad signature, expiry, issuer,
        audience or an unexpected ``token_type``.
        """
        try:
            claims = jwt.decode(
                token,
                self._settings.secret,
                algorithms=[self._settings.algorithm],
                issuer=self._settings.issuer,
                audience=self._settings.audience,
                options={"require": ["exp", "iat", "sub"]},
            )
        except jwt.ExpiredSignatureError as exc:
            raise InvalidTokenError("token expired") from exc
        except jwt.InvalidTokenError as exc:
            raise InvalidTokenError(str(exc)) from exc

        if token_type is not None and claims.get("token_type") != token_type:
            raise InvalidTokenError(f"expected a {token_type} token")
        return claims


def _user_claims(user_id: int, account: str, token_type: str) -> Dict[str, Any]:
    return {
        "sub": str(user_id),
        "user_id": user_id,
        "account": account,
        "token_type": token_type,
    }


def user_id_from_claims(claims: Dict[str, Any]) -> int:
    """Extract the numeric user id from verified claims."""
    try:
        return int(claims.get("user_id") or claims["sub"])
    except (KeyError, TypeError, ValueError) as exc:
        raise InvalidTokenError("token has no usable user id") from exc
