"""
Auth API routes — register, login, refresh, logout, profile.

Route prefix: /api/v1/auth
"""

from __future__ import annotations

import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException, status

from api.dependencies import get_auth_service
from auth.dependencies import get_current_user_id
from core.auth_service import AuthService
from utils.schemas import (
    AuthError,
    LoginRequest,
    LoginResult,
    RefreshRequest,
    RegisterRequest,
    RegisterResult,
    UserProfile,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])

_LOGIN_STATUS = {
    AuthError.INVALID_CREDENTIALS: status.HTTP_401_UNAUTHORIZED,
    AuthError.INVALID_TOKEN: status.HTTP_401_UNAUTHORIZED,
    AuthError.ACCOUNT_DISABLED: status.HTTP_403_FORBIDDEN,
}


def _raise_for_login(result: LoginResult) -> None:
    raise HTTPException(
        status_code=_LOGIN_STATUS.get(result.error, status.HTTP_400_BAD_REQUEST),
        detail={"error": result.error.value if result.error else None, "message": result.message},
    )


@router.post("/register", response_model=RegisterResult)
async def register(
    req: RegisterRequest,
    service: AuthService = Depends(get_auth_service),
) -> RegisterResult:
    """Register a new user."""
    result = await service.register(req)
    if not result.success:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail={"error": result.error.value, "field": result.field, "message": result.message},
        )
    return result


@router.post("/login", response_model=LoginResult)
async def login(
    req: LoginRequest,
    service: AuthService = Depends(get_auth_service),
) -> LoginResult:
    """Login with account (or email) + password."""
    result = await service.login(req.account, req.password)
    if not result.success:
        _raise_for_login(result)
    return result


@router.post("/refresh", response_model=LoginResult)
async def refresh(
    req: RefreshRequest,
    service: AuthService = Depends(get_auth_service),
) -> LoginResult:
    """Exchange a refresh token for a new token pair."""
    result = await service.refresh(req.refresh_token)
    if not result.success:
        _raise_for_login(result)
    return result


@router.post("/logout")
async def logout(
    user_id: int = Depends(get_current_user_id),
    service: AuthService = Depends(get_auth_service),
) -> Dict[str, Any]:
    return {"success": await service.logout(user_id)}


@router.get("/profile", response_model=UserProfile)
async def profile(
    user_id: int = Depends(get_current_user_id),
    service: AuthService = Depends(get_auth_service),
) -> UserProfile:
    """Aggregated profile of the authenticated user."""
    result = await service.get_user_profile(user_id)
    if result is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return result
