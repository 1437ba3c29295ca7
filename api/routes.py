"""
REST API routes — user profiles and health.
"""

from __future__ import annotations

import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import db_session, get_auth_service
from auth.dependencies import get_current_user_id
from core.auth_service import AuthService
from utils.schemas import PublicUserProfile, UpdateProfileRequest, UserProfile

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/users/{user_id}/profile", response_model=PublicUserProfile, tags=["users"])
async def get_user_profile(
    user_id: int,
    _auth_user_id: int = Depends(get_current_user_id),
    service: AuthService = Depends(get_auth_service),
) -> PublicUserProfile:
    result = await service.get_user_profile(user_id)
    if result is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    # Contact and identity fields stay with the owner (GET /auth/profile).
    return PublicUserProfile.model_validate(result.model_dump())


@router.put("/users/me/profile", response_model=UserProfile, tags=["users"])
async def update_my_profile(
    req: UpdateProfileRequest,
    user_id: int = Depends(get_current_user_id),
    service: AuthService = Depends(get_auth_service),
) -> UserProfile:
    """Partially update the caller's introduction fields."""
    result = await service.update_profile(user_id, req)
    if result is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return result


@router.get("/health", tags=["health"])
async def health(session: AsyncSession = Depends(db_session)) -> Dict[str, Any]:
    try:
        await session.execute(text("SELECT 1"))
        database = "ok"
    except Exception as exc:
        logger.error("Health check database probe failed: %s", exc)
        await session.rollback()
        database = "unavailable"
    return {"status": "ok" if database == "ok" else "degraded", "database": database}
