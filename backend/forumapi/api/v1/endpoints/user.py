"""
User API Endpoints.

The caller's profile and username search.
"""

from typing import Any

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from forumapi.api.deps import get_db, get_principal
from forumapi.modules.auth import Principal
from forumapi.modules.user import UserService

router = APIRouter()


@router.get("")
async def get_profile(
    principal: Principal = Depends(get_principal),
    db: AsyncSession = Depends(get_db),
) -> dict[str, Any]:
    """Get the signed-in caller's profile."""
    users = UserService(db)
    return await users.get_profile(principal)


@router.get("/search")
async def search_users(
    q: str = Query("", description="Part of a username, case-insensitive"),
    principal: Principal = Depends(get_principal),
    db: AsyncSession = Depends(get_db),
) -> dict[str, Any]:
    """Search users by name."""
    users = UserService(db)
    return await users.search(principal, q)
