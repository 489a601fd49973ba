"""
FastAPI dependencies for injection.
"""

from fastapi import Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from forumapi.core.database import get_db
from forumapi.modules.auth import AclOracle, Principal, resolve_principal
from forumapi.modules.forum.visibility import VisibilityContext


async def get_principal(
    secret: str | None = Query(None, description="API secret code"),
    db: AsyncSession = Depends(get_db),
) -> Principal:
    """Resolve the caller; anonymous when no secret is given."""
    return await resolve_principal(db, secret)


async def get_visibility_context(
    principal: Principal = Depends(get_principal),
    db: AsyncSession = Depends(get_db),
) -> VisibilityContext:
    """Build the per-request visibility context with prefetched grants."""
    oracle = await AclOracle.load(db, principal)
    return VisibilityContext(principal=principal, oracle=oracle)


__all__ = ["get_db", "get_principal", "get_visibility_context"]
